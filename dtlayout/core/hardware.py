"""
Read-only view of a parsed hardware description.

The core only talks to these two interfaces. ``dtlayout.devicetree`` adapts
pydevicetree to them; tests use small in-memory implementations.
"""

from abc import ABC, abstractmethod
from typing import List, NamedTuple, Optional, Tuple


class RangeEntry(NamedTuple):
    """One child-to-parent translation of a 'ranges' property"""

    child_address: int
    parent_address: int
    size: int


class HardwareNode(ABC):
    """A node of the hardware description"""

    @property
    @abstractmethod
    def identity(self) -> str:
        """Full path of the node, used for ordering and uniqueness"""

    @property
    def name(self) -> str:
        """Node name without the unit address"""
        return self.identity.rstrip('/').rsplit('/', 1)[-1].split('@', 1)[0]

    @property
    def instance(self) -> str:
        """Unit address part of the node name ('' when there is none)"""
        leaf = self.identity.rstrip('/').rsplit('/', 1)[-1]
        return leaf.split('@', 1)[1] if '@' in leaf else ''

    @abstractmethod
    def has_property(self, name: str) -> bool:
        """True if the node declares the property, even with an empty value"""

    @abstractmethod
    def string(self, name: str) -> Optional[str]:
        """First string value of a property, or None"""

    @abstractmethod
    def named_reg(self, name: str) -> Optional[Tuple[int, int]]:
        """(address, size) of the reg entry labeled ``name`` in reg-names"""

    @abstractmethod
    def reg_entries(self) -> List[Tuple[int, int]]:
        """Decode 'reg' into (address, size) entries.

        Raises:
            ValueError: If the cell count does not match the parent's
                #address-cells/#size-cells
        """

    @abstractmethod
    def range_entries(self) -> List[RangeEntry]:
        """Decode 'ranges' into translation entries.

        Raises:
            ValueError: If the cell count does not match the node's layout
        """

    @abstractmethod
    def single_reg(self) -> Optional[Tuple[int, int]]:
        """Decode the whole 'reg' property as one (address, size) pair"""

    def __repr__(self):
        return f"<{type(self).__name__} {self.identity}>"


class HardwareDocument(ABC):
    """A whole parsed hardware description"""

    @abstractmethod
    def chosen(self, hint: str) -> Optional[Tuple[HardwareNode, int]]:
        """Resolve a /chosen hint such as 'metal,ram' to (node, index)"""

    @abstractmethod
    def root_compatible(self) -> List[str]:
        """Compatible strings of the root node"""

    @abstractmethod
    def match(self, pattern: str) -> List[HardwareNode]:
        """All nodes whose compatible matches the regex, ordered by identity"""

    @abstractmethod
    def device_type(self, device_type: str) -> List[HardwareNode]:
        """All nodes with the given device_type, ordered by identity"""
