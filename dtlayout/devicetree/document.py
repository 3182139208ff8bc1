#!/usr/bin/env python3

"""
document.py - pydevicetree adapter for the layout core

Wraps a parsed pydevicetree.Devicetree so the extractor and strategies can
query it through the HardwareDocument/HardwareNode interfaces. Cell decoding
is left to pydevicetree: get_reg() applies the parent's
#address-cells/#size-cells and the reg-names pairing, get_ranges() the
node's and its parent's cell layout.
"""

import logging
import re
from typing import List, Optional, Tuple

import pydevicetree
from pyparsing import ParseBaseException

from ..core.exceptions import DocumentError
from ..core.hardware import HardwareDocument, HardwareNode, RangeEntry

logger = logging.getLogger(__name__)


def _join_cells(cells: List[int]) -> int:
    """Combine big-endian 32-bit cells into one integer"""
    result = 0
    for cell in cells:
        result = (result << 32) | (cell & 0xFFFFFFFF)
    return result


class DevicetreeNode(HardwareNode):
    """HardwareNode backed by a pydevicetree node"""

    def __init__(self, node):
        self._node = node

    @property
    def identity(self) -> str:
        return self._node.get_path()

    def _cells(self, name: str) -> List[int]:
        values = self._node.get_fields(name)
        if values is None:
            return []
        return [value for value in values if isinstance(value, int)]

    def _reg_layout(self) -> Tuple[int, int]:
        parent = self._node.parent
        if parent is None:
            return self._node.address_cells(), self._node.size_cells()
        return parent.address_cells(), parent.size_cells()

    def _check_cells(self, name: str, entry_cells: int) -> None:
        count = len(self._cells(name))
        if entry_cells <= 0 or count % entry_cells:
            raise ValueError(
                f"{count} cells in '{name}' is not a multiple of {entry_cells}")

    def has_property(self, name: str) -> bool:
        return self._node.get_fields(name) is not None

    def string(self, name: str) -> Optional[str]:
        for value in self.strings(name):
            return value
        return None

    def strings(self, name: str) -> List[str]:
        """All string values of a property"""
        values = self._node.get_fields(name)
        if values is None:
            return []
        return [value for value in values if isinstance(value, str)]

    def reg_entries(self) -> List[Tuple[int, int]]:
        self._check_cells('reg', sum(self._reg_layout()))
        reg = self._node.get_reg()
        if reg is None:
            return []
        return [(address, size) for address, size in reg]

    def range_entries(self) -> List[RangeEntry]:
        parent = self._node.parent
        parent_cells = parent.address_cells() if parent is not None else 2
        self._check_cells('ranges', self._node.address_cells() + parent_cells
                          + self._node.size_cells())
        ranges = self._node.get_ranges()
        if ranges is None:
            return []
        return [RangeEntry(*entry) for entry in ranges]

    def named_reg(self, name: str) -> Optional[Tuple[int, int]]:
        try:
            self._check_cells('reg', sum(self._reg_layout()))
        except ValueError:
            return None
        reg = self._node.get_reg()
        if reg is None:
            return None
        pair = reg.get_by_name(name)
        return tuple(pair) if pair is not None else None

    def single_reg(self) -> Optional[Tuple[int, int]]:
        cells = self._cells('reg')
        if not cells or len(cells) % 2:
            return None
        half = len(cells) // 2
        return _join_cells(cells[:half]), _join_cells(cells[half:])


class DevicetreeDocument(HardwareDocument):
    """HardwareDocument backed by a parsed pydevicetree.Devicetree"""

    def __init__(self, tree):
        self._tree = tree
        self._root = DevicetreeNode(tree.root())

    def chosen(self, hint: str) -> Optional[Tuple[HardwareNode, int]]:
        values = self._tree.chosen(hint)
        if not values:
            return None
        values = list(values)
        reference = values[0]
        node = self._tree.get_by_reference(reference)
        if node is None:
            raise DocumentError(
                f"/chosen {hint} refers to {reference}, which is not a node",
                details={'hint': hint})
        index = values[1] if len(values) > 1 and isinstance(values[1], int) else 0
        return DevicetreeNode(node), index

    def root_compatible(self) -> List[str]:
        return self._root.strings('compatible')

    def match(self, pattern: str) -> List[HardwareNode]:
        # pydevicetree matches from the start of the string only
        regex = re.compile(f"(?:{pattern})$")
        matches = [DevicetreeNode(node) for node in self._tree.match(regex)]
        return sorted(matches, key=lambda node: node.identity)

    def device_type(self, device_type: str) -> List[HardwareNode]:
        matches = [
            DevicetreeNode(node) for node in self._tree.all_nodes()
            if node.get_field('device_type') == device_type
        ]
        return sorted(matches, key=lambda node: node.identity)


def parse_document(source: str) -> DevicetreeDocument:
    """Parse devicetree source text.

    Raises:
        DocumentError: If the source is not valid devicetree syntax
    """
    try:
        tree = pydevicetree.Devicetree.from_dts(source)
    except ParseBaseException as e:
        raise DocumentError(f"Invalid devicetree source: {e}") from e
    return DevicetreeDocument(tree)


def load_document(path: str) -> DevicetreeDocument:
    """Parse a .dts file, following /include/ directives.

    Raises:
        DocumentError: If the file is missing or not valid devicetree syntax
    """
    logger.info("Devicetree: %s", path)
    try:
        tree = pydevicetree.Devicetree.parseFile(path, followIncludes=True)
    except OSError as e:
        raise DocumentError(f"Cannot read devicetree {path}: {e}") from e
    except ParseBaseException as e:
        raise DocumentError(f"Invalid devicetree {path}: {e}") from e
    return DevicetreeDocument(tree)
