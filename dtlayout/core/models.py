#!/usr/bin/env python3
"""
Data models for memory layout resolution.

This module contains the value types shared by the extractor, the strategies
and the emitters: memory regions with their permission attributes, the layout
shapes a caller can request, and the final four-slot layout.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple


MAX_ADDRESS = (1 << 64) - 1


class Attribute(Enum):
    """Permission and role flags of a linker memory region"""

    READABLE = 'r'
    WRITABLE = 'w'
    EXECUTABLE = 'x'
    ALLOCATABLE = 'a'
    INITIALIZED = 'i'
    NOT_READABLE = '!r'
    NOT_WRITABLE = '!w'
    NOT_ALLOCATABLE = '!a'
    NOT_INITIALIZED = '!i'

    @classmethod
    def parse(cls, codes: str) -> Tuple['Attribute', ...]:
        """Parse a short-code string such as 'wxa!ri' into ordered flags.

        Raises:
            ValueError: If the string contains an unknown code
        """
        flags = []
        i = 0
        while i < len(codes):
            code = codes[i:i + 2] if codes[i] == '!' else codes[i]
            flags.append(cls(code))
            i += len(code)
        return tuple(flags)


def attribute_string(attributes: Tuple[Attribute, ...]) -> str:
    """Render flags back to the short-code alphabet used by linker scripts"""
    return ''.join(attr.value for attr in attributes)


class LinkLayoutShape(Enum):
    """Which of the fixed four-slot topologies to produce"""

    DEFAULT = 'default'
    SCRATCHPAD = 'scratchpad'
    RAMRODATA = 'ramrodata'

    @classmethod
    def from_name(cls, name: str) -> 'LinkLayoutShape':
        """Look up a shape by its CLI name (case-insensitive)"""
        try:
            return cls(name.lower())
        except ValueError as e:
            choices = ', '.join(shape.value for shape in cls)
            raise ValueError(f"Unknown layout '{name}' (choose from {choices})") from e


@dataclass(frozen=True)
class MemoryRegion:
    """Memory region data structure"""

    name: str
    base: int
    size: int
    attributes: Tuple[Attribute, ...] = ()
    compatible: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.base <= MAX_ADDRESS:
            raise ValueError(f"Region '{self.name}' base 0x{self.base:x} does not fit in 64 bits")
        if not 0 <= self.size <= MAX_ADDRESS:
            raise ValueError(f"Region '{self.name}' size 0x{self.size:x} does not fit in 64 bits")

    @property
    def end_address(self) -> int:
        """Calculate end address (inclusive)"""
        return self.base + self.size - 1

    @property
    def attribute_string(self) -> str:
        """Attributes in linker short-code form, e.g. 'rxai!w'"""
        return attribute_string(self.attributes)

    def contains(self, address: int) -> bool:
        """True if address lies inside this region"""
        return self.base <= address <= self.end_address

    def with_role(self, name: str, attributes: Tuple[Attribute, ...]) -> 'MemoryRegion':
        """Copy of this region re-tagged for a layout role"""
        return replace(self, name=name, attributes=attributes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for JSON output"""
        return {
            'name': self.name,
            'base': self.base,
            'size': self.size,
            'end_address': self.end_address,
            'attributes': self.attribute_string,
            'compatible': self.compatible,
        }


SLOTS = ('code', 'scratch', 'data', 'rodata')


@dataclass(frozen=True)
class ResolvedLayout:
    """Four-slot memory layout handed to the emitters.

    ``code`` holds executable text, ``scratch`` the fast scratch memory,
    ``data`` initialized data and ``rodata`` the remaining read-only and
    uninitialized data. The same physical region may fill several slots.
    """

    shape: LinkLayoutShape
    code: MemoryRegion
    scratch: MemoryRegion
    data: MemoryRegion
    rodata: MemoryRegion
    strategy: str = field(default='', compare=False)

    def slot(self, slot_name: str) -> MemoryRegion:
        """Get the region filling a slot by name"""
        if slot_name not in SLOTS:
            raise KeyError(slot_name)
        return getattr(self, slot_name)

    def regions(self) -> Iterator[MemoryRegion]:
        """Yield the distinct physical regions in slot order"""
        seen = set()
        for slot_name in SLOTS:
            region = self.slot(slot_name)
            if region.name not in seen:
                seen.add(region.name)
                yield region

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for JSON output"""
        return {
            'strategy': self.strategy,
            'shape': self.shape.value,
            'slots': {slot_name: self.slot(slot_name).name for slot_name in SLOTS},
            'regions': [region.to_dict() for region in self.regions()],
        }
