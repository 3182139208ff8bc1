#!/usr/bin/env python3
"""
Check that a linked firmware image fits a resolved layout.

Allocated ELF sections are mapped onto the layout's physical regions by
address, with a binary search over the regions sorted by base address.
Sections that start outside every region, or run past the end of the
region they start in, make the image not fit.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from elftools.common.exceptions import ELFError
from elftools.elf.constants import SH_FLAGS
from elftools.elf.elffile import ELFFile

from ..core.exceptions import FitCheckError
from ..core.models import MemoryRegion, ResolvedLayout

logger = logging.getLogger(__name__)


@dataclass
class SectionInfo:
    """Allocated ELF section"""

    name: str
    address: int
    size: int

    @property
    def end_address(self) -> int:
        """Last byte occupied by the section"""
        return self.address + self.size - 1


@dataclass
class RegionUsage:
    """Sections placed in one layout region"""

    region: MemoryRegion
    sections: List[SectionInfo] = field(default_factory=list)

    @property
    def used_size(self) -> int:
        """Bytes of the region occupied by sections"""
        return sum(section.size for section in self.sections)

    @property
    def free_size(self) -> int:
        """Bytes left (negative when over-committed)"""
        return self.region.size - self.used_size

    @property
    def utilization_percent(self) -> float:
        """Used share of the region in percent"""
        return self.used_size / self.region.size * 100 if self.region.size else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for JSON output"""
        return {
            'region': self.region.name,
            'base': self.region.base,
            'size': self.region.size,
            'used_size': self.used_size,
            'free_size': self.free_size,
            'utilization_percent': round(self.utilization_percent, 2),
            'sections': [section.name for section in self.sections],
        }


@dataclass
class FitReport:
    """Result of mapping an image onto a layout"""

    regions: List[RegionUsage]
    unmapped: List[SectionInfo] = field(default_factory=list)
    overflows: List[SectionInfo] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if every section sits entirely inside one region"""
        return not self.unmapped and not self.overflows and all(
            usage.free_size >= 0 for usage in self.regions)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for JSON output"""
        return {
            'ok': self.ok,
            'regions': [usage.to_dict() for usage in self.regions],
            'unmapped': [section.name for section in self.unmapped],
            'overflows': [section.name for section in self.overflows],
        }


def read_sections(elf_path: str) -> List[SectionInfo]:
    """Read the non-empty allocated sections of an ELF file.

    Raises:
        FitCheckError: If the file cannot be read or is not a valid ELF
    """
    sections = []
    try:
        with open(elf_path, 'rb') as f:
            elffile = ELFFile(f)
            for section in elffile.iter_sections():
                if not section.name:
                    continue
                # Only sections loaded into memory
                if not section['sh_flags'] & SH_FLAGS.SHF_ALLOC:
                    continue
                if section['sh_size'] == 0:
                    continue
                sections.append(SectionInfo(
                    name=section.name,
                    address=section['sh_addr'],
                    size=section['sh_size'],
                ))
    except (IOError, OSError) as e:
        raise FitCheckError(f"Cannot read ELF file {elf_path}: {e}") from e
    except ELFError as e:
        raise FitCheckError(f"Invalid ELF file {elf_path}: {e}") from e

    logger.debug("%s: %d allocated sections", elf_path, len(sections))
    return sections


class RegionLookup:
    """Address-to-region lookup over the distinct regions of a layout"""

    def __init__(self, regions: List[MemoryRegion]):
        self._sorted = sorted(regions, key=lambda region: region.base)

    def find(self, address: int) -> Optional[MemoryRegion]:
        """Region containing address, or None"""
        left, right = 0, len(self._sorted)
        while left < right:
            mid = (left + right) // 2
            region = self._sorted[mid]
            if address < region.base:
                right = mid
            elif address > region.end_address:
                left = mid + 1
            else:
                return region
        return None


def map_sections(sections: List[SectionInfo], layout: ResolvedLayout) -> FitReport:
    """Place sections into the layout's regions and collect problems"""
    usages = {region.name: RegionUsage(region) for region in layout.regions()}
    lookup = RegionLookup([usage.region for usage in usages.values()])
    report = FitReport(regions=list(usages.values()))

    for section in sections:
        region = lookup.find(section.address)
        if region is None:
            logger.warning("Section %s at 0x%08x is outside the layout",
                           section.name, section.address)
            report.unmapped.append(section)
            continue
        usages[region.name].sections.append(section)
        if section.end_address > region.end_address:
            logger.warning("Section %s overflows %s by %d bytes", section.name,
                           region.name, section.end_address - region.end_address)
            report.overflows.append(section)

    return report


def check_fit(elf_path: str, layout: ResolvedLayout) -> FitReport:
    """Read an ELF image and map it onto the layout"""
    return map_sections(read_sections(elf_path), layout)
