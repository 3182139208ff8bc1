"""
Assemble the four-slot layout for a requested shape.

Strategies resolve the physical ram/rom/itim regions; this module tags them
with their role attributes and decides which region fills which slot.
"""

import logging
from typing import Optional

from .exceptions import IncompleteLayout
from .models import Attribute, LinkLayoutShape, MemoryRegion, ResolvedLayout

logger = logging.getLogger(__name__)

RAM_ROLE = ('ram', Attribute.parse('wxa!ri'))
ROM_ROLE = ('flash', Attribute.parse('rxai!w'))
ITIM_ROLE = ('itim', Attribute.parse('wx!rai'))


def as_ram(region: MemoryRegion) -> MemoryRegion:
    """Tag a region as the general-purpose RAM"""
    return region.with_role(*RAM_ROLE)


def as_rom(region: MemoryRegion) -> MemoryRegion:
    """Tag a region as the non-volatile load/execute memory"""
    return region.with_role(*ROM_ROLE)


def as_itim(region: MemoryRegion) -> MemoryRegion:
    """Tag a region as the tightly-coupled instruction scratch memory"""
    return region.with_role(*ITIM_ROLE)


def needs_rom(shape: LinkLayoutShape) -> bool:
    """True if the shape places code or data in ROM"""
    return shape is not LinkLayoutShape.SCRATCHPAD


def _check_required(shape: LinkLayoutShape,
                    ram: Optional[MemoryRegion],
                    rom: Optional[MemoryRegion]) -> None:
    missing = []
    if ram is None:
        missing.append('ram')
    if rom is None and needs_rom(shape):
        missing.append('rom')
    if missing:
        raise IncompleteLayout(tuple(missing), shape)


def synthesize_layout(shape: LinkLayoutShape,
                      ram: Optional[MemoryRegion],
                      rom: Optional[MemoryRegion],
                      itim: Optional[MemoryRegion] = None,
                      strategy: str = '') -> ResolvedLayout:
    """Build the layout for ``shape`` from role-tagged regions.

    A missing ITIM is replaced by RAM (scratchpad) or ROM (default,
    ramrodata) so every slot is always filled.

    Raises:
        IncompleteLayout: If RAM, or ROM where the shape needs it, is missing
    """
    _check_required(shape, ram, rom)

    if shape is LinkLayoutShape.SCRATCHPAD:
        layout = ResolvedLayout(
            shape=shape, code=ram, scratch=itim or ram,
            data=ram, rodata=ram, strategy=strategy)
    elif shape is LinkLayoutShape.RAMRODATA:
        layout = ResolvedLayout(
            shape=shape, code=rom, scratch=itim or rom,
            data=ram, rodata=rom, strategy=strategy)
    else:
        layout = ResolvedLayout(
            shape=shape, code=rom, scratch=itim or rom,
            data=ram, rodata=ram, strategy=strategy)

    logger.debug("%s layout: code=%s scratch=%s data=%s rodata=%s",
                 shape.value, layout.code.name, layout.scratch.name,
                 layout.data.name, layout.rodata.name)
    return layout
