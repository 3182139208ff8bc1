#!/usr/bin/env python3

"""
extractor.py - Resolve a hardware node into a memory region

Memory nodes describe their address window in one of several encodings
depending on whether they are plain memories, address-translating bus
bridges, or peripherals that expose a memory window next to their control
registers. Each encoding is decoded by its own attempt function; the
attempts run in a fixed order and the first one that recognizes its
encoding decides the result:

1. reg-names/reg pairing, entry labeled "mem" (index ignored)
2. ranges, child side of entry ``index``
3. reg, entry ``index`` decoded with the parent's cell sizes
4. reg read as a single (address, size) pair (index must be 0)

An attempt returns None when its encoding is absent, and raises
UnresolvedRegion when the encoding is present but cannot be used.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .exceptions import UnresolvedRegion
from .hardware import HardwareNode
from .models import MemoryRegion

logger = logging.getLogger(__name__)

MEMORY_REG_NAME = 'mem'

ExtractionAttempt = Callable[[HardwareNode, int], Optional[Tuple[int, int]]]


def _select(node: HardwareNode, index: int, entries: Sequence, prop: str):
    if not entries:
        raise UnresolvedRegion(node.identity, index, f"'{prop}' has no entries")
    if index >= len(entries):
        raise UnresolvedRegion(
            node.identity, index,
            f"'{prop}' has only {len(entries)} entries")
    return entries[index]


def from_named_reg(node: HardwareNode, index: int) -> Optional[Tuple[int, int]]:
    """Named register pairing: the reg entry labeled 'mem'"""
    if not node.has_property('reg-names'):
        return None
    pair = node.named_reg(MEMORY_REG_NAME)
    if pair is None:
        raise UnresolvedRegion(
            node.identity, index,
            f"reg-names has no '{MEMORY_REG_NAME}' entry")
    return pair


def from_ranges(node: HardwareNode, index: int) -> Optional[Tuple[int, int]]:
    """Translatable address ranges: child address and size of one entry"""
    if not node.has_property('ranges'):
        return None
    try:
        entries = node.range_entries()
    except ValueError as e:
        raise UnresolvedRegion(node.identity, index, f"malformed 'ranges': {e}") from e
    entry = _select(node, index, entries, 'ranges')
    return entry.child_address, entry.size


def from_reg_list(node: HardwareNode, index: int) -> Optional[Tuple[int, int]]:
    """Raw register blocks: one (address, size) entry of 'reg'"""
    if not node.has_property('reg'):
        return None
    try:
        entries = node.reg_entries()
    except ValueError as e:
        # Cell sizes don't line up; leave it to the single-tuple reading
        logger.debug("%s: cannot split 'reg' into entries (%s)", node.identity, e)
        return None
    return _select(node, index, entries, 'reg')


def from_single_reg(node: HardwareNode, index: int) -> Optional[Tuple[int, int]]:
    """Single implicit tuple: the whole 'reg' as one pair"""
    if index != 0:
        raise UnresolvedRegion(node.identity, index, "'reg' holds a single region")
    pair = node.single_reg()
    if pair is None:
        raise UnresolvedRegion(
            node.identity, index,
            "node has none of 'reg-names', 'ranges' or 'reg'")
    return pair


# Order matters - most specific encoding first
EXTRACTION_ATTEMPTS: Tuple[ExtractionAttempt, ...] = (
    from_named_reg,
    from_ranges,
    from_reg_list,
    from_single_reg,
)


def extract_region(node: HardwareNode, index: int = 0, name: str = '') -> MemoryRegion:
    """Resolve base/size/compatible of a memory node.

    Args:
        node: Hardware node describing the memory
        index: Which entry of a ranges/reg list to use
        name: Label for the returned region (defaults to the node name)

    Returns:
        MemoryRegion without attributes; strategies add role attributes

    Raises:
        UnresolvedRegion: If no encoding yields a non-empty region
    """
    if index < 0:
        raise UnresolvedRegion(node.identity, index, "negative index")

    pair = None
    for attempt in EXTRACTION_ATTEMPTS:
        pair = attempt(node, index)
        if pair is not None:
            logger.debug("%s[%d] resolved by %s", node.identity, index, attempt.__name__)
            break

    base, size = pair
    if size == 0:
        raise UnresolvedRegion(node.identity, index, "region has zero size")

    try:
        return MemoryRegion(
            name=name or node.name,
            base=base,
            size=size,
            compatible=node.string('compatible'),
        )
    except ValueError as e:
        raise UnresolvedRegion(node.identity, index, str(e)) from e


def extract_all(nodes: List[HardwareNode]) -> List[MemoryRegion]:
    """Extract entry 0 of every node that resolves, sorted by base address"""
    regions = []
    for node in nodes:
        try:
            regions.append(extract_region(node))
        except UnresolvedRegion as e:
            logger.debug("Skipping %s: %s", node.identity, e)
    regions.sort(key=lambda region: (region.base, region.name))
    return regions
