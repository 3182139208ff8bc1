"""Enumerate the memories a devicetree declares."""

import logging
from typing import List

from ..core.extractor import extract_all
from ..core.hardware import HardwareDocument, HardwareNode
from ..core.models import MemoryRegion

logger = logging.getLogger(__name__)

# Compatibles of nodes that can back a layout role. SPI flash controllers
# qualify through their memory-mapped "mem" register window.
MEMORY_COMPATIBLES = (
    'sifive,dtim0',
    'sifive,itim0',
    'sifive,sram0',
    'sifive,testram0',
    'sifive,mem0',
    'sifive,spi0',
)


def scan_memories(document: HardwareDocument) -> List[MemoryRegion]:
    """Extract every known memory of the document, sorted by base address"""
    nodes: List[HardwareNode] = []
    seen = set()

    candidates = list(document.device_type('memory'))
    for compatible in MEMORY_COMPATIBLES:
        candidates.extend(document.match(compatible))

    for node in candidates:
        if node.identity in seen:
            continue
        seen.add(node.identity)
        nodes.append(node)

    memories = extract_all(nodes)
    for memory in memories:
        logger.debug("Memory %s: 0x%08x-0x%08x (%s)", memory.name, memory.base,
                     memory.end_address, memory.compatible or 'memory')
    return memories
