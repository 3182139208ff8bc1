#!/usr/bin/env python3

"""
strategies.py - Memory mapping strategies and strategy selection

A strategy decides which physical memories play the ram, rom and itim
roles for one kind of hardware description:

- ChosenStrategy: follows explicit metal,ram / metal,rom / metal,itim hints
  in /chosen
- FixedTopologyStrategy: encodes the memory map of one SiFive core family and
  picks regions from the scanned memories without consulting hints

Strategies are tried in DEFAULT_STRATEGIES order and the first applicable
one wins. Explicit hints come first because they always override a core's
default assumptions.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Tuple

from .exceptions import NoApplicableStrategy
from .extractor import extract_region
from .hardware import HardwareDocument
from .models import LinkLayoutShape, MemoryRegion, ResolvedLayout
from .synthesizer import as_itim, as_ram, as_rom, needs_rom, synthesize_layout

logger = logging.getLogger(__name__)

CHOSEN_RAM = 'metal,ram'
CHOSEN_ROM = 'metal,rom'
CHOSEN_ITIM = 'metal,itim'


class MapStrategy(ABC):
    """Base class for memory mapping strategies"""

    name = 'MapStrategy'

    @abstractmethod
    def is_applicable(self, document: HardwareDocument,
                      available_memories: Sequence[MemoryRegion]) -> bool:
        """True if this strategy understands the document"""

    @abstractmethod
    def synthesize(self, document: HardwareDocument,
                   available_memories: Sequence[MemoryRegion],
                   shape: LinkLayoutShape) -> ResolvedLayout:
        """Resolve the layout for ``shape``.

        Only called after is_applicable() returned True.
        """

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class ChosenStrategy(MapStrategy):
    """Layout driven by the metal,* hints of the /chosen node"""

    name = 'ChosenStrategy'

    def is_applicable(self, document, available_memories):
        return (document.chosen(CHOSEN_RAM) is not None
                and document.chosen(CHOSEN_ROM) is not None)

    def synthesize(self, document, available_memories, shape):
        ram = self._resolve_hint(document, CHOSEN_RAM)
        rom = self._resolve_hint(document, CHOSEN_ROM) if needs_rom(shape) else None
        itim = self._resolve_hint(document, CHOSEN_ITIM, use_index=False)

        return synthesize_layout(
            shape,
            ram=as_ram(ram) if ram else None,
            rom=as_rom(rom) if rom else None,
            itim=as_itim(itim) if itim else None,
            strategy=self.name,
        )

    @staticmethod
    def _resolve_hint(document: HardwareDocument, hint: str,
                      use_index: bool = True) -> Optional[MemoryRegion]:
        chosen = document.chosen(hint)
        if chosen is None:
            return None
        node, index = chosen
        # metal,itim always names the node's first region
        if not use_index:
            index = 0
        region = extract_region(node, index)
        logger.debug("%s -> %s[%d] 0x%x+0x%x", hint, node.identity, index,
                     region.base, region.size)
        return region


class FixedTopologyStrategy(MapStrategy):
    """Built-in memory map of one processor core family.

    ``roles`` maps 'ram', 'rom' and optionally 'itim' to a
    (compatible, ordinal) pair. The ordinal counts memories with that
    compatible in ascending base-address order, so two identical SRAMs are
    told apart by where they sit in the address map.
    """

    def __init__(self, name: str, core_compatible: str,
                 roles: Dict[str, Tuple[str, int]]):
        self.name = name
        self.core_compatible = core_compatible
        self.roles = roles

    def is_applicable(self, document, available_memories):
        return self.core_compatible in document.root_compatible()

    def synthesize(self, document, available_memories, shape):
        ram = self._pick(available_memories, 'ram')
        rom = self._pick(available_memories, 'rom') if needs_rom(shape) else None
        itim = self._pick(available_memories, 'itim')

        return synthesize_layout(
            shape,
            ram=as_ram(ram) if ram else None,
            rom=as_rom(rom) if rom else None,
            itim=as_itim(itim) if itim else None,
            strategy=self.name,
        )

    def _pick(self, available_memories: Sequence[MemoryRegion],
              role: str) -> Optional[MemoryRegion]:
        if role not in self.roles:
            return None
        compatible, ordinal = self.roles[role]
        candidates = sorted(
            (memory for memory in available_memories if memory.compatible == compatible),
            key=lambda memory: memory.base)
        if ordinal >= len(candidates):
            logger.warning("%s: %s needs %s memory #%d but only %d found",
                           self.name, role, compatible, ordinal, len(candidates))
            return None
        return candidates[ordinal]


DEFAULT_STRATEGIES: Tuple[MapStrategy, ...] = (
    ChosenStrategy(),
    FixedTopologyStrategy('DefaultE21Strategy', 'sifive,e21', {
        'itim': ('sifive,sram0', 0),
        'ram': ('sifive,sram0', 1),
        'rom': ('sifive,testram0', 0),
    }),
    FixedTopologyStrategy('DefaultE24Strategy', 'sifive,e24', {
        'itim': ('sifive,sram0', 0),
        'ram': ('sifive,sram0', 1),
        'rom': ('sifive,testram0', 0),
    }),
    FixedTopologyStrategy('DefaultE31Strategy', 'sifive,e31', {
        'itim': ('sifive,itim0', 0),
        'ram': ('sifive,dtim0', 0),
        'rom': ('sifive,testram0', 0),
    }),
    FixedTopologyStrategy('DefaultE34Strategy', 'sifive,e34', {
        'itim': ('sifive,itim0', 0),
        'ram': ('sifive,dtim0', 0),
        'rom': ('sifive,testram0', 0),
    }),
)


def select_strategy(document: HardwareDocument,
                    available_memories: Sequence[MemoryRegion],
                    strategies: Sequence[MapStrategy] = DEFAULT_STRATEGIES
                    ) -> Optional[MapStrategy]:
    """Return the first applicable strategy, or None"""
    for strategy in strategies:
        if strategy.is_applicable(document, available_memories):
            logger.debug("Selected %s", strategy.name)
            return strategy
    return None


def resolve_layout(document: HardwareDocument,
                   available_memories: Sequence[MemoryRegion],
                   shape: LinkLayoutShape = LinkLayoutShape.DEFAULT,
                   strategies: Sequence[MapStrategy] = DEFAULT_STRATEGIES
                   ) -> ResolvedLayout:
    """Select a strategy and synthesize the layout.

    Raises:
        NoApplicableStrategy: If no strategy recognizes the document
        UnresolvedRegion: If a hinted node has no usable address
        IncompleteLayout: If the shape needs a region that is missing
    """
    strategy = select_strategy(document, available_memories, strategies)
    if strategy is None:
        raise NoApplicableStrategy(tuple(s.name for s in strategies))

    logger.info("Using %s with %s layout", strategy.name, shape.value)
    return strategy.synthesize(document, available_memories, shape)

