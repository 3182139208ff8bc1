"""
Core layout resolution: region extraction, strategy selection and layout
synthesis. Everything in this package is pure; I/O lives in the callers.
"""

from .exceptions import (
    LayoutError,
    NoApplicableStrategy,
    UnresolvedRegion,
    IncompleteLayout,
    DocumentError,
    FitCheckError,
)
from .extractor import extract_region, extract_all
from .hardware import HardwareDocument, HardwareNode, RangeEntry
from .models import (
    Attribute,
    LinkLayoutShape,
    MemoryRegion,
    ResolvedLayout,
    SLOTS,
)
from .strategies import (
    DEFAULT_STRATEGIES,
    ChosenStrategy,
    FixedTopologyStrategy,
    MapStrategy,
    resolve_layout,
    select_strategy,
)
from .synthesizer import synthesize_layout

__all__ = [
    'LayoutError', 'NoApplicableStrategy', 'UnresolvedRegion',
    'IncompleteLayout', 'DocumentError', 'FitCheckError',
    'extract_region', 'extract_all',
    'HardwareDocument', 'HardwareNode', 'RangeEntry',
    'Attribute', 'LinkLayoutShape', 'MemoryRegion', 'ResolvedLayout', 'SLOTS',
    'DEFAULT_STRATEGIES', 'ChosenStrategy', 'FixedTopologyStrategy',
    'MapStrategy', 'resolve_layout', 'select_strategy',
    'synthesize_layout',
]
