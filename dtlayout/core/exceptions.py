"""Custom exceptions for memory layout resolution."""

from typing import Any, Dict, Optional, Tuple


class LayoutError(Exception):
    """Base exception for all layout resolution errors.

    Every error raised by dtlayout inherits from this class so the CLI can
    report any of them with a single except clause.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class NoApplicableStrategy(LayoutError):
    """Raised when no mapping strategy recognizes the hardware description"""

    def __init__(self, strategies: Tuple[str, ...] = ()):
        message = "No memory mapping strategy applies to this devicetree"
        if strategies:
            message += f" (tried: {', '.join(strategies)})"
        super().__init__(message, details={'tried': list(strategies)})
        self.strategies = strategies


class UnresolvedRegion(LayoutError):
    """Raised when a node has no usable address encoding.

    Examples:
    - None of reg-names/ranges/reg is present
    - The requested index is past the end of a ranges or reg list
    """

    def __init__(self, node: str, index: int, reason: str):
        message = f"Cannot resolve memory region {index} of {node}: {reason}"
        super().__init__(message, details={'node': node, 'index': index})
        self.node = node
        self.index = index


class IncompleteLayout(LayoutError):
    """Raised when a layout shape needs a region that was not resolved"""

    def __init__(self, missing: Tuple[str, ...], shape: Any):
        shape_name = getattr(shape, 'value', shape)
        message = (
            f"Layout '{shape_name}' requires {' and '.join(missing)} memory, "
            "but the devicetree does not provide it"
        )
        super().__init__(message, details={'missing': list(missing), 'shape': shape_name})
        self.missing = missing
        self.shape = shape


class DocumentError(LayoutError):
    """Raised when the devicetree cannot be loaded or a reference is dangling"""


class FitCheckError(LayoutError):
    """Raised when the firmware image cannot be read for a fit check"""
