"""Devicetree loading and memory discovery."""

from .document import DevicetreeDocument, DevicetreeNode, load_document, parse_document
from .scan import MEMORY_COMPATIBLES, scan_memories

__all__ = [
    'DevicetreeDocument', 'DevicetreeNode', 'load_document', 'parse_document',
    'MEMORY_COMPATIBLES', 'scan_memories',
]
