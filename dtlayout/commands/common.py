"""Argument and loading helpers shared by the subcommands."""

import argparse
import logging
import sys
from typing import Optional, Tuple

from ..core.models import LinkLayoutShape, ResolvedLayout
from ..core.strategies import resolve_layout
from ..devicetree import DevicetreeDocument, load_document, scan_memories

logger = logging.getLogger(__name__)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the devicetree, layout and verbosity arguments"""
    parser.add_argument('dts', help='Path to the Devicetree source for the target')
    parser.add_argument(
        '--layout',
        choices=[shape.value for shape in LinkLayoutShape],
        default=LinkLayoutShape.DEFAULT.value,
        help='Layout shape to resolve (default: %(default)s)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )


def load_layout(dts_path: str, layout_name: str) -> Tuple[DevicetreeDocument, ResolvedLayout]:
    """Parse the devicetree and resolve the requested layout.

    Raises:
        LayoutError: If the devicetree cannot be loaded or resolved
    """
    document = load_document(dts_path)
    memories = scan_memories(document)
    logger.info("Found %d memories", len(memories))

    layout = resolve_layout(document, memories, LinkLayoutShape.from_name(layout_name))
    for slot_name, region in layout.to_dict()['slots'].items():
        logger.debug("Slot %s -> %s", slot_name, region)
    for region in layout.regions():
        logger.info("%6s: 0x%08x-0x%08x (%s)", region.name, region.base,
                    region.end_address, region.attribute_string)
    return document, layout


def write_output(text: str, output_path: Optional[str]) -> None:
    """Write text to a file, or stdout when no path is given"""
    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text)
        logger.info("Wrote %s", output_path)
    else:
        sys.stdout.write(text)
