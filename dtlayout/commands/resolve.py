"""Resolve subcommand - print the memory layout chosen for a devicetree."""

import argparse
import json
import logging

from ..core.exceptions import LayoutError
from .common import add_common_arguments, load_layout, write_output

logger = logging.getLogger(__name__)


def add_resolve_parser(subparsers) -> argparse.ArgumentParser:
    """
    Add 'resolve' subcommand parser.

    Args:
        subparsers: Subparsers object from argparse

    Returns:
        The resolve parser
    """
    parser = subparsers.add_parser(
        'resolve',
        help='Resolve the memory layout of a devicetree as JSON',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  # Default layout to stdout
  dtlayout resolve design.dts

  # Keep read-only data in ROM, save to a file
  dtlayout resolve design.dts --layout ramrodata -o layout.json
        """
    )
    add_common_arguments(parser)
    parser.add_argument('-o', '--output', help='Write JSON to this file instead of stdout')
    return parser


def run_resolve(args: argparse.Namespace) -> int:
    """
    Execute the resolve subcommand.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        _, layout = load_layout(args.dts, args.layout)
        write_output(json.dumps(layout.to_dict(), indent=2) + '\n', args.output)
        return 0
    except LayoutError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("Failed to write output: %s", e)
        return 1
