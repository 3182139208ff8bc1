#!/usr/bin/env python3
"""
Command-line entry point for dtlayout.

Resolves firmware memory layouts from devicetree hardware descriptions.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .commands import (
    add_check_parser,
    add_header_parser,
    add_resolve_parser,
    run_check,
    run_header,
    run_resolve,
)

COMMANDS = {
    'resolve': run_resolve,
    'header': run_header,
    'check': run_check,
}


def configure_logging(verbose: bool = False) -> None:
    """Configure basic logging for the entry point."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s: %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with all subcommands"""
    parser = argparse.ArgumentParser(
        prog='dtlayout',
        description='Resolve firmware memory layouts from devicetrees',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True
    add_resolve_parser(subparsers)
    add_header_parser(subparsers)
    add_check_parser(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(getattr(args, 'verbose', False))
    return COMMANDS[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
