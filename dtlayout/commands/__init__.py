"""Subcommands of the dtlayout CLI."""

from .check import add_check_parser, run_check
from .header import add_header_parser, run_header
from .resolve import add_resolve_parser, run_resolve

__all__ = [
    'add_check_parser', 'run_check',
    'add_header_parser', 'run_header',
    'add_resolve_parser', 'run_resolve',
]
