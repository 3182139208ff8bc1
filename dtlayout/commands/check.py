"""Check subcommand - verify a linked image fits the resolved layout."""

import argparse
import json
import logging

from ..analysis import FitReport, check_fit
from ..core.exceptions import LayoutError
from .common import add_common_arguments, load_layout

logger = logging.getLogger(__name__)


def add_check_parser(subparsers) -> argparse.ArgumentParser:
    """Add 'check' subcommand parser."""
    parser = subparsers.add_parser(
        'check',
        help='Check that a firmware ELF fits the resolved layout',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  dtlayout check design.dts build/firmware.elf
  dtlayout check design.dts build/firmware.elf --layout scratchpad --json
        """
    )
    add_common_arguments(parser)
    parser.add_argument('elf_path', help='Path to the linked ELF file')
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the fit report as JSON'
    )
    return parser


def print_fit_report(report: FitReport) -> None:
    """Print per-region usage in human-readable format"""
    print("Memory usage:")
    for usage in report.regions:
        region = usage.region
        print(f"  {region.name:>6}: {usage.used_size:>10,} / {region.size:,} bytes "
              f"({usage.utilization_percent:.1f}%)")

    if report.unmapped:
        print("\nSections outside the layout:")
        for section in report.unmapped:
            print(f"  {section.name} at 0x{section.address:08x} ({section.size:,} bytes)")

    if report.overflows:
        print("\nSections overflowing their region:")
        for section in report.overflows:
            print(f"  {section.name} at 0x{section.address:08x}-0x{section.end_address:08x}")


def run_check(args: argparse.Namespace) -> int:
    """
    Execute the check subcommand.

    Returns:
        Exit code (0 if the image fits, 1 if it does not or on error)
    """
    try:
        _, layout = load_layout(args.dts, args.layout)
        report = check_fit(args.elf_path, layout)
    except LayoutError as e:
        logger.error("%s", e)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_fit_report(report)

    if not report.ok:
        logger.error("%s does not fit the %s layout", args.elf_path, layout.shape.value)
        return 1
    return 0
