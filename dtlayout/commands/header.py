"""Header subcommand - emit C macros for the resolved layout and devices."""

import argparse
import logging

from jinja2 import TemplateError

from ..core.exceptions import LayoutError
from ..emit import collect_devices, render_header
from .common import add_common_arguments, load_layout, write_output

logger = logging.getLogger(__name__)


def add_header_parser(subparsers) -> argparse.ArgumentParser:
    """Add 'header' subcommand parser."""
    parser = subparsers.add_parser(
        'header',
        help='Generate a C header with layout and device addresses',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  # Layout constants only
  dtlayout header design.dts -o metal-layout.h

  # Also emit base/size macros for every UART and SPI controller
  dtlayout header design.dts --device sifive,uart0 --device sifive,spi0
        """
    )
    add_common_arguments(parser)
    parser.add_argument(
        '--device',
        action='append',
        default=[],
        metavar='COMPAT',
        help='Emit base/size macros for nodes with this compatible (repeatable)'
    )
    parser.add_argument('-o', '--output', help='Write the header to this file instead of stdout')
    return parser


def run_header(args: argparse.Namespace) -> int:
    """
    Execute the header subcommand.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        document, layout = load_layout(args.dts, args.layout)
        devices = collect_devices(document, args.device)
        write_output(render_header(layout, devices, source=args.dts), args.output)
        return 0
    except LayoutError as e:
        logger.error("%s", e)
        return 1
    except TemplateError as e:
        logger.error("Template error: %s", e)
        return 1
    except OSError as e:
        logger.error("Failed to write output: %s", e)
        return 1
