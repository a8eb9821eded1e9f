"""
Command-Line Interface - Argument Parsing and Entry Point

This module provides the command-line interface for driving a single
printer. It handles:
- Command-line argument parsing
- Argument validation
- Loading driver settings
- Reporting printer errors

Usage:
    python -m py2printers print --vendor sato --host 192.168.0.60 --port 1024 \\
        --file label.txt --sku SKU-1 --expected 10
    python -m py2printers cancel --vendor zebra --host 192.168.0.61 --port 9100
    python -m py2printers --help
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from py2printers.config import load_settings
from py2printers.core.error_formatting import format_error
from py2printers.core.errors import PrinterError
from py2printers.drivers.base import PrinterDriver
from py2printers.drivers.pool import VendorType, create_printer

VENDOR_CHOICES = [v.name.lower() for v in VendorType]

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_ACKNOWLEDGED = 3
EXIT_INTERRUPTED = 130


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: List of arguments to parse. If None, uses sys.argv[1:]

    Returns:
        Parsed arguments namespace
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--vendor",
        required=True,
        choices=VENDOR_CHOICES,
        help="Printer vendor"
    )
    common.add_argument("--host", required=True, help="Printer host name or IP address")
    common.add_argument("--port", type=int, required=True, help="Printer raw TCP port")
    common.add_argument(
        "--config",
        type=str,
        default=None,
        help="Settings file (default: the shipped configs/printers.yaml)"
    )
    common.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: INFO)"
    )

    parser = argparse.ArgumentParser(
        prog="py2printers",
        description="RFID label printer control",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s print --vendor sato --host 192.168.0.60 --port 1024 --file label.txt --expected 4
  %(prog)s pause --vendor sato --host 192.168.0.60 --port 1024
  %(prog)s cancel --vendor zebra --host 192.168.0.61 --port 9100
        """
    )
    commands = parser.add_subparsers(dest="command", required=True)

    print_parser = commands.add_parser(
        "print", parents=[common], help="Print a label file and list the EPCs written"
    )
    print_parser.add_argument("--file", required=True, help="Label file in the printer language")
    print_parser.add_argument("--sku", default=None, help="SKU the label belongs to")
    print_parser.add_argument(
        "--expected",
        type=int,
        default=0,
        help="Number of tags the label should write (default: 0)"
    )

    commands.add_parser("cancel", parents=[common], help="Cancel the current job")
    commands.add_parser("pause", parents=[common], help="Pause printing")
    commands.add_parser("resume", parents=[common], help="Resume printing")

    return parser.parse_args(args)


def validate_args(args: argparse.Namespace) -> bool:
    """Validate parsed command-line arguments.

    Args:
        args: Parsed arguments from parse_args()

    Returns:
        True if arguments are valid, False otherwise
    """
    if not (1 <= args.port <= 65535):
        print(f"Error: Port must be between 1 and 65535, got {args.port}", file=sys.stderr)
        return False

    if not args.host.strip():
        print("Error: Host cannot be empty", file=sys.stderr)
        return False

    if args.command == "print":
        label_path = Path(args.file)
        if not label_path.is_file():
            print(f"Error: Label file not found: {args.file}", file=sys.stderr)
            return False
        if args.expected < 0:
            print(f"Error: Expected tag count cannot be negative, got {args.expected}",
                  file=sys.stderr)
            return False

    return True


def setup_logging(level: str):
    """Configure application logging.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    numeric_level = getattr(logging, level.upper(), None)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def run_print(printer: PrinterDriver, args: argparse.Namespace) -> int:
    content = Path(args.file).read_text(encoding=printer.settings.charset)
    printer.add_epc_observer(lambda epc, tid: print(epc, flush=True))

    epcs = printer.print(content, sku=args.sku, expected_tag_count=args.expected)

    outcome = printer.job.outcome
    print(f"{len(epcs)} EPC(s) written, outcome: {outcome.value if outcome else 'unknown'}",
          file=sys.stderr)
    return EXIT_OK


def run_control(printer: PrinterDriver, command: str) -> int:
    operation = getattr(printer, command)
    if operation():
        print(f"{command}: acknowledged", file=sys.stderr)
        return EXIT_OK
    print(f"{command}: not acknowledged", file=sys.stderr)
    return EXIT_NOT_ACKNOWLEDGED


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        args: Command-line arguments. If None, uses sys.argv[1:]

    Returns:
        Exit code (0 = success, 1 = error, 3 = command not acknowledged,
        130 = interrupted)
    """
    parsed_args = parse_args(args)

    setup_logging(parsed_args.log_level)

    logger = logging.getLogger(__name__)
    logger.debug(
        f"Arguments: command={parsed_args.command}, vendor={parsed_args.vendor}, "
        f"host={parsed_args.host}, port={parsed_args.port}"
    )

    if not validate_args(parsed_args):
        return EXIT_ERROR

    printer = None
    try:
        settings = load_settings(parsed_args.vendor, parsed_args.config)
        printer = create_printer(parsed_args.vendor, parsed_args.host, parsed_args.port,
                                 settings=settings)

        if parsed_args.command == "print":
            return run_print(printer, parsed_args)
        return run_control(printer, parsed_args.command)

    except PrinterError as e:
        logger.debug(format_error(e, 'log'))
        print(f"Error: {format_error(e, 'user')}", file=sys.stderr)
        return EXIT_ERROR

    except KeyboardInterrupt:
        if printer is not None:
            printer.interrupt()
        print("Interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
