"""Main CLI entry point for pkgbash.

Provides commands: parse, check
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from pkgbash import __version__
from pkgbash.cli.check import check_command
from pkgbash.cli.parse import parse_command

logger = logging.getLogger("pkgbash.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def main() -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = argparse.ArgumentParser(
        prog="pkgbash",
        description="pkgbash - static parser for package-build shell scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse a script and print its syntax tree",
    )
    parse_parser.add_argument(
        "source",
        help="Script to parse (e.g. PKGBUILD)",
    )
    parse_parser.add_argument(
        "-o",
        "--output",
        help="Output file (default: stdout)",
    )
    parse_parser.add_argument(
        "-f",
        "--format",
        choices=["json", "tree"],
        help="Output format (default: json, or the configured output.format)",
    )
    parse_parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional configuration. Can be a path to a TOML/JSON file or an "
            "inline TOML/JSON string. When omitted, built-in defaults are used."
        ),
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check that scripts parse, reporting the first error in each",
    )
    check_parser.add_argument(
        "sources",
        nargs="+",
        help="Scripts to check",
    )
    check_parser.add_argument(
        "-c",
        "--config",
        help="Optional configuration (path or inline TOML/JSON string)",
    )

    args = parser.parse_args()

    setup_logging(args.verbose)

    if args.command == "parse":
        return parse_command(args)
    elif args.command == "check":
        return check_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
