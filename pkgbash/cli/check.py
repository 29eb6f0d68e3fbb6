"""Check command implementation."""

import logging
from pathlib import Path

from pkgbash.config import load_config
from pkgbash.errors import ConfigurationError, ParseFailure
from pkgbash.parsers import parse_file

logger = logging.getLogger("pkgbash.cli.check")


def check_command(args) -> int:
    """Execute check command.

    Parses every script and reports whether it is valid in the supported
    dialect.

    Args:
        args: Parsed command-line arguments containing:
            - sources: Scripts to check
            - config: Configuration file or inline string (optional)

    Returns:
        int: 0 when every script parsed, 1 otherwise, 2 on bad configuration.
    """
    try:
        config = load_config(getattr(args, "config", None))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2

    failed = 0
    for source in args.sources:
        path = Path(source)
        try:
            fields = parse_file(path, config.parser)
        except ParseFailure as exc:
            failed += 1
            line, column = exc.position
            print(f"{path}:{line}:{column}: expecting {exc.expected}")
            continue
        except OSError as exc:
            failed += 1
            print(f"{path}: cannot read: {exc.strerror or exc}")
            continue
        logger.debug("%s: %d fields", path, len(fields))
        print(f"{path}: ok ({len(fields)} fields)")

    if failed:
        logger.warning("%d of %d scripts failed to parse", failed, len(args.sources))
        return 1
    return 0
