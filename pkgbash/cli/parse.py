"""Parse command implementation."""

import logging
from pathlib import Path

from rich.console import Console

from pkgbash.config import load_config
from pkgbash.errors import ConfigurationError, ParseFailure
from pkgbash.export import export_json, fields_to_json, render_tree
from pkgbash.parsers import parse_file

logger = logging.getLogger("pkgbash.cli.parse")


def parse_command(args) -> int:
    """Execute parse command.

    Args:
        args: Parsed command-line arguments containing:
            - source: Script to parse
            - output: Output file path (optional, stdout when omitted)
            - format: Output format, json or tree (optional)
            - config: Configuration file or inline string (optional)

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        config = load_config(getattr(args, "config", None))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2

    source = Path(args.source)
    output_format = getattr(args, "format", None) or config.output.format
    output = getattr(args, "output", None)

    logger.info("Parsing %s (format=%s)", source, output_format)

    try:
        fields = parse_file(source, config.parser)
    except ParseFailure as exc:
        logger.error("Parse failed:\n%s", exc)
        return 1
    except OSError as exc:
        logger.error("Cannot read %s: %s", source, exc)
        return 1

    if output_format == "tree":
        tree = render_tree(fields, title=source.name)
        if output:
            with open(output, "w", encoding="utf-8") as f:
                Console(file=f, width=120, no_color=True).print(tree)
        else:
            Console().print(tree)
        return 0

    if output:
        export_json(fields, Path(output), indent=config.output.indent)
    else:
        print(fields_to_json(fields, indent=config.output.indent))
    return 0
