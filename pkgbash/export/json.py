"""JSON export for parsed scripts."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

from pkgbash.parsers.nodes import Field

logger = logging.getLogger("pkgbash.export.json")


def fields_to_data(fields: Sequence[Field]) -> List[Dict[str, Any]]:
    """Convert fields to JSON-ready mappings."""
    return [f.to_dict() for f in fields]


def fields_to_json(fields: Sequence[Field], indent: int = 2) -> str:
    """Serialize fields to a JSON document.

    Args:
        fields: Parsed fields.
        indent: Indentation width; 0 produces compact output.
    """
    return json.dumps(fields_to_data(fields), indent=indent or None, ensure_ascii=False)


def export_json(fields: Sequence[Field], output_path: Path, indent: int = 2) -> None:
    """Export fields to a JSON file.

    Args:
        fields: Parsed fields.
        output_path: Output file path.
        indent: Indentation width.
    """
    logger.info("Exporting %d fields to JSON: %s", len(fields), output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(fields_to_json(fields, indent=indent))
        f.write("\n")
