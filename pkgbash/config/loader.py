"""Helpers for loading pkgbash configuration from TOML/JSON sources.

This module provides a single entry point `load_config` that accepts
various configuration sources:

* None -> default PkgBashConfig
* dict -> PkgBashConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pkgbash.config.schema import PkgBashConfig
from pkgbash.errors import ConfigurationError

logger = logging.getLogger("pkgbash.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _detect_format(text: str) -> str:
    stripped = text.lstrip()
    # TOML tables start with "["; only a JSON object is a valid config
    return "json" if stripped.startswith("{") else "toml"


def _looks_like_path(source: str) -> bool:
    """Return True when ``source`` names an existing file."""
    if "\n" in source or _detect_format(source) == "json":
        return False
    try:
        return Path(source).is_file()
    except OSError:
        return False


def load_config(source: ConfigSource) -> PkgBashConfig:
    """Load PkgBashConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns PkgBashConfig.default()
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        PkgBashConfig instance.

    Raises:
        ConfigurationError: If the source cannot be decoded or validated.
    """
    if source is None:
        logger.debug("No config source provided; using default PkgBashConfig")
        return PkgBashConfig.default()

    if isinstance(source, dict):
        logger.debug("Loading PkgBashConfig from provided dict")
        return PkgBashConfig.from_dict(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        text: Optional[str] = None
        fmt: Optional[str] = None

        if isinstance(source, Path) or _looks_like_path(source):
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise ConfigurationError(f"Cannot read configuration {path}: {exc}") from exc
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                fmt = _detect_format(text)
            logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        else:
            text = str(source)
            fmt = _detect_format(text)
            logger.info("Loading configuration from inline %s string", fmt)

        try:
            data = json.loads(text) if fmt == "json" else tomllib.loads(text)
        except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationError(f"Malformed {fmt.upper()} configuration: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Top-level configuration must be a mapping/dict")

        return PkgBashConfig.from_dict(data)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["load_config"]
