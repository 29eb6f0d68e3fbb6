"""Configuration schema and loading for pkgbash."""

from .schema import OutputConfig, ParserConfig, PkgBashConfig
from .loader import load_config

__all__ = [
    "ParserConfig",
    "OutputConfig",
    "PkgBashConfig",
    "load_config",
]
