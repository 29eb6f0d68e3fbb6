"""Configuration schema definitions using Pydantic for validation.

Parser and output options are plain Pydantic models so that configuration
errors are caught early with clear error messages.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from pkgbash.errors import ConfigurationError


class ParserConfig(BaseModel):
    """Options for the shell-subset parser.

    Attributes:
        max_depth: Maximum nesting of functions, conditionals, command
            substitutions and brace groups before parsing is abandoned.
        encoding: Encoding used when reading script files.
        source_label: Overrides the label shown in error messages.
    """

    max_depth: int = Field(default=32, ge=1, le=64)
    encoding: str = "utf-8"
    source_label: Optional[str] = None

    model_config = {"extra": "allow"}


class OutputConfig(BaseModel):
    """Options for rendering parse results.

    Attributes:
        format: ``json`` for a JSON document, ``tree`` for a terminal tree.
        indent: JSON indentation width (0 for compact output).
    """

    format: Literal["json", "tree"] = "json"
    indent: int = Field(default=2, ge=0, le=8)

    model_config = {"extra": "allow"}


class PkgBashConfig(BaseModel):
    """Top-level configuration.

    Attributes:
        parser: Parser options.
        output: Output options.
    """

    parser: ParserConfig = Field(default_factory=ParserConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def default(cls) -> "PkgBashConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PkgBashConfig":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary.

        Returns:
            PkgBashConfig instance.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()
