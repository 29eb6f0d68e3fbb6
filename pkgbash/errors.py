"""Error types raised by the shell-subset parser.

The hierarchy mirrors the rest of the code base: recoverable business
errors derive from ``RecoverableError`` so callers (CLI, batch tools) can
skip a malformed script and continue with the next one.
"""

from __future__ import annotations

from typing import Tuple


class RecoverableError(Exception):
    """Base class for recoverable business errors.

    These errors indicate expected failure conditions that can be handled
    gracefully by skipping the current item and continuing processing.
    """
    pass


class ConfigurationError(RecoverableError):
    """Configuration source is malformed or contains invalid values."""
    pass


class ParseFailure(RecoverableError):
    """A script could not be parsed.

    Attributes:
        source: Label of the parsed source, used in the rendered message.
        position: ``(line, column)`` of the failure, both 1-based.
        expected: Name of the innermost grammar rule active at the failure.
    """

    def __init__(self, source: str, position: Tuple[int, int], expected: str) -> None:
        self.source = source
        self.position = position
        self.expected = expected
        super().__init__(self.render())

    @property
    def line(self) -> int:
        return self.position[0]

    @property
    def column(self) -> int:
        return self.position[1]

    def render(self) -> str:
        """Format the failure the way it is shown to users."""
        line, column = self.position
        return f'"({self.source})" (line {line}, column {column}):\nexpecting {self.expected}'

    def __reduce__(self):
        return (self.__class__, (self.source, self.position, self.expected))


__all__ = ["RecoverableError", "ConfigurationError", "ParseFailure"]
