"""Field engine and top-level driver.

A script is a sequence of fields. At each position the field forms are
tried in a fixed order, each as a trial that consumes nothing on failure:

    comment, variable, function, conditional, command

The command form must come last: its argument grammar accepts almost any
line and would otherwise swallow assignments and function headers.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from pkgbash.config.schema import ParserConfig
from pkgbash.parsers import base
from pkgbash.parsers.base import WHITESPACE, _NoMatch, rule
from pkgbash.parsers.commands import CommandGrammar
from pkgbash.parsers.conditionals import ConditionalGrammar
from pkgbash.parsers.nodes import Comment, Field, Function, Variable
from pkgbash.parsers.strings import NAME_CHARS, StringGrammar

logger = logging.getLogger("pkgbash.parsers.fields")

FUNCTION_NAME_STOPS = frozenset(" =(}\n")


class BashParser(ConditionalGrammar, CommandGrammar, StringGrammar):
    """Parser for one script buffer.

    Instances are single-use: construct one per text and call ``parse``.
    """

    def parse(self) -> List[Field]:
        """Parse the whole buffer.

        Returns:
            List[Field]: Fields in source order.

        Raises:
            ParseFailure: When the buffer is malformed, including when
                unrecognised text remains after the last field.
        """
        self.skip_spaces()
        fields = self.many(self.parse_field)
        self.skip_spaces()
        if not self.at_end():
            raise self.hard(self.pos, base.FIELD)
        return fields

    @rule(base.FIELD)
    def parse_field(self) -> Field:
        with self.nested():
            for alternative in (
                self.parse_comment,
                self.parse_variable,
                self.parse_function,
                self.parse_conditional,
                self.parse_command,
            ):
                try:
                    result = self.attempt(alternative)
                except _NoMatch:
                    continue
                self.skip_spaces()
                return result
        raise self.no_match()

    @rule(base.COMMENT)
    def parse_comment(self) -> Comment:
        self.skip_spaces()
        self.expect_char("#")
        return Comment(self.take_run("\n"))

    @rule(base.VARIABLE)
    def parse_variable(self) -> Variable:
        """Parse ``name=``, ``name=(...)`` or ``name=token``."""
        self.skip_spaces()
        name = self.take_run_of(NAME_CHARS, minimum=1)
        self.expect_char("=")
        ch = self.peek()
        if not ch or ch in WHITESPACE:
            self.advance(len(ch))
            return Variable(name)
        if ch == "(":
            return Variable(name, self.parse_array())
        return Variable(name, self.parse_single())

    @rule(base.FUNCTION)
    def parse_function(self) -> Function:
        self.skip_spaces()
        name = self.take_run(FUNCTION_NAME_STOPS, minimum=1)
        self.expect_literal("() {")
        return Function(name, self.commit(self._function_body))

    def _function_body(self) -> List[Field]:
        self.skip_spaces()
        body: List[Field] = []
        while self.peek() != "}":
            body.append(self.parse_field())
        self.advance()
        return body


def parse_bash(
    source: str, text: str, config: Optional[ParserConfig] = None
) -> List[Field]:
    """Parse script ``text`` into fields.

    Args:
        source: Label for error messages, typically the script's file name.
        text: Full script text.
        config: Parser options.

    Returns:
        List[Field]: Parsed fields in source order.

    Raises:
        ParseFailure: If the text is not valid in the supported dialect.
    """
    config = config or ParserConfig()
    label = config.source_label or source
    logger.debug("Parsing %s (%d chars)", label, len(text))
    fields = BashParser(text, label, config).parse()
    logger.debug("Parsed %s: %d top-level fields", label, len(fields))
    return fields


def parse_file(path: Union[str, Path], config: Optional[ParserConfig] = None) -> List[Field]:
    """Read and parse a script file.

    Args:
        path: Script path.
        config: Parser options; ``encoding`` selects the file encoding.

    Raises:
        OSError: If the file cannot be read.
        ParseFailure: If the script is malformed.
    """
    config = config or ParserConfig()
    path = Path(path)
    text = path.read_text(encoding=config.encoding)
    return parse_bash(path.name, text, config)


__all__ = ["BashParser", "parse_bash", "parse_file"]
