"""Command engine: ``name arg arg ...`` with backslash-continued lines.

Arguments are read in two passes. The rest of the logical line is captured
first, joining ``\\``-newline continuations, and the captured text is then
tokenized into string tokens by a parser spawned over it. Positions inside
the captured text map back to the original script for error reporting.
"""

from __future__ import annotations

import string
from typing import List, Sequence, Tuple

from pkgbash.parsers import base
from pkgbash.parsers.base import GrammarBase, WHITESPACE, rule
from pkgbash.parsers.nodes import BashString, Command

COMMAND_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "./")


class CommandGrammar(GrammarBase):
    """Rules producing ``Command`` fields."""

    @rule(base.COMMAND)
    def parse_command(self, terminators: str = "") -> Command:
        """Parse a command invocation.

        Args:
            terminators: Extra characters that end the argument line without
                being consumed (the closing backtick of a substitution).
        """
        self.skip_spaces()
        name = self.take_run_of(COMMAND_NAME_CHARS, minimum=1)
        if self.peek() != " ":
            return Command(name)
        self.advance()
        line, mapping = self._capture_line(terminators)
        return Command(name, self._tokenize_arguments(line, mapping))

    def _capture_line(self, terminators: str) -> Tuple[str, List[Tuple[int, int]]]:
        """Read the rest of the logical line.

        Returns:
            The joined line and the ``(local, original)`` offset pairs of
            each joined segment.
        """
        stops = frozenset("\n\\" + terminators)
        segments: List[str] = []
        mapping: List[Tuple[int, int]] = []
        local = 0
        while True:
            mapping.append((local, self.pos))
            start = self.pos
            self.take_run(stops)
            # A backslash that does not end the line is literal text
            while self.peek() == "\\" and not self._at_continuation():
                self.advance()
                self.take_run(stops)
            segment = self.text[start:self.pos]
            segments.append(segment)
            local += len(segment) + 1
            ch = self.peek()
            if ch == "\\":
                self.advance()
                self.skip_spaces()
                continue
            if ch == "\n":
                self.advance()
            return " ".join(segments), mapping

    def _at_continuation(self) -> bool:
        """Return True when the backslash at the cursor ends its physical line.

        Blanks between the backslash and the newline are tolerated.
        """
        text = self.text
        pos = self.pos + 1
        while pos < len(text) and text[pos] in " \t":
            pos += 1
        return pos >= len(text) or text[pos] == "\n"

    def _tokenize_arguments(
        self, line: str, mapping: Sequence[Tuple[int, int]]
    ) -> List[BashString]:
        if not line.strip(" \t\n\r\f\v"):
            return []
        tokenizer = self.spawn(line, mapping)
        tokenizer.take_run_of(WHITESPACE)
        return tokenizer.commit(tokenizer._argument_tokens)

    def _argument_tokens(self) -> List[BashString]:
        args = self.parse_single()
        while not self.at_end():
            args.extend(self.parse_single())
        return args
