"""String engine: quoting styles, expansion references and brace expansion.

A string token comes in four flavours, chosen by its first character:

    'single'        literal text, no escapes, no expansion
    "double $x"     literal runs and expansion references
    `command`       a command substitution (parsed, never run)
    bare{a,b}$y     expansion references and brace-expanded literal runs

Brace expansion happens here, statically: ``pkg-{a,b}`` becomes the two
literal alternatives ``pkg-a`` and ``pkg-b``. Groups with fewer than two
comma-separated alternatives keep their braces (``lamp-{shade}``).
"""

from __future__ import annotations

import itertools
import string
from typing import List

from pkgbash.parsers import base
from pkgbash.parsers.base import GrammarBase, WHITESPACE, _NoMatch, rule
from pkgbash.parsers.nodes import (
    Backticked,
    BashExpansion,
    BashString,
    DoubleQuoted,
    Literal,
    SingleQuoted,
    Unquoted,
)

NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")

SINGLE_QUOTE_STOPS = frozenset("'\n")
DOUBLE_QUOTE_STOPS = frozenset('"\n$')
UNQUOTED_STOPS = frozenset(" \t\n${}[]()")
ALTERNATIVE_STOPS = UNQUOTED_STOPS | frozenset(",}")
ARRAY_SEPARATORS = WHITESPACE | frozenset("\\")


class StringGrammar(GrammarBase):
    """Rules producing ``BashString`` values."""

    @rule(base.STRING)
    def parse_single(self) -> List[BashString]:
        """Parse one string token and the whitespace after it.

        Returns:
            The strings the token produced. Quoted tokens produce one value;
            a bare word produces one ``Unquoted`` per piece.
        """
        ch = self.peek()
        if ch == "'":
            result: List[BashString] = [self.parse_single_quoted()]
        elif ch == '"':
            result = [self.parse_double_quoted()]
        elif ch == "`":
            result = [self.parse_backticked()]
        else:
            result = list(self.attempt(self.parse_unquoted))
        self.skip_spaces()
        return result

    @rule(base.SINGLE_QUOTED)
    def parse_single_quoted(self) -> SingleQuoted:
        self.expect_char("'")
        text = self.take_run(SINGLE_QUOTE_STOPS, minimum=1)
        self.expect_char("'")
        return SingleQuoted(text)

    @rule(base.DOUBLE_QUOTED)
    def parse_double_quoted(self) -> DoubleQuoted:
        self.expect_char('"')
        parts = self.many(self._double_quoted_part)
        self.expect_char('"')
        return DoubleQuoted(parts)

    def _double_quoted_part(self):
        if self.peek() == "$":
            return self.attempt(self.parse_expansion)
        return Literal(self.take_run(DOUBLE_QUOTE_STOPS, minimum=1))

    @rule(base.BACKTICKED)
    def parse_backticked(self) -> Backticked:
        self.expect_char("`")
        with self.nested():
            command = self.parse_command(terminators="`")
        self.expect_char("`")
        return Backticked(command)

    @rule(base.EXPANSION)
    def parse_expansion(self) -> BashExpansion:
        """Parse ``$name``, ``${name}`` or ``${name[index]}``."""
        self.expect_char("$")
        if self.peek() != "{":
            return BashExpansion(self.take_run_of(NAME_CHARS, minimum=1))
        self.advance()
        name = self.take_run_of(NAME_CHARS, minimum=1)
        if self.peek() == "[":
            self.advance()
            indexer = self.attempt(self.parse_single)
            self.expect_char("]")
            self.expect_char("}")
            return BashExpansion(name, indexer)
        self.expect_char("}")
        return BashExpansion(name)

    def parse_unquoted(self) -> List[Unquoted]:
        return self.many1(self._unquoted_piece)

    def _unquoted_piece(self) -> Unquoted:
        if self.peek() == "$":
            return Unquoted((self.attempt(self.parse_expansion),))
        alternatives = self.parse_extrapolated(UNQUOTED_STOPS)
        return Unquoted(tuple(Literal(text) for text in alternatives))

    # ------------------------------------------------------------------
    # Brace expansion
    # ------------------------------------------------------------------

    def parse_extrapolated(self, stops) -> List[str]:
        """Scan a literal run, expanding brace groups.

        The run is a sequence of chunks, each either plain text up to a
        character in ``stops`` or a brace group. The result is every
        concatenation of one alternative per chunk, leftmost chunk varying
        slowest.
        """
        chunks = [self._extrapolated_chunk(stops)]
        while True:
            try:
                chunks.append(self.attempt(self._extrapolated_chunk, stops))
            except _NoMatch:
                break
        return ["".join(combo) for combo in itertools.product(*chunks)]

    def _extrapolated_chunk(self, stops) -> List[str]:
        if self.peek() == "{":
            return self.parse_brace_pair()
        return [self.take_run(stops, minimum=1)]

    @rule(base.BRACE_GROUP)
    def parse_brace_pair(self) -> List[str]:
        """Parse ``{...}`` into its alternatives.

        Nested groups inside a segment are expanded first, so their commas
        never split the outer group.
        """
        self.expect_char("{")
        with self.nested():
            segments = [self._brace_segment()]
            while self.peek() == ",":
                self.advance()
                segments.append(self._brace_segment())
        self.expect_char("}")
        if len(segments) == 1:
            return ["{" + text + "}" for text in segments[0]]
        return [text for segment in segments for text in segment]

    def _brace_segment(self) -> List[str]:
        if self.peek() in (",", "}"):
            return [""]
        return self.parse_extrapolated(ALTERNATIVE_STOPS)

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    @rule(base.ARRAY)
    def parse_array(self) -> List[BashString]:
        """Parse ``( token token ... )`` with embedded comments skipped."""
        self.expect_char("(")
        return self.commit(self._array_items)

    def _array_items(self) -> List[BashString]:
        self.skip_spaces()
        values: List[BashString] = []
        while True:
            ch = self.peek()
            if ch == ")":
                self.advance()
                return values
            if not ch:
                raise self.no_match()
            if ch == "#":
                self.parse_comment()
                self.skip_spaces()
            elif ch in ARRAY_SEPARATORS:
                self.take_run_of(ARRAY_SEPARATORS)
            else:
                values.extend(self.parse_single())
                self.take_run_of(ARRAY_SEPARATORS)
