"""Backtracking primitives shared by the grammar engines.

The grammar is ambiguous at shared prefixes (a variable, a function and a
command can all start with an identifier), so it is parsed by ordered trial
alternation over an explicit cursor rather than by a tokenizer.

Failures come in two strengths:

* ``_NoMatch`` is a soft failure. Whether the enclosing rule may try another
  alternative depends on whether input was consumed before it was raised
  (``self.pos`` moved). ``attempt`` restores the cursor so that a failed
  alternative consumes nothing.
* ``ParseFailure`` is a hard failure. ``commit`` turns soft failures raised
  inside an already recognised form into hard ones; they propagate straight
  to the caller of ``parse_bash``.

A committed failure is reported at the furthest point any alternative reached
inside the committed form, under the label of the rule active there.
"""

from __future__ import annotations

import bisect
import functools
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from pkgbash.config.schema import ParserConfig
from pkgbash.errors import ParseFailure

T = TypeVar("T")

# Expected-rule labels reported in ParseFailure.expected
FIELD = "valid field"
COMMENT = "valid comment"
VARIABLE = "valid var definition"
FUNCTION = "valid function definition"
ARRAY = "valid array"
STRING = "valid Bash string"
SINGLE_QUOTED = "single quoted string"
DOUBLE_QUOTED = "double quoted string"
BACKTICKED = "backticked string"
EXPANSION = "expansion string"
BRACE_GROUP = "valid {...} string"
COMMAND = "valid command"
IF_STATEMENT = "valid if statement"
COMPARISON = "valid comparison"
DEPTH_LIMIT = "nesting depth within limit"

WHITESPACE = frozenset(" \t\n\r\f\v")
TAB_WIDTH = 8


class _NoMatch(Exception):
    """Soft failure of a grammar rule at ``offset``."""

    def __init__(self, offset: int, expected: str) -> None:
        super().__init__(expected)
        self.offset = offset
        self.expected = expected


def line_column(text: str, offset: int) -> Tuple[int, int]:
    """Return the 1-based ``(line, column)`` of ``offset`` in ``text``.

    Tabs advance the column to the next tab stop.
    """
    line = text.count("\n", 0, offset) + 1
    column = 1
    for ch in text[text.rfind("\n", 0, offset) + 1:offset]:
        if ch == "\t":
            column += TAB_WIDTH - (column - 1) % TAB_WIDTH
        else:
            column += 1
    return line, column


def rule(label: str) -> Callable:
    """Name a grammar rule.

    While the rule runs it is the innermost active rule, so soft failures
    raised by primitives inside it carry its label. When the rule fails
    without consuming input the failure is reported under its own label.
    """

    def decorator(method: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(method)
        def wrapper(self: "GrammarBase", *args, **kwargs) -> T:
            start = self.pos
            self._labels.append(label)
            try:
                return method(self, *args, **kwargs)
            except _NoMatch as err:
                if self.pos == start and err.expected != label:
                    raise _NoMatch(start, label) from None
                raise
            finally:
                self._labels.pop()

        return wrapper

    return decorator


class GrammarBase(ABC):
    """Cursor over one source buffer plus the combinators built on it.

    Args:
        text: Source text to parse.
        source: Label used in error messages (usually a file name).
        config: Parser options; defaults are used when omitted.
        parent: Parser whose text this buffer was derived from. Errors in a
            derived buffer are reported at positions in the parent's text.
        mapping: ``(local_offset, parent_offset)`` pairs, sorted, mapping
            runs of this buffer back into the parent's text.
    """

    def __init__(
        self,
        text: str,
        source: str = "",
        config: Optional[ParserConfig] = None,
        parent: Optional["GrammarBase"] = None,
        mapping: Optional[Sequence[Tuple[int, int]]] = None,
    ) -> None:
        self.text = text
        self.source = source
        self.config = config or ParserConfig()
        self.pos = 0
        self._parent = parent
        self._mapping = list(mapping or [(0, 0)])
        self._mapping_keys = [local for local, _ in self._mapping]
        self._depth = parent._depth if parent is not None else 0
        self._labels: List[str] = []
        self._furthest: Optional[_NoMatch] = None

    # ------------------------------------------------------------------
    # Engine hooks, provided by the concrete parser
    # ------------------------------------------------------------------

    @abstractmethod
    def parse_field(self):
        """Parse one field of the script."""

    @abstractmethod
    def parse_command(self, terminators: str = ""):
        """Parse one command invocation."""

    @abstractmethod
    def parse_comment(self):
        """Parse one ``#`` comment."""

    def spawn(self, text: str, mapping: Sequence[Tuple[int, int]]) -> "GrammarBase":
        """Create a parser over text derived from this parser's buffer."""
        return type(self)(text, self.source, self.config, parent=self, mapping=mapping)

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def peek(self) -> str:
        """Return the current character, or ``""`` at end of input."""
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def advance(self, count: int = 1) -> None:
        self.pos += count

    def no_match(self) -> _NoMatch:
        expected = self._labels[-1] if self._labels else FIELD
        return _NoMatch(self.pos, expected)

    def hard(self, offset: int, expected: str) -> ParseFailure:
        """Build a ParseFailure for ``offset`` in this buffer."""
        root, absolute = self._resolve(offset)
        return ParseFailure(self.source, line_column(root.text, absolute), expected)

    def _resolve(self, offset: int) -> Tuple["GrammarBase", int]:
        index = bisect.bisect_right(self._mapping_keys, offset) - 1
        local, outer = self._mapping[max(index, 0)]
        translated = outer + (offset - local)
        if self._parent is None:
            return self, translated
        return self._parent._resolve(translated)

    # ------------------------------------------------------------------
    # Character primitives
    # ------------------------------------------------------------------

    def expect_char(self, ch: str) -> str:
        if self.peek() != ch:
            raise self.no_match()
        self.pos += 1
        return ch

    def expect_literal(self, literal: str) -> str:
        """Match ``literal`` entirely or consume nothing."""
        if not self.text.startswith(literal, self.pos):
            raise self.no_match()
        self.pos += len(literal)
        return literal

    def take_run(self, stops, minimum: int = 0) -> str:
        """Consume characters up to the first one in ``stops``."""
        start = self.pos
        text = self.text
        end = len(text)
        pos = start
        while pos < end and text[pos] not in stops:
            pos += 1
        if pos - start < minimum:
            raise self.no_match()
        self.pos = pos
        return text[start:pos]

    def take_run_of(self, allowed, minimum: int = 0) -> str:
        """Consume characters while they are in ``allowed``."""
        start = self.pos
        text = self.text
        end = len(text)
        pos = start
        while pos < end and text[pos] in allowed:
            pos += 1
        if pos - start < minimum:
            raise self.no_match()
        self.pos = pos
        return text[start:pos]

    def skip_spaces(self) -> None:
        self.take_run_of(WHITESPACE)

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def attempt(self, parser: Callable[..., T], *args) -> T:
        """Run ``parser``; on soft failure rewind so nothing is consumed.

        The failure is remembered so a later ``commit`` can report it.
        """
        start = self.pos
        try:
            return parser(*args)
        except _NoMatch as err:
            if self._furthest is None or err.offset > self._furthest.offset:
                self._furthest = err
            self.pos = start
            raise

    def optional(self, parser: Callable[..., T], *args, default: T = None) -> T:
        """Run ``parser`` as a trial, returning ``default`` when it fails."""
        try:
            return self.attempt(parser, *args)
        except _NoMatch:
            return default

    def lookahead(self, parser: Callable[..., T], *args) -> Optional[T]:
        """Run ``parser`` without consuming input; ``None`` when it fails."""
        start = self.pos
        try:
            return parser(*args)
        except _NoMatch:
            return None
        finally:
            self.pos = start

    def many(self, parser: Callable[..., T], *args) -> List[T]:
        """Apply ``parser`` zero or more times.

        Stops at the first failure that consumed nothing; a failure that did
        consume input propagates.
        """
        results: List[T] = []
        while True:
            start = self.pos
            try:
                results.append(parser(*args))
            except _NoMatch:
                if self.pos != start:
                    raise
                return results

    def many1(self, parser: Callable[..., T], *args) -> List[T]:
        first = parser(*args)
        return [first] + self.many(parser, *args)

    def commit(self, parser: Callable[..., T], *args) -> T:
        """Run ``parser`` as part of a recognised form; failures are final.

        The failure reported is the one that got furthest into the input,
        including failures of alternatives that were backtracked over while
        the form was being parsed.
        """
        outer = self._furthest
        self._furthest = None
        try:
            return parser(*args)
        except _NoMatch as err:
            deepest = err
            if self._furthest is not None and self._furthest.offset > err.offset:
                deepest = self._furthest
            raise self.hard(deepest.offset, deepest.expected) from None
        finally:
            self._furthest = outer

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Track recursion into nested fields and groups."""
        if self._depth >= self.config.max_depth:
            raise self.hard(self.pos, DEPTH_LIMIT)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
