"""Conditional engine: ``[ ... ]`` tests and if/elif/else chains.

Two forms are recognised::

    if [ "$CARCH" = "x86_64" ]; then      [ "$CARCH" = "i686" ] && arch=x86
      ...
    elif [ ... ]; then
      ...
    else
      ...
    fi

The ``&&`` shorthand carries exactly one field as its body.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from pkgbash.parsers import base
from pkgbash.parsers.base import GrammarBase, WHITESPACE, rule
from pkgbash.parsers.nodes import BashIf, Comparison, ComparisonOp, Else, Field, If, IfBlock

# Every operator needs exactly one following space to be recognised.
COMPARISON_OPERATORS = (
    ("-eq ", ComparisonOp.EQ),
    ("== ", ComparisonOp.EQ),
    ("= ", ComparisonOp.EQ),
    ("!= ", ComparisonOp.NE),
    ("-ne ", ComparisonOp.NE),
    ("-gt ", ComparisonOp.GT),
    ("> ", ComparisonOp.GT),
    ("-ge ", ComparisonOp.GE),
    ("-lt ", ComparisonOp.LT),
    ("< ", ComparisonOp.LT),
    ("-le ", ComparisonOp.LE),
)

BRANCH_KEYWORDS = ("fi", "elif", "else")


class ConditionalGrammar(GrammarBase):
    """Rules producing ``IfBlock`` fields."""

    @rule(base.IF_STATEMENT)
    def parse_conditional(self) -> IfBlock:
        self.skip_spaces()
        if self.text.startswith("if ", self.pos):
            return IfBlock(self.parse_if_chain())
        if self.peek() == "[":
            return IfBlock(self.commit(self.parse_and_statement))
        raise self.no_match()

    def parse_if_chain(self) -> If:
        """Parse ``if`` through ``fi``, including every elif/else branch.

        The whole chain counts as one level of nesting however many elif
        branches it has.
        """
        self.skip_spaces()
        self.expect_literal("if ")
        with self.nested():
            return self.commit(self._if_chain)

    def _if_chain(self) -> If:
        branches = [self._if_branch()]
        tail: Optional[BashIf] = None
        while self._branch_keyword() == "elif":
            self._match_keyword("elif")
            branches.append(self._if_branch())
        if self._branch_keyword() == "else":
            self._match_keyword("else")
            tail = Else(self._if_body(("fi",)))
        self._match_keyword("fi")
        for condition, body in reversed(branches):
            tail = If(condition, body, tail)
        return tail

    def _if_branch(self) -> Tuple[Comparison, List[Field]]:
        """Parse ``comparison; then body`` of one if/elif branch."""
        condition = self.parse_comparison()
        self.expect_literal("; then")
        return condition, self._if_body(BRANCH_KEYWORDS)

    def _if_body(self, terminators: Sequence[str]) -> List[Field]:
        """Parse fields until one of the ``terminators`` keywords is next."""
        body: List[Field] = []
        while True:
            self.skip_spaces()
            if self._branch_keyword() in terminators:
                return body
            body.append(self.parse_field())

    def _branch_keyword(self) -> Optional[str]:
        for keyword in BRANCH_KEYWORDS:
            if self.lookahead(self._match_keyword, keyword) is not None:
                return keyword
        return None

    def _match_keyword(self, keyword: str) -> str:
        if keyword == "elif":
            return self.expect_literal("elif ")
        self.expect_literal(keyword)
        ch = self.peek()
        if ch and ch not in WHITESPACE:
            raise self.no_match()
        self.advance(len(ch))
        return keyword

    def parse_and_statement(self) -> If:
        """Parse ``comparison && field``."""
        condition = self.parse_comparison()
        self.expect_literal(" && ")
        with self.nested():
            body = self.parse_field()
        return If(condition, (body,), None)

    @rule(base.COMPARISON)
    def parse_comparison(self) -> Comparison:
        """Parse ``[ left OP right ]``.

        Only the first string each operand token produces is kept.
        """
        self.skip_spaces()
        self.take_run_of("[", minimum=1)
        self.skip_spaces()
        left = self.parse_single()[0]
        op = self._comparison_operator()
        right = self.parse_single()[0]
        self.take_run_of("]", minimum=1)
        return Comparison(op, left, right)

    def _comparison_operator(self) -> ComparisonOp:
        for token, op in COMPARISON_OPERATORS:
            if self.text.startswith(token, self.pos):
                self.advance(len(token))
                return op
        raise self.no_match()
