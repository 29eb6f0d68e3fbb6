"""Terminal tree rendering of parsed scripts using Rich."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.text import Text
from rich.tree import Tree

from pkgbash.parsers.nodes import (
    Backticked,
    BashExpansion,
    BashIf,
    BashString,
    Command,
    Comment,
    Comparison,
    ComparisonOp,
    DoubleQuoted,
    Else,
    Field,
    Function,
    IfBlock,
    Literal,
    Part,
    SingleQuoted,
    Variable,
)

OPERATOR_SYMBOLS = {
    ComparisonOp.EQ: "=",
    ComparisonOp.NE: "!=",
    ComparisonOp.GT: "-gt",
    ComparisonOp.GE: "-ge",
    ComparisonOp.LT: "-lt",
    ComparisonOp.LE: "-le",
}


def format_expansion(expansion: BashExpansion) -> str:
    index = " ".join(format_string(s) for s in expansion.indexer)
    if index in ("", "''"):
        return "${%s}" % expansion.variable
    return "${%s[%s]}" % (expansion.variable, index)


def _format_part(part: Part) -> str:
    if isinstance(part, Literal):
        return part.text
    return format_expansion(part)


def format_string(value: BashString) -> str:
    """Render a string node back in shell-like notation.

    Brace-expanded alternatives are shown separated by ``|``.
    """
    if isinstance(value, SingleQuoted):
        return "'%s'" % value.text
    if isinstance(value, DoubleQuoted):
        return '"%s"' % "".join(_format_part(p) for p in value.parts)
    if isinstance(value, Backticked):
        return "`%s`" % format_command(value.command)
    return "|".join(_format_part(p) for p in value.parts)


def format_command(command: Command) -> str:
    return " ".join([command.name] + [format_string(a) for a in command.args])


def format_comparison(comparison: Comparison) -> str:
    return "[ %s %s %s ]" % (
        format_string(comparison.left),
        OPERATOR_SYMBOLS[comparison.op],
        format_string(comparison.right),
    )


def _add_branch(tree: Tree, branch: Optional[BashIf], keyword: str) -> None:
    while branch is not None:
        if isinstance(branch, Else):
            node = tree.add(Text("else", style="bold magenta"))
            _add_fields(node, branch.body)
            return
        label = Text(keyword + " ", style="bold magenta")
        label.append(format_comparison(branch.condition))
        node = tree.add(label)
        _add_fields(node, branch.body)
        branch = branch.next
        keyword = "elif"


def _add_fields(tree: Tree, fields: Sequence[Field]) -> None:
    for f in fields:
        if isinstance(f, Comment):
            tree.add(Text("#" + f.text, style="dim"))
        elif isinstance(f, Variable):
            label = Text(f.name, style="bold cyan")
            label.append(" = ")
            label.append(" ".join(format_string(v) for v in f.value))
            tree.add(label)
        elif isinstance(f, Function):
            node = tree.add(Text(f.name + "()", style="bold green"))
            _add_fields(node, f.body)
        elif isinstance(f, IfBlock):
            node = tree.add(Text("conditional", style="magenta"))
            _add_branch(node, f.branch, "if")
        else:
            tree.add(Text(format_command(f)))


def render_tree(fields: Sequence[Field], title: str = "script") -> Tree:
    """Build a Rich tree for ``fields``.

    Args:
        fields: Parsed fields.
        title: Label of the root node.

    Returns:
        Tree renderable; print it with a ``rich.console.Console``.
    """
    tree = Tree(Text(title, style="bold"))
    _add_fields(tree, fields)
    return tree
