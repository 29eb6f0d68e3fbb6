"""Syntax tree produced by the shell-subset parser.

Every node is an immutable dataclass. Sequences are stored as tuples; lists
passed to the constructors are converted so that trees built by hand compare
equal to trees produced by the parser.

Two tagged unions make up the tree:

* ``Field``: ``Comment``, ``Variable``, ``Function``, ``IfBlock``, ``Command``
* ``BashString``: ``SingleQuoted``, ``DoubleQuoted``, ``Backticked``, ``Unquoted``

Quoted and unquoted strings hold *parts*, each either a ``Literal`` or an
unresolved ``BashExpansion`` reference.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union


def _freeze(node: Any, *names: str) -> None:
    """Store list-valued attributes of a frozen dataclass as tuples."""
    for name in names:
        value = getattr(node, name)
        if not isinstance(value, tuple):
            object.__setattr__(node, name, tuple(value))


class Node(ABC):
    """Common behaviour of all syntax tree nodes."""

    KIND: ClassVar[str] = "node"

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-ready mapping tagged with ``kind``."""


# =============================================================================
# Strings
# =============================================================================


@dataclass(frozen=True)
class Literal(Node):
    """Plain text inside a double-quoted or unquoted string."""

    KIND: ClassVar[str] = "literal"

    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.KIND, "text": self.text}


@dataclass(frozen=True)
class SingleQuoted(Node):
    """``'text'``: no escapes, no expansion."""

    KIND: ClassVar[str] = "single_quoted"

    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.KIND, "text": self.text}


@dataclass(frozen=True)
class BashExpansion(Node):
    """An unresolved ``$name``, ``${name}`` or ``${name[index]}`` reference.

    Attributes:
        variable: Referenced variable name.
        indexer: Strings parsed from ``[...]``; a single empty literal when the
            reference carries no index.
    """

    KIND: ClassVar[str] = "expansion"

    variable: str
    indexer: Tuple["BashString", ...] = (SingleQuoted(""),)

    def __post_init__(self) -> None:
        _freeze(self, "indexer")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.KIND,
            "variable": self.variable,
            "indexer": [s.to_dict() for s in self.indexer],
        }


Part = Union[Literal, BashExpansion]


@dataclass(frozen=True)
class DoubleQuoted(Node):
    """``"..."``: literal runs interleaved with expansion references."""

    KIND: ClassVar[str] = "double_quoted"

    parts: Tuple[Part, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "parts")

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.KIND, "parts": [p.to_dict() for p in self.parts]}


@dataclass(frozen=True)
class Unquoted(Node):
    """One piece of a bare word.

    Holds either a single expansion reference or the literal alternatives a
    brace-expanded run produced (one ``Literal`` per alternative).
    """

    KIND: ClassVar[str] = "unquoted"

    parts: Tuple[Part, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "parts")

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.KIND, "parts": [p.to_dict() for p in self.parts]}


@dataclass(frozen=True)
class Backticked(Node):
    """`` `cmd args` ``: a command substitution, never executed."""

    KIND: ClassVar[str] = "backticked"

    command: "Command"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.KIND, "command": self.command.to_dict()}


BashString = Union[SingleQuoted, DoubleQuoted, Backticked, Unquoted]


# =============================================================================
# Conditionals
# =============================================================================


class ComparisonOp(str, Enum):
    """Operator of a ``[ left OP right ]`` test."""
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"


@dataclass(frozen=True)
class Comparison(Node):
    """A parsed ``[ ... ]`` test."""

    KIND: ClassVar[str] = "comparison"

    op: ComparisonOp
    left: BashString
    right: BashString

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.KIND,
            "op": self.op.value,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True)
class If(Node):
    """``if``/``elif`` branch; ``next`` is the following branch, if any."""

    KIND: ClassVar[str] = "if"

    condition: Comparison
    body: Tuple["Field", ...] = ()
    next: Optional["BashIf"] = None

    def __post_init__(self) -> None:
        _freeze(self, "body")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.KIND,
            "condition": self.condition.to_dict(),
            "body": [f.to_dict() for f in self.body],
            "next": self.next.to_dict() if self.next is not None else None,
        }


@dataclass(frozen=True)
class Else(Node):
    """Terminal ``else`` branch."""

    KIND: ClassVar[str] = "else"

    body: Tuple["Field", ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "body")

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.KIND, "body": [f.to_dict() for f in self.body]}


BashIf = Union[If, Else]


# =============================================================================
# Fields
# =============================================================================


@dataclass(frozen=True)
class Comment(Node):
    """``# text``; ``text`` excludes the ``#`` and the newline."""

    KIND: ClassVar[str] = "comment"

    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.KIND, "text": self.text}


@dataclass(frozen=True)
class Variable(Node):
    """``name=value`` or ``name=(values...)``."""

    KIND: ClassVar[str] = "variable"

    name: str
    value: Tuple[BashString, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "value")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.KIND,
            "name": self.name,
            "value": [s.to_dict() for s in self.value],
        }


@dataclass(frozen=True)
class Function(Node):
    """``name() { fields... }``."""

    KIND: ClassVar[str] = "function"

    name: str
    body: Tuple["Field", ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "body")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.KIND,
            "name": self.name,
            "body": [f.to_dict() for f in self.body],
        }


@dataclass(frozen=True)
class IfBlock(Node):
    """A conditional chain at field level."""

    KIND: ClassVar[str] = "if_block"

    branch: BashIf

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.KIND, "branch": self.branch.to_dict()}


@dataclass(frozen=True)
class Command(Node):
    """``name args...``; arguments are never evaluated."""

    KIND: ClassVar[str] = "command"

    name: str
    args: Tuple[BashString, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "args")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.KIND,
            "name": self.name,
            "args": [s.to_dict() for s in self.args],
        }


Field = Union[Comment, Variable, Function, IfBlock, Command]


__all__ = [
    "Node",
    "Literal",
    "BashExpansion",
    "Part",
    "SingleQuoted",
    "DoubleQuoted",
    "Unquoted",
    "Backticked",
    "BashString",
    "ComparisonOp",
    "Comparison",
    "If",
    "Else",
    "BashIf",
    "Comment",
    "Variable",
    "Function",
    "IfBlock",
    "Command",
    "Field",
]
