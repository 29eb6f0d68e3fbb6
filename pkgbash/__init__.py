"""pkgbash - static parser for package-build shell scripts.

Turns the shell subset used by build recipes (variable assignments, arrays,
functions, commands and ``[ ... ]`` conditionals) into an immutable syntax
tree, so build metadata can be extracted without running the script.
"""

__version__ = "0.1.0"

from pkgbash.errors import ConfigurationError, ParseFailure, RecoverableError
from pkgbash.parsers import parse_bash, parse_file
from pkgbash.parsers.nodes import (
    Backticked,
    BashExpansion,
    Command,
    Comment,
    Comparison,
    ComparisonOp,
    DoubleQuoted,
    Else,
    Function,
    If,
    IfBlock,
    Literal,
    SingleQuoted,
    Unquoted,
    Variable,
)

__all__ = [
    "__version__",
    "parse_bash",
    "parse_file",
    "ParseFailure",
    "ConfigurationError",
    "RecoverableError",
    "Backticked",
    "BashExpansion",
    "Command",
    "Comment",
    "Comparison",
    "ComparisonOp",
    "DoubleQuoted",
    "Else",
    "Function",
    "If",
    "IfBlock",
    "Literal",
    "SingleQuoted",
    "Unquoted",
    "Variable",
]
