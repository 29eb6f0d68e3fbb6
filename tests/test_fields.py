"""Tests for field recognition and the top-level driver."""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgbash import (
    BashExpansion,
    Command,
    Comment,
    DoubleQuoted,
    Function,
    IfBlock,
    Literal,
    ParseFailure,
    SingleQuoted,
    Unquoted,
    Variable,
    parse_bash,
    parse_file,
)
from pkgbash.config import ParserConfig
from pkgbash.parsers.base import GrammarBase
from pkgbash.parsers.nodes import Node
from pkgbash.parsers.strings import StringGrammar

PKGBUILD = """\
# Maintainer: Someone <someone@example.org>
pkgname=hello
pkgver=2.12
pkgrel=1
arch=('x86_64')
source=("https://ftp.gnu.org/gnu/$pkgname/$pkgname-$pkgver.tar.gz")
depends=('glibc')

[ "$CARCH" = "i686" ] && depends=('lib32-glibc')

build() {
  cd "$pkgname-$pkgver"
  ./configure --prefix=/usr
  make
}

package() {
  cd "$pkgname-$pkgver"
  make DESTDIR=$pkgdir install
}
"""


def test_parses_complete_build_script() -> None:
    """A typical build recipe parses into fields in source order."""

    fields = parse_bash("PKGBUILD", PKGBUILD)

    assert [type(f) for f in fields] == [
        Comment,
        Variable,
        Variable,
        Variable,
        Variable,
        Variable,
        Variable,
        IfBlock,
        Function,
        Function,
    ]
    assert fields[0] == Comment(" Maintainer: Someone <someone@example.org>")
    assert fields[5] == Variable(
        "source",
        [
            DoubleQuoted(
                [
                    Literal("https://ftp.gnu.org/gnu/"),
                    BashExpansion("pkgname"),
                    Literal("/"),
                    BashExpansion("pkgname"),
                    Literal("-"),
                    BashExpansion("pkgver"),
                    Literal(".tar.gz"),
                ]
            )
        ],
    )
    build = fields[8]
    assert build.name == "build"
    assert [c.name for c in build.body] == ["cd", "./configure", "make"]
    package = fields[9]
    assert package.body[1] == Command(
        "make",
        [
            Unquoted([Literal("DESTDIR=")]),
            Unquoted([BashExpansion("pkgdir")]),
            Unquoted([Literal("install")]),
        ],
    )


def test_function_definition() -> None:
    assert parse_bash("test", "build() {\n  echo hi\n}\n") == [
        Function("build", [Command("echo", [Unquoted([Literal("hi")])])])
    ]


def test_function_name_may_contain_dashes() -> None:
    fields = parse_bash("test", "package_foo-docs() {\n  make\n}\n")

    assert fields == [Function("package_foo-docs", [Command("make")])]


def test_empty_function_body() -> None:
    assert parse_bash("test", "prepare() {\n}\n") == [Function("prepare")]


def test_unterminated_function_is_final() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        parse_bash("PKGBUILD", "build() {\n  echo hi\n")

    assert excinfo.value.expected == "valid field"
    assert excinfo.value.position == (3, 1)


def test_comment_text_excludes_hash() -> None:
    assert parse_bash("test", "  #comment\n") == [Comment("comment")]


def test_empty_assignment() -> None:
    """``name=`` followed by a newline or end of input has no value."""

    assert parse_bash("test", "x=\ny=1") == [
        Variable("x"),
        Variable("y", [Unquoted([Literal("1")])]),
    ]
    assert parse_bash("test", "x=") == [Variable("x")]


def test_assignment_preferred_over_command() -> None:
    fields = parse_bash("test", "pkgdesc='A tool'\n")

    assert fields == [Variable("pkgdesc", [SingleQuoted("A tool")])]


def test_empty_input() -> None:
    assert parse_bash("test", "") == []
    assert parse_bash("test", "\n\n   \n") == []


def test_leftover_input_is_rejected() -> None:
    """Text that no field form recognises fails the whole parse."""

    with pytest.raises(ParseFailure) as excinfo:
        parse_bash("PKGBUILD", "make\n)\n")

    assert excinfo.value.expected == "valid field"
    assert excinfo.value.position == (2, 1)


def test_nesting_depth_limit() -> None:
    config = ParserConfig(max_depth=1)

    with pytest.raises(ParseFailure) as excinfo:
        parse_bash("PKGBUILD", "build() {\n  make\n}\n", config)

    assert excinfo.value.expected == "nesting depth within limit"


def test_deep_brace_nesting_hits_default_limit() -> None:
    text = "x=" + "{a," * 40 + "b" + "}" * 40 + "\n"

    with pytest.raises(ParseFailure) as excinfo:
        parse_bash("PKGBUILD", text)

    assert excinfo.value.expected == "nesting depth within limit"


def test_source_label_overrides_error_source() -> None:
    config = ParserConfig(source_label="recipe")

    with pytest.raises(ParseFailure) as excinfo:
        parse_bash("PKGBUILD", "name=(", config)

    assert excinfo.value.source == "recipe"


def test_parse_file_uses_file_name_as_source(tmp_path: Path) -> None:
    script = tmp_path / "PKGBUILD"
    script.write_text("pkgname=hello\n", encoding="utf-8")

    assert parse_file(script) == [Variable("pkgname", [Unquoted([Literal("hello")])])]

    script.write_text("name=(", encoding="utf-8")
    with pytest.raises(ParseFailure) as excinfo:
        parse_file(str(script))

    assert excinfo.value.source == "PKGBUILD"


def test_parse_file_missing(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        parse_file(tmp_path / "missing")


def test_grammar_and_node_bases_are_abstract() -> None:
    """Only the full parser and concrete nodes can be instantiated."""

    with pytest.raises(TypeError):
        GrammarBase("x")
    with pytest.raises(TypeError):
        StringGrammar("x")
    with pytest.raises(TypeError):
        Node()
