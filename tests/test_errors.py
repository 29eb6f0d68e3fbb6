"""Tests for parse failure reporting."""

from __future__ import annotations

import pickle

import pytest

from pkgbash import ParseFailure, RecoverableError, parse_bash


def test_render_format() -> None:
    """Failures render as the source, position and expected rule."""

    with pytest.raises(ParseFailure) as excinfo:
        parse_bash("PKGBUILD", "name=(")

    failure = excinfo.value
    assert failure.render() == '"(PKGBUILD)" (line 1, column 7):\nexpecting valid array'
    assert str(failure) == failure.render()
    assert failure.line == 1
    assert failure.column == 7


def test_failure_is_recoverable() -> None:
    assert issubclass(ParseFailure, RecoverableError)


def test_failure_pickles() -> None:
    failure = ParseFailure("PKGBUILD", (3, 1), "valid field")

    restored = pickle.loads(pickle.dumps(failure))

    assert restored.source == "PKGBUILD"
    assert restored.position == (3, 1)
    assert restored.expected == "valid field"
    assert str(restored) == str(failure)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("echo \"abc\n", "double quoted string"),
        ("echo 'abc\n", "single quoted string"),
        ("echo ${name\n", "expansion string"),
        ("echo a{b,c\n", "valid {...} string"),
        ("build() {\n", "valid field"),
    ],
)
def test_expected_labels(text: str, expected: str) -> None:
    with pytest.raises(ParseFailure) as excinfo:
        parse_bash("PKGBUILD", text)

    assert excinfo.value.expected == expected


def test_committed_failure_reports_innermost_rule() -> None:
    """A failure inside a backtracked token is reported where it happened."""

    with pytest.raises(ParseFailure) as excinfo:
        parse_bash("PKGBUILD", "echo a{b,c\n")

    assert excinfo.value.position == (1, 11)
    assert excinfo.value.expected == "valid {...} string"


def test_unterminated_expansion_position() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        parse_bash("PKGBUILD", "echo ${name\n")

    assert excinfo.value.position == (1, 12)
    assert excinfo.value.expected == "expansion string"
