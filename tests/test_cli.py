"""Tests for pkgbash CLI entrypoints."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

import pkgbash.main as main


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["pkgbash", *argv])
    return main.main()


def _script(tmp_path: Path, text: str, name: str = "PKGBUILD") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_main_requires_command(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Ensure missing subcommands make the CLI print help and fail."""

    exit_code = _run(monkeypatch)

    assert exit_code == 1
    assert "pkgbash" in capsys.readouterr().out


def test_main_dispatches_parse_command(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Verify that `main` parses args and dispatches parse_command."""

    captured: dict[str, object] = {}

    def fake_parse_command(args) -> int:
        captured["args"] = args
        return 0

    monkeypatch.setattr(main, "parse_command", fake_parse_command)

    exit_code = _run(monkeypatch, "parse", "PKGBUILD", "-f", "tree", "-o", str(tmp_path / "out"))

    assert exit_code == 0
    parsed = captured["args"]
    assert parsed.source == "PKGBUILD"
    assert parsed.format == "tree"
    assert parsed.output == str(tmp_path / "out")


def test_parse_prints_json(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    script = _script(tmp_path, "pkgname=hello\nmake\n")

    exit_code = _run(monkeypatch, "parse", str(script))

    assert exit_code == 0
    data = json.loads(capsys.readouterr().out)
    assert [item["kind"] for item in data] == ["variable", "command"]


def test_parse_writes_output_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    script = _script(tmp_path, "pkgname=hello\n")
    output = tmp_path / "result" / "fields.json"

    exit_code = _run(monkeypatch, "parse", str(script), "-o", str(output))

    assert exit_code == 0
    assert json.loads(output.read_text(encoding="utf-8"))[0]["name"] == "pkgname"


def test_parse_tree_format_from_config(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    """The configured output format applies when --format is omitted."""

    script = _script(tmp_path, "build() {\n  make\n}\n")

    exit_code = _run(monkeypatch, "parse", str(script), "-c", 'output.format = "tree"')

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "PKGBUILD" in output
    assert "build()" in output


def test_parse_failure_exit_code(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    script = _script(tmp_path, "name=(")

    assert _run(monkeypatch, "parse", str(script)) == 1


def test_parse_missing_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    assert _run(monkeypatch, "parse", str(tmp_path / "missing")) == 1


def test_invalid_config_exit_code(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    script = _script(tmp_path, "pkgname=hello\n")

    exit_code = _run(monkeypatch, "parse", str(script), "-c", '{"parser": {"max_depth": 0}}')

    assert exit_code == 2


def test_check_reports_each_script(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    """check keeps going after a failure and exits non-zero."""

    good = _script(tmp_path, "pkgname=hello\n", name="good")
    bad = _script(tmp_path, "name=(", name="bad")

    exit_code = _run(monkeypatch, "check", str(good), str(bad))

    assert exit_code == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"{good}: ok (1 fields)"
    assert lines[1] == f"{bad}:1:7: expecting valid array"


def test_check_all_valid(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    good = _script(tmp_path, "pkgname=hello\n")

    assert _run(monkeypatch, "check", str(good)) == 0
