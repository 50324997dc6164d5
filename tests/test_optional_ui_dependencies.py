"""Regression tests for the optional CLI UI dependency (rich).

These tests verify bootstrap commands and the resolve flow keep working
with plain-text output when Rich is missing.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from ytd_resolve.cli import exit_codes
from ytd_resolve.cli.app import main
from ytd_resolve.cli.console import console, get_rich_console
from ytd_resolve.exceptions import EnvironmentError


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)
    monkeypatch.setitem(sys.modules, "rich.logging", None)


def test_help_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    code = main(["doctor"])
    assert code in (exit_codes.SUCCESS, exit_codes.GENERAL_ERROR)


def test_rich_console_raises_environment_error_when_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(EnvironmentError, match="rich is not installed"):
        get_rich_console()


def test_console_proxy_falls_back_to_plain_print(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    console.print("[bold]plain[/bold]")
    assert "plain" in capsys.readouterr().err


def test_resolve_works_without_rich(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)
    config = tmp_path / "offline.yaml"
    config.write_text("backends: []\n", encoding="utf-8")

    code = main(["https://youtu.be/dQw4w9WgXcQ", "--json", "--config", str(config)])

    assert code == exit_codes.SUCCESS
    assert json.loads(capsys.readouterr().out)["provenance"] == "synthetic"
