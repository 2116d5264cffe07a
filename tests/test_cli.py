from __future__ import annotations

from pathlib import Path

import cbor2
import pytest
from typer.testing import CliRunner

from bedctl import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("BEDCTL_SETTINGS", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))


def test_settings_command_shows_defaults() -> None:
    result = runner.invoke(cli.app, ["settings"])
    assert result.exit_code == 0
    assert "Source: packaged defaults" in result.stdout
    assert "doubleTap: temperature -1F" in result.stdout
    assert "quadTap: alarm" in result.stdout


def test_settings_command_with_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("left:\n  taps:\n    quadTap: {type: base}\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["settings", "--file", str(path)])

    assert result.exit_code == 0
    assert "quadTap: base" in result.stdout
    assert "doubleTap: <none>" in result.stdout


def test_settings_command_error_is_clean(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("left:\n  taps:\n    doubleTap: {type: massage}\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["settings", "--file", str(path)])

    assert result.exit_code == 1
    assert "Error: Schema validation failed" in result.stderr
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_alarms_command(tmp_path: Path) -> None:
    path = tmp_path / "alarm.cbr"
    path.write_bytes(cbor2.dumps({"left": {"pl": 80, "du": 600, "tt": 1700000000, "pi": "rise"}}))

    result = runner.invoke(cli.app, ["alarms", "--path", str(path)])

    assert result.exit_code == 0
    assert "left: pattern=rise duration=600 trigger_time=1700000000 payload=80" in result.stdout
    assert "right:" not in result.stdout


def test_alarms_command_missing_blob(tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["alarms", "--path", str(tmp_path / "missing.cbr")])

    assert result.exit_code == 1
    assert "Error: Could not read alarm data" in result.stderr


def test_presets_command() -> None:
    result = runner.invoke(cli.app, ["presets"])
    assert result.exit_code == 0
    assert "flat: head=0 feet=0 feed_rate=50 travel_ms=3000" in result.stdout
    assert "relax: head=10 feet=1 feed_rate=50 travel_ms=3000" in result.stdout
