import json
import time
from datetime import datetime
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from opencode_stats.cli import main as cli_main
from opencode_stats.cli.main import EXIT_CODE_FAIL, app

runner = CliRunner()


def _ts(*args: int) -> int:
    return round(datetime(*args).timestamp() * 1000)


def _write_message(root: Path, idx: str, created: int, provider="openai", model="gpt-5", cost=1.0):
    directory = root / "message" / "session"
    directory.mkdir(parents=True, exist_ok=True)
    payload = {
        "id": idx,
        "sessionID": "session",
        "role": "assistant",
        "time": {"created": created},
        "providerID": provider,
        "modelID": model,
        "cost": cost,
        "tokens": {"input": 10, "output": 5, "reasoning": 0, "cache": {"read": 0, "write": 0}},
    }
    (directory / f"{idx}.json").write_text(json.dumps(payload))


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    monkeypatch.setattr(cli_main, "console", Console(width=200, color_system=None))


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    _write_message(tmp_path, "m1", _ts(2026, 1, 1, 10))
    _write_message(tmp_path, "m2", _ts(2026, 1, 1, 11), provider="anthropic", model="claude")
    _write_message(tmp_path, "m3", _ts(2026, 1, 2, 9), cost=2.5)
    return tmp_path


def test_daily_command_prints_periods(data_dir: Path):
    result = runner.invoke(app, ["--data-dir", str(data_dir), "daily"])

    assert result.exit_code == 0, result.output
    assert "Usage by Period" in result.output
    assert result.output.index("2026-01-01") < result.output.index("2026-01-02")
    assert "$4.50" in result.output


def test_weekly_command_applies_date_filters(data_dir: Path):
    result = runner.invoke(
        app,
        ["--data-dir", str(data_dir), "weekly", "--from", "2026-01-02", "--to", "2026-01-02"],
    )

    assert result.exit_code == 0, result.output
    assert "2026-W01" in result.output
    assert "$2.50" in result.output
    assert "$4.50" not in result.output


def test_models_command_filters_by_model(data_dir: Path):
    result = runner.invoke(app, ["--data-dir", str(data_dir), "models", "-m", "anthropic/claude"])

    assert result.exit_code == 0, result.output
    assert "Model Breakdown" in result.output
    assert "anthropic/claude" in result.output
    assert "openai/gpt-5" not in result.output


def test_default_command_shows_today(tmp_path: Path):
    _write_message(tmp_path, "today", round(time.time() * 1000), cost=0.75)
    _write_message(tmp_path, "old", _ts(2020, 1, 1, 12), cost=9.0)

    result = runner.invoke(app, ["--data-dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "Today" in result.output
    assert "$0.75" in result.output
    assert "$9.00" not in result.output


def test_empty_store_prints_placeholder_row(tmp_path: Path):
    result = runner.invoke(app, ["--data-dir", str(tmp_path), "monthly"])

    assert result.exit_code == 0, result.output
    assert "$0.00" in result.output


@pytest.mark.parametrize(
    "args, expected",
    [
        (["daily", "--from", "2026/01/01"], "Invalid date format"),
        (["daily", "--from", "2026-02-30"], "Invalid date value"),
        (["daily", "--from", "2026-02-01", "--to", "2026-01-31"], "Invalid date range"),
        (["models", "--model", "   "], "Invalid model filter"),
        (["--from", "2026/01/01"], "Invalid date format"),
    ],
)
def test_invalid_filters_exit_with_error(tmp_path: Path, args, expected):
    result = runner.invoke(app, ["--data-dir", str(tmp_path), *args])

    assert result.exit_code == EXIT_CODE_FAIL
    assert f"Error: {expected}" in result.output


def test_validation_runs_before_loading(tmp_path: Path, monkeypatch):
    def fail_loading(self, visitor):
        raise AssertionError("messages should not be read")

    monkeypatch.setattr(cli_main.MessageLoader, "for_each_message", fail_loading)

    result = runner.invoke(app, ["--data-dir", str(tmp_path), "yearly", "--to", "bad"])

    assert result.exit_code == EXIT_CODE_FAIL
    assert "Invalid date format" in result.output


def test_load_failure_is_reported(tmp_path: Path, monkeypatch):
    def broken(_directory):
        raise PermissionError("denied")
        yield  # pragma: no cover

    monkeypatch.setattr("opencode_stats.storage.loader.iter_json_files", broken)

    result = runner.invoke(app, ["--data-dir", str(tmp_path), "daily"])

    assert result.exit_code == EXIT_CODE_FAIL
    assert "Error: Data loading failed" in result.output


def test_config_file_supplies_data_dir(data_dir: Path, tmp_path: Path):
    config = tmp_path / "stats.json"
    config.write_text(json.dumps({"data_dir": str(data_dir), "batch_size": 1}))

    result = runner.invoke(app, ["--config", str(config), "yearly"])

    assert result.exit_code == 0, result.output
    assert "2026" in result.output
