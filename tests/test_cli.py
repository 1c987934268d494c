"""Integration tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from logroller.cli import app

runner = CliRunner()


def _size_config(tmp_path: Path, weight: int = 10) -> Path:
    path = tmp_path / "roll.yaml"
    path.write_text(
        f"rolling_interval: no_interval\nmax_log_file_weight: {weight}\nmax_log_backups: 2\n"
    )
    return path


class TestInit:
    def test_init_creates_config(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        config = json.loads((tmp_path / ".logroller" / "config.json").read_text())
        assert config["rolling_interval"] == "day"

    def test_init_merges_existing(self, tmp_path: Path) -> None:
        (tmp_path / ".logroller").mkdir()
        (tmp_path / ".logroller" / "config.json").write_text(json.dumps({"max_log_backups": 7}))
        result = runner.invoke(app, ["init", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        config = json.loads((tmp_path / ".logroller" / "config.json").read_text())
        assert config["max_log_backups"] == 7

    def test_init_force_resets(self, tmp_path: Path) -> None:
        (tmp_path / ".logroller").mkdir()
        (tmp_path / ".logroller" / "config.json").write_text(json.dumps({"max_log_backups": 7}))
        runner.invoke(app, ["init", "--force", "--dir", str(tmp_path)])
        config = json.loads((tmp_path / ".logroller" / "config.json").read_text())
        assert config["max_log_backups"] == 5

    def test_init_rejects_invalid_existing(self, tmp_path: Path) -> None:
        (tmp_path / ".logroller").mkdir()
        (tmp_path / ".logroller" / "config.json").write_text(json.dumps({"max_log_backups": -1}))
        result = runner.invoke(app, ["init", "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "max_log_backups" in result.output


class TestWrite:
    def test_write_appends(self, tmp_path: Path) -> None:
        log = tmp_path / "app.log"
        result = runner.invoke(app, ["write", str(log), "hello", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert log.read_text().endswith(" hello\n")

    def test_write_rolls_by_size(self, tmp_path: Path) -> None:
        log = tmp_path / "app.log"
        log.write_bytes(b"x" * 50)
        config = _size_config(tmp_path)
        result = runner.invoke(
            app, ["write", str(log), "next", "--config", str(config), "--dir", str(tmp_path)]
        )
        assert result.exit_code == 0
        assert "Rolled by size" in result.output
        assert (tmp_path / "app.log.1").read_bytes() == b"x" * 50

    def test_write_from_stdin(self, tmp_path: Path) -> None:
        log = tmp_path / "app.log"
        result = runner.invoke(
            app, ["write", str(log), "-", "--dir", str(tmp_path)], input="one\n\ntwo\n"
        )
        assert result.exit_code == 0
        lines = log.read_text().splitlines()
        assert len(lines) == 2
        assert lines[1].endswith(" two")

    def test_invalid_config_exits(self, tmp_path: Path) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("rolling_interval: fortnight\n")
        result = runner.invoke(
            app, ["write", str(tmp_path / "app.log"), "x", "--config", str(config)]
        )
        assert result.exit_code == 1
        assert "rolling_interval" in result.output


class TestStatus:
    def test_status_lists_backups(self, tmp_path: Path) -> None:
        log = tmp_path / "app.log"
        log.write_text("live\n")
        (tmp_path / "app.log.1").write_text("old")
        (tmp_path / "2024-01-01-app.log").write_text("old")
        result = runner.invoke(app, ["status", str(log), "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "app.log.1" in result.output
        assert "2024-01-01-app.log" in result.output
        assert "Size backups (1)" in result.output

    def test_status_missing_log(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["status", str(tmp_path / "app.log"), "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "not created yet" in result.output


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "logroller" in result.output
