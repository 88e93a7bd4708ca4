"""Unit tests for expectqa.cli — 'expectqa config', '--version' and 'install' via the Typer app."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml
from typer.testing import CliRunner

from expectqa import __version__
from expectqa.cli.app import app
from expectqa.config import load_config

runner = CliRunner()


# ---------------------------------------------------------------------------
# 1. Global options
# ---------------------------------------------------------------------------

class TestGlobalOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ---------------------------------------------------------------------------
# 2. config show
# ---------------------------------------------------------------------------

class TestConfigShow:
    def test_shows_file_values(self, tmp_project_dir: Path, monkeypatch):
        monkeypatch.delenv("EXPECTQA_TIMEOUT_MS", raising=False)
        result = runner.invoke(app, ["config", "show", "--dir", str(tmp_project_dir)])
        assert result.exit_code == 0
        assert "2500 ms" in result.output
        assert "config.yaml" in result.output

    def test_env_source_reported(self, tmp_project_dir: Path, monkeypatch):
        monkeypatch.setenv("EXPECTQA_TIMEOUT_MS", "9000")
        result = runner.invoke(app, ["config", "show", "--dir", str(tmp_project_dir)])
        assert result.exit_code == 0
        assert "9000 ms" in result.output
        assert "EXPECTQA_TIMEOUT_MS" in result.output

    def test_invalid_config_exits_2(self, tmp_path: Path):
        project_dir = tmp_path / ".expectqa"
        project_dir.mkdir()
        (project_dir / "config.yaml").write_text("poll_interval_ms: 0\n", encoding="utf-8")
        result = runner.invoke(app, ["config", "show", "--dir", str(project_dir)])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# 3. config set
# ---------------------------------------------------------------------------

class TestConfigSet:
    def _read(self, project_dir: Path) -> dict:
        return yaml.safe_load((project_dir / "config.yaml").read_text(encoding="utf-8"))

    def test_sets_integer(self, tmp_project_dir: Path):
        result = runner.invoke(app, ["config", "set", "timeout_ms", "10000", "--dir", str(tmp_project_dir)])
        assert result.exit_code == 0
        assert self._read(tmp_project_dir)["timeout_ms"] == 10000

    def test_sets_boolean(self, tmp_project_dir: Path):
        result = runner.invoke(app, ["config", "set", "screenshots", "true", "--dir", str(tmp_project_dir)])
        assert result.exit_code == 0
        assert self._read(tmp_project_dir)["screenshots"] is True

    @pytest.mark.parametrize("key, raw, expected", [
        ("screenshots", "on", True),
        ("screenshots", " Yes ", True),
        ("save_reports", "off", False),
    ])
    def test_boolean_spellings_match_loader(self, tmp_project_dir: Path, key, raw, expected):
        result = runner.invoke(app, ["config", "set", key, raw, "--dir", str(tmp_project_dir)])
        assert result.exit_code == 0
        assert self._read(tmp_project_dir)[key] is expected
        assert getattr(load_config(tmp_project_dir, environ={}), key) is expected

    def test_preserves_other_keys(self, tmp_project_dir: Path):
        runner.invoke(app, ["config", "set", "reports_dir", "artifacts", "--dir", str(tmp_project_dir)])
        data = self._read(tmp_project_dir)
        assert data["reports_dir"] == "artifacts"
        assert data["poll_interval_ms"] == 50

    def test_invalid_integer_exits_2(self, tmp_project_dir: Path):
        result = runner.invoke(app, ["config", "set", "timeout_ms", "soon", "--dir", str(tmp_project_dir)])
        assert result.exit_code == 2
        assert self._read(tmp_project_dir)["timeout_ms"] == 2500

    def test_out_of_range_value_exits_2(self, tmp_project_dir: Path):
        result = runner.invoke(app, ["config", "set", "poll_interval_ms", "0", "--dir", str(tmp_project_dir)])
        assert result.exit_code == 2
        assert self._read(tmp_project_dir)["poll_interval_ms"] == 50

    def test_unknown_key_exits_2(self, tmp_project_dir: Path):
        result = runner.invoke(app, ["config", "set", "budget", "5", "--dir", str(tmp_project_dir)])
        assert result.exit_code == 2

    def test_creates_config_when_missing(self, tmp_path: Path):
        project_dir = tmp_path / ".expectqa"
        result = runner.invoke(app, ["config", "set", "timeout_ms", "100", "--dir", str(project_dir)])
        assert result.exit_code == 0
        assert self._read(project_dir) == {"timeout_ms": 100}


# ---------------------------------------------------------------------------
# 4. install
# ---------------------------------------------------------------------------

class TestInstall:
    @patch("expectqa.cli.install.subprocess.run")
    def test_runs_playwright_install(self, mock_run: MagicMock):
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
        result = runner.invoke(app, ["install", "--browsers", "chromium,firefox", "--ci"])
        assert result.exit_code == 0
        cmd = mock_run.call_args[0][0]
        assert cmd[1:] == ["-m", "playwright", "install", "chromium", "firefox"]

    @patch("expectqa.cli.install.subprocess.run")
    def test_failure_exits_3(self, mock_run: MagicMock):
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="boom")
        result = runner.invoke(app, ["install"])
        assert result.exit_code == 3

    @patch("expectqa.cli.install.subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="x", timeout=600))
    def test_timeout_exits_3(self, mock_run: MagicMock):
        result = runner.invoke(app, ["install", "--ci"])
        assert result.exit_code == 3
