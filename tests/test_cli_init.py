"""Unit tests for expectqa.cli.init_cmd — the 'expectqa init' command."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.exceptions import Exit as ClickExit

from expectqa.cli.init_cmd import _SAMPLE_CONFIG, init
from expectqa.config import ExpectQAConfig
from expectqa.models import DEFAULT_POLL_INTERVAL_MS, DEFAULT_TIMEOUT_MS


# ---------------------------------------------------------------------------
# 1. Directory structure creation
# ---------------------------------------------------------------------------

class TestInitDirectoryStructure:
    """expectqa init should create the .expectqa/ directory tree."""

    def test_creates_project_and_reports_dirs(self, tmp_path: Path):
        init(dir=tmp_path, force=False)
        assert (tmp_path / ".expectqa").is_dir()
        assert (tmp_path / ".expectqa" / "reports").is_dir()

    def test_config_yaml_written(self, tmp_path: Path):
        init(dir=tmp_path, force=False)
        config_path = tmp_path / ".expectqa" / "config.yaml"
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        assert data["timeout_ms"] == DEFAULT_TIMEOUT_MS

    def test_written_config_loads(self, tmp_path: Path):
        init(dir=tmp_path, force=False)
        cfg = ExpectQAConfig.from_file(tmp_path / ".expectqa" / "config.yaml")
        assert cfg.reports_dir == tmp_path / ".expectqa" / "reports"


# ---------------------------------------------------------------------------
# 2. Existing directory handling
# ---------------------------------------------------------------------------

class TestInitExistingDirectory:
    """expectqa init should not overwrite an existing project without --force."""

    def test_existing_dir_raises_without_force(self, tmp_path: Path):
        (tmp_path / ".expectqa").mkdir()
        # typer.Exit raises click.exceptions.Exit (not SystemExit) when called directly
        with pytest.raises((SystemExit, ClickExit)):
            init(dir=tmp_path, force=False)

    def test_existing_dir_succeeds_with_force(self, tmp_path: Path):
        project_dir = tmp_path / ".expectqa"
        project_dir.mkdir()
        (project_dir / "config.yaml").write_text("timeout_ms: 1\n", encoding="utf-8")

        init(dir=tmp_path, force=True)
        data = yaml.safe_load((project_dir / "config.yaml").read_text(encoding="utf-8"))
        assert data["timeout_ms"] == DEFAULT_TIMEOUT_MS


# ---------------------------------------------------------------------------
# 3. .gitignore handling
# ---------------------------------------------------------------------------

class TestInitGitignore:
    def test_creates_gitignore(self, tmp_path: Path):
        init(dir=tmp_path, force=False)
        assert ".expectqa/reports/" in (tmp_path / ".gitignore").read_text(encoding="utf-8")

    def test_appends_to_existing_gitignore(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("__pycache__/\n", encoding="utf-8")
        init(dir=tmp_path, force=False)
        content = (tmp_path / ".gitignore").read_text(encoding="utf-8")
        assert content.startswith("__pycache__/\n")
        assert ".expectqa/reports/" in content

    def test_does_not_duplicate_entry(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text(".expectqa/reports/\n", encoding="utf-8")
        init(dir=tmp_path, force=False)
        content = (tmp_path / ".gitignore").read_text(encoding="utf-8")
        assert content.count(".expectqa/reports/") == 1


# ---------------------------------------------------------------------------
# 4. Sample config is valid YAML
# ---------------------------------------------------------------------------

class TestSampleConfig:
    def test_sample_config_is_valid_yaml(self):
        data = yaml.safe_load(_SAMPLE_CONFIG)
        assert isinstance(data, dict)
        assert data["poll_interval_ms"] == DEFAULT_POLL_INTERVAL_MS
        assert data["save_reports"] is False
        assert data["reports_dir"] == "reports"
