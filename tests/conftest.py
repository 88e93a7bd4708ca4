"""Shared fixtures for ExpectQA unit tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from expectqa.config import ExpectQAConfig, set_default_config
from expectqa.engine.assertions import Assertable


# ---------------------------------------------------------------------------
# Fake value sources
# ---------------------------------------------------------------------------

class StaticSource(Assertable):
    """Returns the same snapshot on every fetch."""

    def __init__(self, value: Any, description: str = "static") -> None:
        self.value = value
        self.description = description
        self.fetch_count = 0

    def fetch(self) -> Any:
        self.fetch_count += 1
        return self.value


class SequenceSource(Assertable):
    """Plays back a script of snapshots; exceptions in the script are raised.

    The last entry repeats once the script is exhausted.
    """

    def __init__(self, script: list[Any], description: str = "sequence") -> None:
        self.script = list(script)
        self.description = description
        self.fetch_count = 0

    def fetch(self) -> Any:
        index = min(self.fetch_count, len(self.script) - 1)
        self.fetch_count += 1
        item = self.script[index]
        if isinstance(item, BaseException):
            raise item
        return item


class FakeContext:
    """DiagnosticContext returning fixed references, or raising if told to."""

    def __init__(self, screenshot: str | None = "file:///tmp/shot.png",
                 page_source: str | None = "file:///tmp/page.html",
                 fail: bool = False) -> None:
        self.screenshot = screenshot
        self.page_source = page_source
        self.fail = fail
        self.calls = 0

    def screenshot_ref(self) -> str | None:
        self.calls += 1
        if self.fail:
            raise RuntimeError("browser has been closed")
        return self.screenshot

    def page_source_ref(self) -> str | None:
        self.calls += 1
        if self.fail:
            raise RuntimeError("browser has been closed")
        return self.page_source


# ---------------------------------------------------------------------------
# Fixture: isolated process-wide config
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def default_config(tmp_path: Path):
    """Pin the process-wide config so no test reads the developer's .expectqa/."""
    config = ExpectQAConfig(
        timeout_ms=100,
        poll_interval_ms=10,
        screenshots=False,
        page_source=False,
        project_dir=tmp_path / ".expectqa",
        reports_dir=tmp_path / ".expectqa" / "reports",
    )
    set_default_config(config)
    yield config
    set_default_config(None)


# ---------------------------------------------------------------------------
# Fixture: temporary project directory with .expectqa/ structure
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Create a temporary .expectqa/ project directory with a config file."""
    project_dir = tmp_path / ".expectqa"
    (project_dir / "reports").mkdir(parents=True)

    config_data = {
        "timeout_ms": 2500,
        "poll_interval_ms": 50,
        "screenshots": False,
        "save_reports": True,
    }
    (project_dir / "config.yaml").write_text(
        yaml.dump(config_data, default_flow_style=False), encoding="utf-8"
    )

    return project_dir
