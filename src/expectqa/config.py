"""ExpectQA configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from expectqa.models import (
    CONFIG_FILENAME,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_PROJECT_DIR,
    DEFAULT_REPORTS_DIR,
    DEFAULT_TIMEOUT_MS,
)

# Environment variable -> config field
ENV_OVERRIDES = {
    "EXPECTQA_TIMEOUT_MS": "timeout_ms",
    "EXPECTQA_POLL_INTERVAL_MS": "poll_interval_ms",
    "EXPECTQA_SCREENSHOTS": "screenshots",
    "EXPECTQA_SAVE_REPORTS": "save_reports",
}

_INT_KEYS = ("timeout_ms", "poll_interval_ms")
_BOOL_KEYS = ("screenshots", "page_source", "save_reports")


class ExpectQAConfigError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


@dataclass
class ExpectQAConfig:
    """Settings shared by every assertion in a process."""

    # Polling
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS

    # Diagnostics
    screenshots: bool = True
    page_source: bool = True
    save_reports: bool = False

    # Paths
    project_dir: Path = field(default_factory=lambda: Path(DEFAULT_PROJECT_DIR))
    reports_dir: Path = field(default_factory=lambda: Path(DEFAULT_PROJECT_DIR) / DEFAULT_REPORTS_DIR)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Reject values the poll loop cannot work with."""
        if self.timeout_ms < 0:
            raise ExpectQAConfigError(
                f"timeout_ms must be >= 0, got {self.timeout_ms}\n\n"
                "To fix: expectqa config set timeout_ms 4000"
            )
        if self.poll_interval_ms <= 0:
            raise ExpectQAConfigError(
                f"poll_interval_ms must be > 0, got {self.poll_interval_ms}\n\n"
                "To fix: expectqa config set poll_interval_ms 200"
            )

    @classmethod
    def from_file(cls, config_path: Path) -> ExpectQAConfig:
        """Load config from a YAML file."""
        if not config_path.exists():
            raise ExpectQAConfigError(f"Config file not found: {config_path}\n\nTo fix: expectqa init")
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ExpectQAConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ExpectQAConfigError(f"Config file must be a YAML mapping: {config_path}")
        return cls._from_dict(data, config_path.parent)

    @classmethod
    def _from_dict(cls, data: dict[str, Any], project_dir: Path) -> ExpectQAConfig:
        """Create config from a dictionary."""
        values: dict[str, Any] = {"project_dir": project_dir}

        for key in _INT_KEYS:
            if key in data:
                values[key] = _coerce_int(key, data[key])
        for key in _BOOL_KEYS:
            if key in data:
                values[key] = _coerce_bool(data[key])

        if "reports_dir" in data:
            values["reports_dir"] = project_dir / data["reports_dir"]
        else:
            values["reports_dir"] = project_dir / DEFAULT_REPORTS_DIR

        return cls(**values)

    def with_env_overrides(self, environ: dict[str, str] | None = None) -> ExpectQAConfig:
        """Return a copy with EXPECTQA_* environment variables applied."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "timeout_ms": self.timeout_ms,
            "poll_interval_ms": self.poll_interval_ms,
            "screenshots": self.screenshots,
            "page_source": self.page_source,
            "save_reports": self.save_reports,
            "project_dir": self.project_dir,
            "reports_dir": self.reports_dir,
        }
        for env_name, key in ENV_OVERRIDES.items():
            raw = env.get(env_name)
            if raw is None or raw == "":
                continue
            if key in _INT_KEYS:
                values[key] = _coerce_int(env_name, raw)
            else:
                values[key] = _coerce_bool(raw)
        return ExpectQAConfig(**values)


def load_config(project_dir: Path | None = None, environ: dict[str, str] | None = None) -> ExpectQAConfig:
    """Resolve the effective configuration.

    Resolution order (highest priority first):
    1. EXPECTQA_* environment variables
    2. Project config (.expectqa/config.yaml)
    3. Built-in defaults
    """
    project_dir = project_dir or Path(DEFAULT_PROJECT_DIR)
    config_path = project_dir / CONFIG_FILENAME
    if config_path.is_file():
        config = ExpectQAConfig.from_file(config_path)
    else:
        config = ExpectQAConfig(project_dir=project_dir, reports_dir=project_dir / DEFAULT_REPORTS_DIR)
    return config.with_env_overrides(environ)


# ---------------------------------------------------------------------------
# Process-wide default, used when an assertion omits timeout / poll interval
# ---------------------------------------------------------------------------

_default_config: ExpectQAConfig | None = None


def get_default_config() -> ExpectQAConfig:
    """Return the process-wide config, resolving it on first use."""
    global _default_config
    if _default_config is None:
        _default_config = load_config()
    return _default_config


def set_default_config(config: ExpectQAConfig | None) -> None:
    """Replace the process-wide config. ``None`` forces re-resolution on next use."""
    global _default_config
    _default_config = config


def _coerce_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ExpectQAConfigError(f"Invalid integer value for '{key}': {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ExpectQAConfigError(f"Invalid integer value for '{key}': {value!r}") from exc


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)
