"""Centralized defaults for polling and diagnostics."""

# Polling
DEFAULT_TIMEOUT_MS = 4000
DEFAULT_POLL_INTERVAL_MS = 200

# Project layout
DEFAULT_PROJECT_DIR = ".expectqa"
DEFAULT_REPORTS_DIR = "reports"
CONFIG_FILENAME = "config.yaml"

# Placeholder printed when a diagnostic artifact could not be captured
MISSING_ARTIFACT = "-"
