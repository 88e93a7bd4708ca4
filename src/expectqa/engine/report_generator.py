"""ExpectQA Report Generator — Produces failure report artifacts in markdown format.

One report per failed assertion: verdict header, summary of the polling run,
the failure message exactly as raised, actual vs expected values, captured
evidence and the lookup error that caused it, if any.
"""

from __future__ import annotations

import datetime as dt
import re
from pathlib import Path

from expectqa.engine.diagnostics import FailureDiagnostic
from expectqa.models import MISSING_ARTIFACT


class ReportGenerator:
    """Generates markdown reports from failure diagnostics."""

    def generate(self, diagnostic: FailureDiagnostic) -> str:
        """Generate a complete report in markdown format.

        Args:
            diagnostic: The FailureDiagnostic to report on.

        Returns:
            Complete markdown report as a string.
        """
        sections = [
            self._header(diagnostic),
            self._summary(diagnostic),
            self._message(diagnostic),
            self._values(diagnostic),
            self._evidence(diagnostic),
            self._cause(diagnostic),
        ]
        return "\n\n".join(s for s in sections if s)

    def write(self, diagnostic: FailureDiagnostic, reports_dir: Path) -> Path:
        """Write the report for ``diagnostic`` under ``reports_dir`` and return its path."""
        reports_dir.mkdir(parents=True, exist_ok=True)
        stamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        path = reports_dir / f"{stamp}-{_slug(diagnostic.error_kind)}.md"
        path.write_text(self.generate(diagnostic) + "\n", encoding="utf-8")
        return path

    def _header(self, d: FailureDiagnostic) -> str:
        return (
            f"# ExpectQA Failure: {d.error_kind}\n"
            f"\n"
            f"**Subject:** {d.subject}\n"
            f"**Condition:** {d.condition}\n"
            f"**Verdict:** FAIL"
        )

    def _summary(self, d: FailureDiagnostic) -> str:
        return (
            f"## Summary\n"
            f"- Attempts: {d.attempts}\n"
            f"- Elapsed: {d.elapsed_ms:.0f} ms\n"
            f"- Timeout: {d.timeout_ms} ms"
        )

    def _message(self, d: FailureDiagnostic) -> str:
        return f"## Message\n\n```\n{d.message}\n```"

    def _values(self, d: FailureDiagnostic) -> str:
        lines = [
            "## Values",
            "| | Value |",
            "|---|-------|",
            f"| Expected | {_cell(d.expected)} |",
            f"| Actual | {_cell(d.actual)} |",
        ]
        return "\n".join(lines)

    def _evidence(self, d: FailureDiagnostic) -> str:
        if not d.has_context:
            return "## Evidence\n\nNo diagnostic context attached."
        return (
            "## Evidence\n"
            f"- **Screenshot**: `{d.screenshot or MISSING_ARTIFACT}`\n"
            f"- **Page source**: `{d.page_source or MISSING_ARTIFACT}`"
        )

    def _cause(self, d: FailureDiagnostic) -> str:
        if d.cause is None:
            return ""
        return f"## Cause\n\n`{type(d.cause).__name__}`: {d.cause}"


def _cell(value: str | None) -> str:
    if value is None or value == "":
        return MISSING_ARTIFACT
    text = value.replace("|", "\\|").replace("\n", " ")
    if len(text) > 120:
        text = text[:117] + "..."
    return text


def _slug(text: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "-", text).lower()
