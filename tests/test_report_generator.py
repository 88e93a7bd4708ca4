"""Unit tests for expectqa.engine.report_generator — markdown failure reports."""

from __future__ import annotations

from pathlib import Path

from expectqa.engine.diagnostics import FailureDiagnostic
from expectqa.engine.report_generator import ReportGenerator, _cell, _slug
from expectqa.errors import NoSuchElementError


# ---------------------------------------------------------------------------
# Helpers: factory functions for test data
# ---------------------------------------------------------------------------

def _make_diagnostic(**overrides) -> FailureDiagnostic:
    defaults = {
        "error_kind": "TextsMismatch",
        "summary": 'Text #0 mismatch (expected: "Three", actual: "One")',
        "details": ("Actual: [One, Two, Three]", "Expected: [Three, Two, One]", "Collection: .element"),
        "subject": ".element",
        "condition": "should have texts [Three, Two, One]",
        "expected": "[Three, Two, One]",
        "actual": "[One, Two, Three]",
        "timeout_ms": 4000,
        "elapsed_ms": 4011.6,
        "attempts": 20,
    }
    defaults.update(overrides)
    return FailureDiagnostic(**defaults)


# ---------------------------------------------------------------------------
# 1. Report sections
# ---------------------------------------------------------------------------

class TestReportSections:
    """generate() should render every section in order."""

    def test_header(self):
        report = ReportGenerator().generate(_make_diagnostic())
        assert report.startswith("# ExpectQA Failure: TextsMismatch\n")
        assert "**Subject:** .element" in report
        assert "**Condition:** should have texts [Three, Two, One]" in report
        assert "**Verdict:** FAIL" in report

    def test_summary(self):
        report = ReportGenerator().generate(_make_diagnostic())
        assert "- Attempts: 20" in report
        assert "- Elapsed: 4012 ms" in report
        assert "- Timeout: 4000 ms" in report

    def test_message_in_code_block(self):
        d = _make_diagnostic()
        report = ReportGenerator().generate(d)
        assert f"## Message\n\n```\n{d.message}\n```" in report

    def test_values_table(self):
        report = ReportGenerator().generate(_make_diagnostic())
        assert "| Expected | [Three, Two, One] |" in report
        assert "| Actual | [One, Two, Three] |" in report

    def test_section_order(self):
        report = ReportGenerator().generate(_make_diagnostic(cause=NoSuchElementError("x")))
        positions = [report.index(h) for h in ("## Summary", "## Message", "## Values", "## Evidence", "## Cause")]
        assert positions == sorted(positions)


# ---------------------------------------------------------------------------
# 2. Evidence and cause
# ---------------------------------------------------------------------------

class TestEvidenceAndCause:
    def test_no_context(self):
        report = ReportGenerator().generate(_make_diagnostic())
        assert "No diagnostic context attached." in report

    def test_context_refs(self):
        d = _make_diagnostic(has_context=True, screenshot="file:///s.png")
        report = ReportGenerator().generate(d)
        assert "- **Screenshot**: `file:///s.png`" in report
        assert "- **Page source**: `-`" in report

    def test_cause_section_only_with_cause(self):
        assert "## Cause" not in ReportGenerator().generate(_make_diagnostic())
        report = ReportGenerator().generate(_make_diagnostic(cause=NoSuchElementError("Cannot locate .x")))
        assert "`NoSuchElementError`: Cannot locate .x" in report


# ---------------------------------------------------------------------------
# 3. Writing to disk
# ---------------------------------------------------------------------------

class TestReportWrite:
    def test_write_creates_directory_and_file(self, tmp_path: Path):
        reports_dir = tmp_path / "nested" / "reports"
        path = ReportGenerator().write(_make_diagnostic(), reports_dir)
        assert path.parent == reports_dir
        assert path.suffix == ".md"
        assert path.read_text(encoding="utf-8").endswith("\n")

    def test_filename_slug(self, tmp_path: Path):
        path = ReportGenerator().write(_make_diagnostic(error_kind="ConditionNotMetError"), tmp_path)
        assert path.name.endswith("-condition-not-met-error.md")


# ---------------------------------------------------------------------------
# 4. Helpers
# ---------------------------------------------------------------------------

class TestHelpers:
    def test_cell_escapes_pipes_and_newlines(self):
        assert _cell("a|b\nc") == "a\\|b c"

    def test_cell_missing_value(self):
        assert _cell(None) == "-"
        assert _cell("") == "-"

    def test_cell_truncates(self):
        cell = _cell("x" * 500)
        assert len(cell) == 120
        assert cell.endswith("...")

    def test_slug(self):
        assert _slug("ElementNotFound") == "element-not-found"
        assert _slug("TextsMismatch") == "texts-mismatch"
