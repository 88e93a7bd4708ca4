"""Diagnostic builder — turns the last poll of a failed assertion into a typed error.

Message layout (every failure message is self-contained):

    <summary line>
    <detail lines: "Actual value: ..." or "Actual: [...]" / "Expected: [...]">
    Screenshot: <ref>        -- only when a DiagnosticContext is attached
    Page source: <ref>       -- only when a DiagnosticContext is attached
    Timeout: <N> ms.
    Caused by: <Error>: ...  -- only when a lookup error was the cause

``Timeout`` always prints the configured timeout, not the elapsed time, so
log text stays reproducible.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from expectqa.engine.conditions import Condition, MismatchKind, NegatedCondition
from expectqa.errors import (
    AssertionCancelled,
    ConditionMetError,
    ConditionNotMetError,
    ElementNotFound,
    ListSizeMismatch,
    TextsMismatch,
    UIAssertionError,
)
from expectqa.models import MISSING_ARTIFACT

if TYPE_CHECKING:
    from expectqa.engine.evaluator import PollResult

logger = logging.getLogger("expectqa.engine.diagnostics")

_ERROR_BY_KIND: dict[MismatchKind, type[UIAssertionError]] = {
    MismatchKind.NOT_FOUND: ElementNotFound,
    MismatchKind.LIST_SIZE: ListSizeMismatch,
    MismatchKind.TEXTS: TextsMismatch,
}


@runtime_checkable
class DiagnosticContext(Protocol):
    """Environment snapshots taken on the failure path only."""

    def screenshot_ref(self) -> str | None: ...

    def page_source_ref(self) -> str | None: ...


@dataclasses.dataclass
class FailureDiagnostic:
    """Everything known about a failed assertion at the moment it gave up."""

    error_kind: str
    summary: str
    details: tuple[str, ...]
    subject: str
    condition: str
    expected: str
    actual: str | None
    timeout_ms: int
    elapsed_ms: float
    attempts: int
    has_context: bool = False
    screenshot: str | None = None
    page_source: str | None = None
    cause: BaseException | None = None
    report_path: str | None = None

    @property
    def message(self) -> str:
        lines = [self.summary, *self.details]
        if self.has_context:
            lines.append(f"Screenshot: {self.screenshot or MISSING_ARTIFACT}")
            lines.append(f"Page source: {self.page_source or MISSING_ARTIFACT}")
        lines.append(f"Timeout: {self.timeout_ms} ms.")
        if self.cause is not None:
            lines.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")
        return "\n".join(lines)


class DiagnosticBuilder:
    """Builds the terminal failure for an assertion that did not pass.

    Args:
        reports_dir: Where markdown failure reports are written.
        save_reports: Write a report for every failure when True.
    """

    def __init__(self, reports_dir: Path | None = None, save_reports: bool = False) -> None:
        self._reports_dir = reports_dir
        self._save_reports = save_reports and reports_dir is not None

    def build(
        self,
        condition: Condition,
        poll: PollResult,
        source_label: str,
        timeout_ms: int,
        context: DiagnosticContext | None = None,
        cancelled: bool = False,
    ) -> UIAssertionError:
        error_cls, subject, summary, details = self._classify(condition, poll, source_label, cancelled)

        actual: str | None = None
        if poll.fetched:
            actual = condition.actual_value(poll.value)

        diagnostic = FailureDiagnostic(
            error_kind=error_cls.__name__,
            summary=summary,
            details=details,
            subject=subject,
            condition=condition.description,
            expected=condition.expected_value(),
            actual=actual,
            timeout_ms=timeout_ms,
            elapsed_ms=poll.elapsed_ms,
            attempts=poll.attempts,
            cause=poll.error,
        )
        if context is not None:
            diagnostic.has_context = True
            diagnostic.screenshot = _capture("screenshot", context.screenshot_ref)
            diagnostic.page_source = _capture("page source", context.page_source_ref)

        if self._save_reports:
            self._write_report(diagnostic)

        error = error_cls(diagnostic)
        if poll.error is not None:
            error.__cause__ = poll.error
        return error

    def _classify(
        self,
        condition: Condition,
        poll: PollResult,
        source_label: str,
        cancelled: bool,
    ) -> tuple[type[UIAssertionError], str, str, tuple[str, ...]]:
        if cancelled:
            subject = condition.describe(poll.value) if poll.fetched else ""
            subject = subject or source_label
            return (
                AssertionCancelled,
                subject,
                f"Cancelled after {poll.elapsed_ms:.0f} ms: {subject} {condition.description}",
                self._actual_line(condition, poll),
            )

        if poll.error is not None or not poll.fetched:
            return (
                ElementNotFound,
                source_label,
                f"Element not found {{{source_label}}}",
                (f"Expected: {condition}",),
            )

        subject = condition.describe(poll.value) or source_label
        mismatch_fn = getattr(condition, "mismatch", None)
        mismatch = mismatch_fn(poll.value, subject) if callable(mismatch_fn) else None
        if mismatch is not None:
            return _ERROR_BY_KIND[mismatch.kind], subject, mismatch.summary, mismatch.details

        error_cls = ConditionMetError if isinstance(condition, NegatedCondition) else ConditionNotMetError
        return (
            error_cls,
            subject,
            f"{subject} {condition.description}",
            self._actual_line(condition, poll),
        )

    @staticmethod
    def _actual_line(condition: Condition, poll: PollResult) -> tuple[str, ...]:
        if not poll.fetched:
            return ()
        return (f"Actual value: {condition.actual_value(poll.value)}",)

    def _write_report(self, diagnostic: FailureDiagnostic) -> None:
        from expectqa.engine.report_generator import ReportGenerator

        try:
            path = ReportGenerator().write(diagnostic, self._reports_dir)
        except OSError as exc:
            logger.warning("Failure report could not be written: %s", exc)
            return
        diagnostic.report_path = str(path)
        logger.info("Failure report written to %s", path)


def _capture(what: str, capture: Any) -> str | None:
    """Call a context capture hook; a failing hook never masks the assertion error."""
    try:
        return capture()
    except Exception as exc:
        logger.warning("Failed to capture %s: %s", what, exc)
        return None
