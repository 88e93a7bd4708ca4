"""Assertion entry points: ``should_have`` / ``should_not_have``.

Both are thin: resolve timeout and poll interval (explicit argument first,
process-wide config otherwise), run the ``PollingEvaluator`` and raise the
failure it returns. ``should_not_have`` is ``should_have`` on the negated
condition.
"""

from __future__ import annotations

import abc
import datetime as dt
import threading
from typing import TYPE_CHECKING, Any

from expectqa.config import ExpectQAConfig, get_default_config
from expectqa.engine.conditions import Condition, negate
from expectqa.engine.diagnostics import DiagnosticBuilder, DiagnosticContext
from expectqa.engine.evaluator import PollingEvaluator

if TYPE_CHECKING:
    from expectqa.sources import ValueSource

Timeout = int | float | dt.timedelta


def should_have(
    source: ValueSource,
    condition: Condition,
    timeout_ms: Timeout | None = None,
    *,
    poll_interval_ms: int | None = None,
    context: DiagnosticContext | None = None,
    cancel_event: threading.Event | None = None,
    config: ExpectQAConfig | None = None,
) -> None:
    """Wait until ``source`` satisfies ``condition``; raise a ``UIAssertionError`` otherwise."""
    _run(source, condition, timeout_ms, poll_interval_ms, context, cancel_event, config)


def should_not_have(
    source: ValueSource,
    condition: Condition,
    timeout_ms: Timeout | None = None,
    *,
    poll_interval_ms: int | None = None,
    context: DiagnosticContext | None = None,
    cancel_event: threading.Event | None = None,
    config: ExpectQAConfig | None = None,
) -> None:
    """Wait until ``source`` no longer satisfies ``condition``; raise ``ConditionMetError`` otherwise."""
    _run(source, negate(condition), timeout_ms, poll_interval_ms, context, cancel_event, config)


def _run(
    source: ValueSource,
    condition: Condition,
    timeout_ms: Timeout | None,
    poll_interval_ms: int | None,
    context: DiagnosticContext | None,
    cancel_event: threading.Event | None,
    config: ExpectQAConfig | None,
) -> None:
    config = config or get_default_config()
    timeout = config.timeout_ms if timeout_ms is None else to_millis(timeout_ms)
    interval = config.poll_interval_ms if poll_interval_ms is None else poll_interval_ms
    if context is None:
        context = getattr(source, "diagnostics", None)

    evaluator = PollingEvaluator(DiagnosticBuilder(config.reports_dir, config.save_reports))
    outcome = evaluator.evaluate(
        source,
        condition,
        timeout,
        interval,
        context=context,
        cancel_event=cancel_event,
    )
    outcome.raise_for_failure()


def to_millis(timeout: Timeout) -> int:
    """Normalize a timeout given as milliseconds or a ``timedelta``."""
    if isinstance(timeout, dt.timedelta):
        return int(timeout.total_seconds() * 1000)
    return int(timeout)


class Assertable(abc.ABC):
    """Mixin giving a value source fluent ``should_have`` / ``should_not_have``.

    Subclasses provide ``description`` and ``fetch()``; they may set
    ``diagnostics`` (failure-path screenshots) and ``config``.
    """

    description: str = ""
    diagnostics: DiagnosticContext | None = None
    config: ExpectQAConfig | None = None

    @abc.abstractmethod
    def fetch(self) -> Any:
        """Take one snapshot of the value under test."""

    def should_have(
        self,
        condition: Condition,
        timeout_ms: Timeout | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ):
        should_have(self, condition, timeout_ms, cancel_event=cancel_event, config=self.config)
        return self

    def should_not_have(
        self,
        condition: Condition,
        timeout_ms: Timeout | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ):
        should_not_have(self, condition, timeout_ms, cancel_event=cancel_event, config=self.config)
        return self
