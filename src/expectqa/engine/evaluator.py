"""Polling evaluator — the retry-until-match loop behind every assertion.

One evaluation owns its loop state exclusively: fetch a snapshot, test it,
sleep, repeat until the condition holds or the deadline passes. The loop
runs synchronously in the caller's thread and sleeps only between attempts.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from typing import TYPE_CHECKING, Any

from expectqa.engine.conditions import Condition
from expectqa.engine.diagnostics import DiagnosticBuilder, DiagnosticContext
from expectqa.errors import ElementLookupError, UIAssertionError
from expectqa.models import DEFAULT_POLL_INTERVAL_MS

if TYPE_CHECKING:
    from expectqa.sources import ValueSource

logger = logging.getLogger("expectqa.engine.evaluator")


@dataclasses.dataclass
class PollResult:
    """State of the last attempt of one evaluation."""

    value: Any = None
    fetched: bool = False
    matched: bool = False
    attempts: int = 0
    elapsed_ms: float = 0.0
    error: ElementLookupError | None = None


@dataclasses.dataclass
class Outcome:
    """Terminal result of an evaluation: success, or a typed failure."""

    passed: bool
    poll: PollResult
    error: UIAssertionError | None = None

    def raise_for_failure(self) -> None:
        if self.error is not None:
            raise self.error from self.error.__cause__


class PollingEvaluator:
    """Drives a condition against a value source until it matches or time runs out.

    Args:
        builder: Builds the failure on the terminal path.
        clock: Monotonic clock in seconds (injectable for tests).
    """

    def __init__(
        self,
        builder: DiagnosticBuilder | None = None,
        clock: Any = time.monotonic,
    ) -> None:
        self._builder = builder or DiagnosticBuilder()
        self._clock = clock

    def evaluate(
        self,
        source: ValueSource,
        condition: Condition,
        timeout_ms: int,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        context: DiagnosticContext | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Outcome:
        """Poll ``source`` until ``condition.test`` passes or ``timeout_ms`` elapses.

        A ``timeout_ms`` of 0 performs exactly one fetch/test cycle.
        Lookup errors are retried unless they are structural, in which case the
        loop stops at once. Setting ``cancel_event`` unwinds the loop during its
        next sleep with an ``AssertionCancelled`` failure.
        """
        if timeout_ms < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {timeout_ms}")
        if poll_interval_ms <= 0:
            raise ValueError(f"poll_interval_ms must be > 0, got {poll_interval_ms}")

        poll = PollResult()
        start = self._clock()
        deadline = start + timeout_ms / 1000.0
        interval = poll_interval_ms / 1000.0

        while True:
            poll.attempts += 1
            try:
                value = source.fetch()
            except ElementLookupError as exc:
                poll.error = exc
                logger.debug(
                    "%s: attempt %d lookup failed (%s, structural=%s): %s",
                    source.description, poll.attempts, exc.kind.value, exc.structural, exc,
                )
                if exc.structural:
                    break
            else:
                poll.value = value
                poll.fetched = True
                poll.error = None
                poll.matched = condition.test(value)
                if poll.matched:
                    poll.elapsed_ms = (self._clock() - start) * 1000.0
                    if poll.attempts > 1:
                        logger.debug(
                            "%s %s: matched after %d attempts (%.0f ms)",
                            source.description, condition.description, poll.attempts, poll.elapsed_ms,
                        )
                    return Outcome(passed=True, poll=poll)

            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            if self._sleep(min(interval, remaining), cancel_event):
                poll.elapsed_ms = (self._clock() - start) * 1000.0
                logger.info(
                    "%s %s: cancelled after %d attempts (%.0f ms)",
                    source.description, condition.description, poll.attempts, poll.elapsed_ms,
                )
                error = self._builder.build(
                    condition, poll, source.description, timeout_ms, context, cancelled=True
                )
                return Outcome(passed=False, poll=poll, error=error)

        poll.elapsed_ms = (self._clock() - start) * 1000.0
        logger.info(
            "%s %s: failed after %d attempts (%.0f ms, timeout %d ms)",
            source.description, condition.description, poll.attempts, poll.elapsed_ms, timeout_ms,
        )
        error = self._builder.build(condition, poll, source.description, timeout_ms, context)
        return Outcome(passed=False, poll=poll, error=error)

    @staticmethod
    def _sleep(seconds: float, cancel_event: threading.Event | None) -> bool:
        """Sleep for ``seconds``; return True if the cancel event fired."""
        if cancel_event is None:
            time.sleep(seconds)
            return False
        return cancel_event.wait(seconds)
