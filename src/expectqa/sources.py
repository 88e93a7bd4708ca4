"""Value source contract.

A value source is anything the evaluator can ask for a fresh snapshot of the
observable under test: browser state, a list of element texts, or any value a
callable produces. Sources raise ``ElementLookupError`` when the target cannot
be resolved; every other exception propagates to the caller untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from expectqa.engine.assertions import Assertable


@runtime_checkable
class ValueSource(Protocol):
    """Produces a snapshot of the target on every ``fetch()`` call."""

    description: str

    def fetch(self) -> Any: ...


class CallableSource(Assertable):
    """Adapts a zero-argument callable to the ValueSource contract.

    Usage:
        counter = CallableSource(lambda: len(queue), "queue")
        counter.should_have(condition("should have 3 items", ..., lambda n: n == 3))
    """

    def __init__(self, func: Callable[[], Any], description: str) -> None:
        self._func = func
        self.description = description

    def fetch(self) -> Any:
        return self._func()

    def __repr__(self) -> str:
        return f"CallableSource({self.description!r})"
