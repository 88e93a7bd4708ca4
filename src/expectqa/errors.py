"""ExpectQA error taxonomy.

Three families:

- ``ConfigurationError``: a condition was built with invalid input. Raised at
  construction time, never reaches the poll loop.
- ``ElementLookupError``: raised by value sources when the target cannot be
  resolved right now. Tagged with a ``LookupErrorKind`` and a ``structural``
  flag that tells the evaluator whether polling could ever fix it.
- ``UIAssertionError``: the terminal failure of an assertion. Every subclass
  carries the ``FailureDiagnostic`` that produced its message.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from expectqa.engine.diagnostics import FailureDiagnostic


class ConfigurationError(ValueError):
    """Raised when a condition is constructed with invalid input."""

    pass


# ---------------------------------------------------------------------------
# Lookup errors (raised by value sources)
# ---------------------------------------------------------------------------


class LookupErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    STALE = "stale"


class ElementLookupError(LookupError):
    """A value source could not resolve its target.

    ``structural`` marks errors that no amount of waiting can resolve; the
    evaluator stops polling as soon as it sees one.
    """

    kind: LookupErrorKind = LookupErrorKind.NOT_FOUND

    def __init__(self, message: str, *, structural: bool = False) -> None:
        super().__init__(message)
        self.structural = structural


class NoSuchElementError(ElementLookupError):
    """No element matches the locator."""

    kind = LookupErrorKind.NOT_FOUND


class ElementIndexError(ElementLookupError, IndexError):
    """An indexed element lies outside the current collection."""

    kind = LookupErrorKind.INDEX_OUT_OF_RANGE


class StaleElementError(ElementLookupError):
    """A previously resolved element is no longer attached."""

    kind = LookupErrorKind.STALE


# ---------------------------------------------------------------------------
# Assertion failures
# ---------------------------------------------------------------------------


class UIAssertionError(AssertionError):
    """Base class for every terminal assertion failure."""

    def __init__(self, diagnostic: FailureDiagnostic) -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic

    @property
    def timeout_ms(self) -> int:
        return self.diagnostic.timeout_ms


class ConditionNotMetError(UIAssertionError):
    """A positive assertion was still false when the timeout elapsed."""


class ConditionMetError(UIAssertionError):
    """A negative assertion's condition was still true when the timeout elapsed."""


class ElementNotFound(UIAssertionError):
    """The target of the assertion could never be resolved."""


class ListSizeMismatch(UIAssertionError):
    """A collection had a different number of elements than expected."""


class TextsMismatch(UIAssertionError):
    """A collection's texts diverged from the expected texts."""


class AssertionCancelled(UIAssertionError):
    """The assertion was aborted through its cancel token before it resolved."""
