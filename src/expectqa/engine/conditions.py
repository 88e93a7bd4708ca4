"""Conditions — immutable descriptions of a desired state plus a pure predicate.

A condition is anything that provides the capability set of ``Condition``.
Three variants ship with ExpectQA:

- ``ObjectCondition``: a single expected value tested against a snapshot
  (URL, title, window count, cookies, or anything a callable can check).
- ``CollectionCondition`` (``texts`` / ``exact_texts``): an ordered list of
  expected texts tested atomically against one list snapshot.
- ``NegatedCondition``: inverts another condition and reports with its
  negative description.

Conditions never touch the value source. The evaluator fetches a snapshot and
hands it to ``test``; the diagnostic projections (``actual_value``,
``expected_value``, ``describe``, ``mismatch``) are only used on the failure
path.
"""

from __future__ import annotations

import abc
import dataclasses
import enum
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

from expectqa.errors import ConfigurationError


@runtime_checkable
class Condition(Protocol):
    """Capability set shared by every condition."""

    @property
    def description(self) -> str: ...

    @property
    def negative_description(self) -> str: ...

    def test(self, value: Any) -> bool: ...

    def actual_value(self, value: Any) -> str: ...

    def expected_value(self) -> str: ...

    def describe(self, value: Any) -> str: ...


class MismatchKind(enum.Enum):
    """Failure shape a condition reports for a snapshot it rejected."""

    NOT_FOUND = "not_found"
    LIST_SIZE = "list_size"
    TEXTS = "texts"


@dataclasses.dataclass(frozen=True)
class Mismatch:
    """Why a snapshot failed, already phrased for the failure message."""

    kind: MismatchKind
    summary: str
    details: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Scalar conditions
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class ObjectCondition:
    """Condition over a single snapshot value, assembled from plain functions."""

    description: str
    negative_description: str
    predicate: Callable[[Any], bool] = dataclasses.field(repr=False)
    actual: Callable[[Any], Any] = dataclasses.field(default=str, repr=False)
    expected: str = ""
    subject: str | None = None

    def test(self, value: Any) -> bool:
        return bool(self.predicate(value))

    def actual_value(self, value: Any) -> str:
        return str(self.actual(value))

    def expected_value(self) -> str:
        return self.expected

    def describe(self, value: Any) -> str:
        return self.subject or ""

    def __str__(self) -> str:
        return self.description


def condition(
    description: str,
    test: Callable[[Any], bool],
    *,
    negative_description: str | None = None,
    actual_value: Callable[[Any], Any] = str,
    expected_value: str = "",
    subject: str | None = None,
) -> ObjectCondition:
    """Build a custom condition from functions.

    Example:
        has_session = condition(
            "should have a cookie with name 'session_id'",
            lambda state: state.cookie_named("session_id") is not None,
            actual_value=lambda state: f"Available cookies: {state.cookie_names()}",
            expected_value="session_id",
        )
    """
    if not description:
        raise ConfigurationError("Condition description must not be empty")
    return ObjectCondition(
        description=description,
        negative_description=negative_description or _negate_description(description),
        predicate=test,
        actual=actual_value,
        expected=expected_value,
        subject=subject,
    )


def _negate_description(description: str) -> str:
    if "should " in description:
        return description.replace("should ", "should not ", 1)
    return f"not {description}"


# ---------------------------------------------------------------------------
# Negation
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class NegatedCondition:
    """Inverts ``inner.test``; reports with the inner negative description."""

    inner: Condition

    @property
    def description(self) -> str:
        return self.inner.negative_description

    @property
    def negative_description(self) -> str:
        return self.inner.description

    def test(self, value: Any) -> bool:
        return not self.inner.test(value)

    def actual_value(self, value: Any) -> str:
        return self.inner.actual_value(value)

    def expected_value(self) -> str:
        return self.inner.expected_value()

    def describe(self, value: Any) -> str:
        return self.inner.describe(value)

    def __str__(self) -> str:
        return self.description


def negate(cond: Condition) -> Condition:
    """Return the negation of ``cond``; negating a negation unwraps it."""
    if isinstance(cond, NegatedCondition):
        return cond.inner
    return NegatedCondition(cond)


# ---------------------------------------------------------------------------
# Collection conditions
# ---------------------------------------------------------------------------


def normalize_text(text: str) -> str:
    """Trim and collapse every whitespace run to a single space."""
    return " ".join(text.split())


def _format_list(items: Iterable[Any]) -> str:
    return "[" + ", ".join(str(i) for i in items) + "]"


class CollectionCondition(abc.ABC):
    """Ordered expectation over a whole list of element texts.

    Size is checked before any text comparison, and only the first diverging
    position is reported.
    """

    name = "texts"

    def __init__(self, expected_texts: Sequence[str]) -> None:
        if not expected_texts:
            raise ConfigurationError("No expected texts given")
        self.expected_texts: tuple[str, ...] = tuple(expected_texts)
        self._normalized = tuple(normalize_text(t) for t in self.expected_texts)

    @abc.abstractmethod
    def matches(self, actual: str, expected: str) -> bool:
        """Compare one normalized actual text with one normalized expected text."""

    @property
    def description(self) -> str:
        return f"should have {self}"

    @property
    def negative_description(self) -> str:
        return f"should not have {self}"

    def test(self, value: Any) -> bool:
        actual = list(value or ())
        if len(actual) != len(self.expected_texts):
            return False
        return self._first_divergence(actual) is None

    def actual_value(self, value: Any) -> str:
        return _format_list(value or ())

    def expected_value(self) -> str:
        return _format_list(self.expected_texts)

    def describe(self, value: Any) -> str:
        return ""

    def mismatch(self, value: Any, subject: str) -> Mismatch | None:
        actual = list(value or ())
        if not actual:
            return Mismatch(
                kind=MismatchKind.NOT_FOUND,
                summary=f"Element not found {{{subject}}}",
                details=(f"Expected: {self}",),
            )
        dumps = (f"Actual: {_format_list(actual)}", f"Expected: {self.expected_value()}")
        if len(actual) != len(self.expected_texts):
            return Mismatch(
                kind=MismatchKind.LIST_SIZE,
                summary=(
                    f"List size mismatch: expected: = {len(self.expected_texts)}, "
                    f"actual: {len(actual)}, collection: {subject}"
                ),
                details=dumps,
            )
        index = self._first_divergence(actual)
        if index is None:
            return None
        return Mismatch(
            kind=MismatchKind.TEXTS,
            summary=(
                f'Text #{index} mismatch (expected: "{self.expected_texts[index]}", '
                f'actual: "{actual[index]}")'
            ),
            details=dumps + (f"Collection: {subject}",),
        )

    def _first_divergence(self, actual: Sequence[Any]) -> int | None:
        for index, (text, expected) in enumerate(zip(actual, self._normalized)):
            if not self.matches(normalize_text(str(text)), expected):
                return index
        return None

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.expected_texts == self.expected_texts

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.expected_texts))

    def __str__(self) -> str:
        return f"{self.name} {_format_list(self.expected_texts)}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self.expected_texts)!r})"


class Texts(CollectionCondition):
    """Each expected text must occur, ignoring case, inside the element at the same position."""

    name = "texts"

    def matches(self, actual: str, expected: str) -> bool:
        return expected.casefold() in actual.casefold()


class ExactTexts(CollectionCondition):
    """Each element's normalized text must equal the expected text at the same position."""

    name = "exact texts"

    def matches(self, actual: str, expected: str) -> bool:
        return actual == expected


def _collect_texts(expected: tuple[Any, ...]) -> list[str]:
    if len(expected) == 1 and not isinstance(expected[0], str) and isinstance(expected[0], Iterable):
        return [str(t) for t in expected[0]]
    return [str(t) for t in expected]


def texts(*expected: str | Iterable[str]) -> Texts:
    """``texts("One", "Two")`` or ``texts(["One", "Two"])``."""
    return Texts(_collect_texts(expected))


def exact_texts(*expected: str | Iterable[str]) -> ExactTexts:
    """``exact_texts("One", "Two")`` or ``exact_texts(["One", "Two"])``."""
    return ExactTexts(_collect_texts(expected))
