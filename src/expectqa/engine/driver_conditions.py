"""Browser-level conditions: URL, frame URL, title, window count, cookies.

All of them test a ``BrowserState`` snapshot, so a single poll reads the
browser once and every projection sees the same values.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from typing import Any

from expectqa.engine.conditions import ObjectCondition
from expectqa.errors import ConfigurationError

WEBDRIVER = "webdriver"
CURRENT_FRAME = "current frame"
PAGE = "Page"


@dataclasses.dataclass(frozen=True)
class BrowserState:
    """Snapshot of the browser-level observables at one instant."""

    url: str
    title: str
    current_frame_url: str
    window_count: int
    cookies: tuple[Mapping[str, Any], ...] = ()

    def cookie_named(self, name: str) -> Mapping[str, Any] | None:
        for c in self.cookies:
            if c.get("name") == name:
                return c
        return None

    def cookie_names(self) -> list[str]:
        return [str(c.get("name")) for c in self.cookies]


# ---------------------------------------------------------------------------
# URL
# ---------------------------------------------------------------------------


def url(expected: str) -> ObjectCondition:
    return _string_condition("url", expected, "", lambda s: s.url, lambda a, e: a == e, WEBDRIVER)


def url_starting_with(expected: str) -> ObjectCondition:
    return _string_condition(
        "url", expected, "starting with ", lambda s: s.url, lambda a, e: a.startswith(e), WEBDRIVER
    )


def url_containing(expected: str) -> ObjectCondition:
    return _string_condition("url", expected, "containing ", lambda s: s.url, lambda a, e: e in a, WEBDRIVER)


def current_frame_url(expected: str) -> ObjectCondition:
    return _string_condition(
        "url", expected, "", lambda s: s.current_frame_url, lambda a, e: a == e, CURRENT_FRAME
    )


def current_frame_url_starting_with(expected: str) -> ObjectCondition:
    return _string_condition(
        "url",
        expected,
        "starting with ",
        lambda s: s.current_frame_url,
        lambda a, e: a.startswith(e),
        CURRENT_FRAME,
    )


def current_frame_url_containing(expected: str) -> ObjectCondition:
    return _string_condition(
        "url", expected, "containing ", lambda s: s.current_frame_url, lambda a, e: e in a, CURRENT_FRAME
    )


# ---------------------------------------------------------------------------
# Title / windows
# ---------------------------------------------------------------------------


def title(expected: str) -> ObjectCondition:
    return _string_condition("title", expected, "", lambda s: s.title, lambda a, e: a == e, PAGE)


def number_of_windows(expected: int) -> ObjectCondition:
    if expected < 0:
        raise ConfigurationError(f"Number of windows must be >= 0, got {expected}")
    return ObjectCondition(
        description=f"should have {expected} window(s)",
        negative_description=f"should not have {expected} window(s)",
        predicate=lambda s: s.window_count == expected,
        actual=lambda s: s.window_count,
        expected=str(expected),
        subject=WEBDRIVER,
    )


# ---------------------------------------------------------------------------
# Cookies
# ---------------------------------------------------------------------------


def cookie(expected: str | Mapping[str, Any], value: str | None = None) -> ObjectCondition:
    """Cookie presence by name, by name and value, or by a mapping of cookie fields.

    A mapping matches when some cookie has every given field with an equal value.
    """
    if isinstance(expected, Mapping):
        if value is not None:
            raise ConfigurationError("Pass either a cookie mapping or a name and value, not both")
        fields = dict(expected)
        if not fields.get("name"):
            raise ConfigurationError("Cookie mapping must contain a 'name'")
        shown = ", ".join(f"{k}={v}" for k, v in fields.items())
        return _cookie_condition(f"a cookie {{{shown}}}", fields)

    if not expected:
        raise ConfigurationError("Cookie name must not be empty")
    if value is None:
        return _cookie_condition(f'a cookie with name "{expected}"', {"name": expected})
    return _cookie_condition(
        f'a cookie with name "{expected}" and value "{value}"', {"name": expected, "value": value}
    )


def _cookie_condition(phrase: str, fields: dict[str, Any]) -> ObjectCondition:
    def _test(state: BrowserState) -> bool:
        return any(all(c.get(k) == v for k, v in fields.items()) for c in state.cookies)

    return ObjectCondition(
        description=f"should have {phrase}",
        negative_description=f"should not have {phrase}",
        predicate=_test,
        actual=_available_cookies,
        expected=", ".join(f"{k}={v}" for k, v in fields.items()),
        subject=WEBDRIVER,
    )


def _available_cookies(state: BrowserState) -> str:
    pairs = [f"{c.get('name')}={c.get('value')}" for c in state.cookies]
    return f"Available cookies: [{', '.join(pairs)}]"


def _string_condition(
    name: str,
    expected: str,
    qualifier: str,
    read: Callable[[BrowserState], str],
    compare: Callable[[str, str], bool],
    subject: str,
) -> ObjectCondition:
    return ObjectCondition(
        description=f"should have {name} {qualifier}{expected}",
        negative_description=f"should not have {name} {qualifier}{expected}",
        predicate=lambda s: compare(read(s), expected),
        actual=read,
        expected=expected,
        subject=subject,
    )
