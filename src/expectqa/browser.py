"""Playwright-backed value sources and diagnostic context.

``Browser`` wraps a Playwright ``Page`` (sync API) and hands out assertable
sources:

    browser = Browser(page)
    browser.webdriver().should_have(title("Dashboard"), timeout_ms=2000)
    browser.all(".element").should_have(texts("One", "Two", "Three"))
    browser.all("tr").get(1).all("td").should_have(texts("a", "b"))

The browser lifecycle stays with the caller; these adapters only read from
the page they were given.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any

from playwright.sync_api import Error as PlaywrightError

from expectqa.config import ExpectQAConfig, get_default_config
from expectqa.engine.assertions import Assertable
from expectqa.engine.driver_conditions import BrowserState
from expectqa.errors import ElementIndexError, NoSuchElementError, StaleElementError

# innerText is undefined on SVG elements; fall back to textContent
_TEXTS_JS = "els => els.map(e => e.innerText ?? e.textContent ?? '')"


class PlaywrightDiagnostics:
    """Saves a screenshot and the page HTML on the failure path.

    Returns ``file:`` URIs so the failure message can be clicked through.
    """

    def __init__(self, page: Any, output_dir: Path, screenshots: bool = True, page_source: bool = True) -> None:
        self._page = page
        self._output_dir = output_dir
        self._screenshots = screenshots
        self._page_source = page_source

    def screenshot_ref(self) -> str | None:
        if not self._screenshots:
            return None
        path = self._artifact_path("png")
        self._page.screenshot(path=str(path), full_page=True)
        return path.resolve().as_uri()

    def page_source_ref(self) -> str | None:
        if not self._page_source:
            return None
        path = self._artifact_path("html")
        path.write_text(self._page.content(), encoding="utf-8")
        return path.resolve().as_uri()

    def _artifact_path(self, suffix: str) -> Path:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        stamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        return self._output_dir / f"{stamp}.{suffix}"


class PlaywrightDriver(Assertable):
    """Browser-level source: every fetch snapshots URL, title, windows and cookies."""

    def __init__(
        self,
        page: Any,
        frame: Any = None,
        diagnostics: PlaywrightDiagnostics | None = None,
        config: ExpectQAConfig | None = None,
    ) -> None:
        self._page = page
        self._frame = frame
        self.description = "webdriver"
        self.diagnostics = diagnostics
        self.config = config

    def fetch(self) -> BrowserState:
        page = self._page
        frame = self._frame or page.main_frame
        try:
            return BrowserState(
                url=page.url,
                title=page.title(),
                current_frame_url=frame.url,
                window_count=len(page.context.pages),
                cookies=tuple(page.context.cookies()),
            )
        except PlaywrightError as exc:
            # e.g. execution context destroyed by a navigation
            raise StaleElementError(f"{self.description}: {exc}") from exc

    def __repr__(self) -> str:
        return f"PlaywrightDriver({self._page.url!r})"


class ElementsCollection(Assertable):
    """All elements matching ``selector``, optionally scoped to a parent element.

    ``fetch()`` returns the list of element texts. An empty list is a valid
    snapshot; resolving a missing parent element raises a lookup error.
    """

    def __init__(
        self,
        page: Any,
        selector: str,
        parent: Element | None = None,
        diagnostics: PlaywrightDiagnostics | None = None,
        config: ExpectQAConfig | None = None,
    ) -> None:
        self._page = page
        self._selector = selector
        self._parent = parent
        self.diagnostics = diagnostics
        self.config = config
        self.description = f"{parent.description}/{selector}" if parent is not None else selector

    def locator(self) -> Any:
        root = self._parent.resolve() if self._parent is not None else self._page
        return root.locator(self._selector)

    def fetch(self) -> list[str]:
        locator = self.locator()
        try:
            return list(locator.evaluate_all(_TEXTS_JS))
        except PlaywrightError as exc:
            raise StaleElementError(f"{self.description}: {exc}") from exc

    def first(self) -> Element:
        return self.get(0)

    def get(self, index: int) -> Element:
        if index < 0:
            raise IndexError(f"Element index must be >= 0, got {index}")
        return Element(self, index)

    def __repr__(self) -> str:
        return f"ElementsCollection({self.description!r})"


class Element:
    """The element at ``index`` of a collection, resolved lazily on every use."""

    def __init__(self, collection: ElementsCollection, index: int) -> None:
        self._collection = collection
        self._index = index
        self.description = f"{collection.description}[{index}]"

    def resolve(self) -> Any:
        """Locate the element now.

        A missing first element is retried by the evaluator. An index past the
        end of the collection is structural: the lookup fails fast.
        """
        collection = self._collection.locator()
        try:
            locators = collection.all()
        except PlaywrightError as exc:
            raise StaleElementError(f"{self.description}: {exc}") from exc
        if not locators and self._index == 0:
            raise NoSuchElementError(f"Cannot locate an element {self.description}")
        if self._index >= len(locators):
            raise ElementIndexError(f"Index: {self._index}, Size: {len(locators)}", structural=True)
        return locators[self._index]

    def all(self, selector: str) -> ElementsCollection:
        c = self._collection
        return ElementsCollection(c._page, selector, parent=self, diagnostics=c.diagnostics, config=c.config)

    def __repr__(self) -> str:
        return f"Element({self.description!r})"


class Browser:
    """Entry point binding a Playwright page to ExpectQA configuration."""

    def __init__(self, page: Any, config: ExpectQAConfig | None = None) -> None:
        self._page = page
        self.config = config or get_default_config()
        self.diagnostics: PlaywrightDiagnostics | None = None
        if self.config.screenshots or self.config.page_source:
            self.diagnostics = PlaywrightDiagnostics(
                page,
                self.config.reports_dir,
                screenshots=self.config.screenshots,
                page_source=self.config.page_source,
            )

    def webdriver(self, frame: Any = None) -> PlaywrightDriver:
        return PlaywrightDriver(self._page, frame=frame, diagnostics=self.diagnostics, config=self.config)

    def all(self, selector: str) -> ElementsCollection:
        return ElementsCollection(self._page, selector, diagnostics=self.diagnostics, config=self.config)
