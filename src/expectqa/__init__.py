"""ExpectQA — condition polling and diagnostic reporting for browser assertions.

Usage:
    from playwright.sync_api import sync_playwright
    from expectqa import Browser, texts, title

    with sync_playwright() as p:
        page = p.chromium.launch().new_page()
        page.goto("http://localhost:8000/list.html")

        browser = Browser(page)
        browser.webdriver().should_have(title("My list"), timeout_ms=2000)
        browser.all(".element").should_have(texts("One", "Two", "Three"))
"""

__version__ = "0.1.0"

from expectqa.browser import Browser, Element, ElementsCollection, PlaywrightDiagnostics, PlaywrightDriver
from expectqa.config import ExpectQAConfig, ExpectQAConfigError, get_default_config, load_config, set_default_config
from expectqa.engine import (
    Assertable,
    Condition,
    NegatedCondition,
    ObjectCondition,
    condition,
    exact_texts,
    should_have,
    should_not_have,
    texts,
)
from expectqa.engine.driver_conditions import (
    BrowserState,
    cookie,
    current_frame_url,
    current_frame_url_containing,
    current_frame_url_starting_with,
    number_of_windows,
    title,
    url,
    url_containing,
    url_starting_with,
)
from expectqa.errors import (
    AssertionCancelled,
    ConditionMetError,
    ConditionNotMetError,
    ConfigurationError,
    ElementIndexError,
    ElementLookupError,
    ElementNotFound,
    ListSizeMismatch,
    LookupErrorKind,
    NoSuchElementError,
    StaleElementError,
    TextsMismatch,
    UIAssertionError,
)
from expectqa.sources import CallableSource, ValueSource

__all__ = [
    # Entry points
    "should_have",
    "should_not_have",
    "Assertable",
    # Conditions
    "Condition",
    "ObjectCondition",
    "NegatedCondition",
    "condition",
    "texts",
    "exact_texts",
    "cookie",
    "current_frame_url",
    "current_frame_url_containing",
    "current_frame_url_starting_with",
    "number_of_windows",
    "title",
    "url",
    "url_containing",
    "url_starting_with",
    "BrowserState",
    # Sources
    "ValueSource",
    "CallableSource",
    "Browser",
    "Element",
    "ElementsCollection",
    "PlaywrightDiagnostics",
    "PlaywrightDriver",
    # Config
    "ExpectQAConfig",
    "ExpectQAConfigError",
    "get_default_config",
    "load_config",
    "set_default_config",
    # Errors
    "AssertionCancelled",
    "ConditionMetError",
    "ConditionNotMetError",
    "ConfigurationError",
    "ElementIndexError",
    "ElementLookupError",
    "ElementNotFound",
    "ListSizeMismatch",
    "LookupErrorKind",
    "NoSuchElementError",
    "StaleElementError",
    "TextsMismatch",
    "UIAssertionError",
]
