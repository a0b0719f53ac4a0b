"""
Scraping Wrapper

Drives a Chromium tab through Playwright: named elements, text lookups and
declarative operation sequences, every driver call retried with a fixed
attempt budget and delay.
"""

from .agents import OperationInterpreter
from .browser import ConnectionManager, ScrapeOptions, Session
from .errors import (
    ConfigurationError,
    ElementNotFoundError,
    InteractionError,
    RetryExhausted,
    ScrapingError,
    SelectorLookupError,
    SessionConnectionError,
)
from .retry import RetryPolicy, retry
from .tools import Click, ElementRegistry, ElementResolver, Fill, Navigate, parse_operations
from .wrapper import ScrapingWrapper

__version__ = "0.1.0"

__all__ = [
    "ScrapingWrapper",
    "ScrapeOptions",
    "ConnectionManager",
    "Session",
    "ElementRegistry",
    "ElementResolver",
    "OperationInterpreter",
    "Navigate",
    "Click",
    "Fill",
    "parse_operations",
    "RetryPolicy",
    "retry",
    "ScrapingError",
    "ConfigurationError",
    "SessionConnectionError",
    "SelectorLookupError",
    "ElementNotFoundError",
    "InteractionError",
    "RetryExhausted",
]
