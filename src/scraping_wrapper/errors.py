"""
Scraping Wrapper Errors

Every failure raised by the control layer derives from ScrapingError.
Kinds that have a natural builtin counterpart also subclass it, so callers
can catch LookupError or ConnectionError without importing this module.
"""


class ScrapingError(Exception):
    """Base error for the scraping wrapper."""


class ConfigurationError(ScrapingError, ValueError):
    """Malformed construction options."""


class SessionConnectionError(ScrapingError, ConnectionError):
    """Browser launch or attach failed, or no remote page was found."""


class SelectorLookupError(ScrapingError, LookupError):
    """A symbolic element name is not present in the registry."""

    def __init__(self, name: str):
        super().__init__(f"No selector registered for '{name}'")
        self.name = name


class ElementNotFoundError(ScrapingError):
    """An element or text query stayed unmatched after all retries."""


class InteractionError(ScrapingError):
    """A navigate, click, type or wait primitive failed after all retries."""


class RetryExhausted(ScrapingError):
    """The retry budget was spent without a more specific failure."""
