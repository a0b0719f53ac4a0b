"""
Element Resolver

Turns a registry name or a text/tag/index query into a live element handle.

Each resolution waits briefly for the element to be attached, scrolls it
into view when it is visible and is wrapped in the retry policy. Handles are never cached:
a navigation invalidates them, so every call re-queries the current page.
"""

import logging
import re

from playwright.async_api import ElementHandle, Error as PlaywrightError

from ..browser.session import Session
from ..errors import ConfigurationError, ElementNotFoundError
from ..retry import RetryPolicy, retry
from .registry import ElementRegistry

logger = logging.getLogger(__name__)


DEFAULT_ELEMENT_TIMEOUT_MS = 1000

_TAG_PATTERN = re.compile(r"^(\*|[A-Za-z_][\w.\-]*(:[A-Za-z_][\w.\-]*)?)$")


def xpath_literal(value: str) -> str:
    """
    Quote ``value`` as an XPath 1.0 string literal.

    XPath has no escape sequences, so text containing both quote kinds is
    assembled with concat().
    """
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    pieces = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{piece}'" for piece in pieces) + ")"


def build_text_xpath(text: str, tag: str = "*", index: int = 1) -> str:
    """
    Build an XPath selecting the ``index``-th ``tag`` whose text equals ``text``.

    Text is compared after whitespace normalization; ``index`` is 1-based
    and counts matches in document order.

    Example:
        >>> build_text_xpath("Result", "h3", 2)
        "(//h3[normalize-space(text())='Result'])[2]"

    Raises:
        ConfigurationError: If the tag is not a valid element name or the
            index is below 1
    """
    if not _TAG_PATTERN.match(tag or ""):
        raise ConfigurationError(f"Invalid tag name: {tag!r}")
    if index < 1:
        raise ConfigurationError(f"Index is 1-based, got {index}")
    return f"(//{tag}[normalize-space(text())={xpath_literal(text)}])[{index}]"


class ElementResolver:
    """
    Resolves elements on a session's current page.

    Provides:
    - by_name: registry name -> CSS selector -> element
    - by_text: text content (optionally tag and position) -> element
    """

    def __init__(
        self,
        session: Session,
        registry: ElementRegistry,
        policy: RetryPolicy,
        element_timeout_ms: int = DEFAULT_ELEMENT_TIMEOUT_MS,
    ):
        """
        Initialize the resolver.

        Args:
            session: Session whose tab is queried
            registry: Name -> selector table
            policy: Retry policy for each resolution
            element_timeout_ms: Per-attempt wait for the element to appear
        """
        self.session = session
        self.registry = registry
        self.policy = policy
        self.element_timeout_ms = element_timeout_ms

    async def by_name(self, name: str) -> ElementHandle:
        """
        Resolve a registered element.

        Args:
            name: Symbolic name from the registry

        Returns:
            Handle to the element, scrolled into view

        Raises:
            SelectorLookupError: If the name is unregistered (no wait, no retry)
            ElementNotFoundError: If nothing matches after all retries
        """
        selector = self.registry.lookup(name)
        return await self._resolve(selector, label=f"'{name}' ({selector})")

    async def by_text(self, text: str, tag: str = "*", index: int = 1) -> ElementHandle:
        """
        Resolve an element by its text content.

        Args:
            text: Text the element must contain, whitespace-normalized
            tag: Element tag to restrict to (default: any)
            index: 1-based position among matches in document order

        Returns:
            Handle to the element, scrolled into view

        Raises:
            ConfigurationError: If tag or index is malformed
            ElementNotFoundError: If fewer than ``index`` matches appear
        """
        xpath = build_text_xpath(text, tag, index)
        return await self._resolve(f"xpath={xpath}", label=f"text {text!r} <{tag}>[{index}]")

    async def _resolve(self, selector: str, label: str) -> ElementHandle:
        timeout = self.element_timeout_ms

        async def attempt(_: int) -> ElementHandle:
            try:
                element = await self.session.page.wait_for_selector(
                    selector, state="attached", timeout=timeout
                )
            except PlaywrightError as e:
                raise ElementNotFoundError(
                    f"No element matches {label} within {timeout}ms"
                ) from e
            if element is None:
                raise ElementNotFoundError(f"No element matches {label}")

            # Scrolling waits for visibility; a hidden element is still found.
            try:
                await element.scroll_into_view_if_needed(timeout=timeout)
            except PlaywrightError as e:
                logger.debug(f"Could not scroll {label} into view: {e.message}")
            return element

        element = await retry(attempt, self.policy, description=f"resolve {label}")
        logger.debug(f"Resolved {label}")
        return element
