"""
Scraping Wrapper

High-level entry point tying the connection manager, element registry,
resolver and interpreter together around a single session.

Usage:
    >>> options = ScrapeOptions(
    ...     dom_defs={"search_box": "input[name=q]", "first_result": "h3"},
    ...     headless=False,
    ...     window_size=(1920, 1080),
    ... )
    >>> async with ScrapingWrapper(options) as wrapper:
    ...     await wrapper.operate([
    ...         Navigate(url="https://www.example.com/"),
    ...         Fill(target="search_box", content="sample text"),
    ...     ])
    ...     text = await wrapper.get_inner_text("first_result")
"""

import logging
from typing import Any, Iterable, Optional, Union

from playwright.async_api import ElementHandle

from .agents.interpreter import AnyOperation, OperationInterpreter
from .browser import ConnectionManager, ScrapeOptions, Session
from .errors import ScrapingError
from .retry import retry
from .tools.interactions import read_inner_text, type_text
from .tools.navigation import navigate, show_dialog_and_wait
from .tools.registry import ElementRegistry
from .tools.resolver import ElementResolver
from .tui import create_console

logger = logging.getLogger(__name__)


class ScrapingWrapper:
    """
    One browser tab driven through named elements and operation sequences.

    The wrapper exclusively owns its session. Use it as an async context
    manager, or call ``start()`` and ``close()`` explicitly.
    """

    def __init__(
        self,
        options: Optional[ScrapeOptions] = None,
        manager: Optional[ConnectionManager] = None,
    ):
        """
        Initialize the wrapper.

        Args:
            options: Scrape options (uses env if None)
            manager: Connection manager to use (built from options if None)
        """
        self.options = options or ScrapeOptions.from_env()
        self.registry = ElementRegistry(self.options.dom_defs)
        self.policy = self.options.retry_policy
        self.manager = manager or ConnectionManager(self.options)

        self._session: Optional[Session] = None
        self._resolver: Optional[ElementResolver] = None
        self._interpreter: Optional[OperationInterpreter] = None

    @property
    def session(self) -> Session:
        """The active session."""
        if self._session is None:
            raise ScrapingError("Wrapper is not started")
        return self._session

    @property
    def resolver(self) -> ElementResolver:
        """Resolver bound to the active session."""
        if self._resolver is None:
            raise ScrapingError("Wrapper is not started")
        return self._resolver

    @property
    def interpreter(self) -> OperationInterpreter:
        """Interpreter bound to the active session."""
        if self._interpreter is None:
            raise ScrapingError("Wrapper is not started")
        return self._interpreter

    async def start(self) -> "ScrapingWrapper":
        """Launch or attach, depending on the configured attach port."""
        if self._session is not None:
            return self

        session = await self.manager.connect()
        self.bind(session)
        return self

    def bind(self, session: Session) -> None:
        """Build the resolver and interpreter around ``session``."""
        self._session = session
        self._resolver = ElementResolver(
            session,
            self.registry,
            self.policy,
            element_timeout_ms=self.options.element_timeout_ms,
        )
        self._interpreter = OperationInterpreter(
            session,
            self._resolver,
            self.policy,
            settle_delay=self.options.settle_delay,
            console=create_console() if self.options.verbose else None,
        )

    async def close(self) -> None:
        """Close the tab and release the driver."""
        if self._session is not None:
            await self.manager.close(self._session)
            self._session = None
            self._resolver = None
            self._interpreter = None
        await self.manager.shutdown()

    async def __aenter__(self) -> "ScrapingWrapper":
        """Async context manager entry."""
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def go(self, url: str) -> None:
        """Navigate to ``url`` and wait for the load event."""
        await navigate(self.session.page, url, self.policy)

    async def get_dom(self, target: str) -> ElementHandle:
        """Resolve the element registered as ``target``."""
        return await self.resolver.by_name(target)

    async def get_dom_by_text(
        self,
        search_text: str,
        tag_name: str = "*",
        index: int = 1,
    ) -> ElementHandle:
        """Resolve the ``index``-th ``tag_name`` element whose text is ``search_text``."""
        return await self.resolver.by_text(search_text, tag_name, index)

    async def click(self, element: ElementHandle) -> None:
        """Click a resolved element, then settle and wait for the load event."""
        await self.interpreter.click_and_settle(element)

    async def fill_textbox(self, element: ElementHandle, content: str) -> None:
        """Type ``content`` into a resolved element."""
        await type_text(element, content, self.policy)

    async def get_inner_text(self, target: str) -> str:
        """
        Resolve ``target`` and return its rendered text.

        Every attempt resolves the element again, so a handle invalidated
        by a re-render is replaced rather than read repeatedly.

        Raises:
            SelectorLookupError: If the name is unregistered (no retry)
            ElementNotFoundError: If the element never appears
            InteractionError: If every read failed
        """
        self.registry.lookup(target)

        async def attempt(_: int) -> str:
            element = await self.resolver.by_name(target)
            return await read_inner_text(element, label=target)

        return await retry(attempt, self.policy, description=f"read text of {target}")

    async def show_dialog_and_wait(self, message: Optional[str] = None) -> None:
        """Dispatch a native alert; returns without waiting for dismissal."""
        await show_dialog_and_wait(self.session.page, message)

    async def operate(self, operations: Iterable[Union[AnyOperation, dict[str, Any]]]) -> None:
        """Run an operation sequence, stopping at the first failure."""
        await self.interpreter.run(operations)
