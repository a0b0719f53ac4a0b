"""
Browser Session

A Session owns exactly one live tab. It is produced by the
ConnectionManager, either by launching a browser or by attaching to one
that is already running.
"""

import logging
from typing import Literal, Optional

from playwright.async_api import Error as PlaywrightError, Page

logger = logging.getLogger(__name__)


SessionMode = Literal["launch", "attach"]


class Session:
    """
    Exclusive handle on one browser tab.

    Element handles resolved through a Session are only valid until the tab
    navigates again; callers must re-resolve after every navigation.
    """

    def __init__(
        self,
        page: Page,
        mode: SessionMode,
        target_url: Optional[str] = None,
    ):
        """
        Initialize a session.

        Args:
            page: The Playwright page acting as the active tab
            mode: Whether the browser was launched or attached to
            target_url: Websocket debugger address of the attached target
        """
        self.page = page
        self.mode = mode
        self.target_url = target_url
        self._closed = False

    @property
    def is_closed(self) -> bool:
        """Check if the tab has been closed."""
        return self._closed or self.page.is_closed()

    @property
    def url(self) -> str:
        """Current URL of the active tab."""
        return self.page.url

    async def close(self) -> None:
        """
        Close the tab owned by this session.

        Only the tab is closed; the browser process keeps running.
        """
        if self._closed:
            return
        self._closed = True
        try:
            await self.page.close()
        except PlaywrightError as e:
            # The tab is already gone when the browser went away first
            logger.debug(f"Tab close failed: {e}")
        logger.info(f"Closed {self.mode} session tab")

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Session(mode={self.mode!r}, {state})"
