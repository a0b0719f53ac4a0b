"""
Connection Manager

Launches a new Chromium instance or attaches to an already-running one
through its remote-debugging discovery endpoint, and yields a Session.
"""

import logging
import os
from typing import Any, Optional

import httpx
from dotenv import load_dotenv
from playwright.async_api import (
    async_playwright,
    Browser,
    Error as PlaywrightError,
    Playwright,
)
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from ..errors import ConfigurationError, SessionConnectionError
from ..retry import RetryPolicy
from .session import Session

logger = logging.getLogger(__name__)


DEFAULT_ATTACH_HOST = "127.0.0.1"


class ScrapeOptions(BaseModel):
    """
    Construction-time configuration.

    Supplying ``attach_port`` switches from launching a browser to
    attaching to a running one. Invalid values raise ConfigurationError.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Launch mode
    headless: bool = True
    window_size: Optional[tuple[int, int]] = None

    # Symbolic element name -> CSS selector
    dom_defs: dict[str, str] = Field(default_factory=dict)

    # Attach mode
    attach_host: str = DEFAULT_ATTACH_HOST
    attach_port: Optional[int] = Field(default=None, ge=1, le=65535)
    discovery_timeout: float = Field(default=5.0, gt=0)

    # Timing
    retry_attempts: int = Field(default=5, ge=0)
    retry_delay: float = Field(default=2.0, ge=0)
    element_timeout_ms: int = Field(default=1000, gt=0)
    settle_delay: float = Field(default=0.5, ge=0)

    # Echo operations to the console
    verbose: bool = False

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid scrape options: {e}") from e

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any) -> "ScrapeOptions":
        # Validating a mapping bypasses __init__
        try:
            return super().model_validate(obj, **kwargs)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid scrape options: {e}") from e

    @classmethod
    def model_validate_json(cls, json_data: Any, **kwargs: Any) -> "ScrapeOptions":
        try:
            return super().model_validate_json(json_data, **kwargs)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid scrape options: {e}") from e

    @field_validator("window_size")
    @classmethod
    def _check_window_size(cls, value: Optional[tuple[int, int]]):
        if value is not None and (value[0] <= 0 or value[1] <= 0):
            raise ValueError("window dimensions must be positive")
        return value

    @property
    def retry_policy(self) -> RetryPolicy:
        """Retry policy applied to every driver interaction."""
        return RetryPolicy(max_attempts=self.retry_attempts, delay=self.retry_delay)

    @property
    def attach_mode(self) -> bool:
        """True when an attach port was supplied."""
        return self.attach_port is not None

    @classmethod
    def from_env(cls, **overrides: Any) -> "ScrapeOptions":
        """
        Create ScrapeOptions from environment variables (and a .env file).

        Environment variables:
            SCRAPER_HEADLESS: true/false (default: true)
            SCRAPER_WINDOW_SIZE: WIDTHxHEIGHT (default: browser default)
            SCRAPER_ATTACH_HOST: host (default: 127.0.0.1)
            SCRAPER_ATTACH_PORT: int (default: launch a new browser)
            SCRAPER_RETRY_ATTEMPTS: int (default: 5)
            SCRAPER_RETRY_DELAY: seconds (default: 2.0)
            SCRAPER_ELEMENT_TIMEOUT_MS: int in ms (default: 1000)
            SCRAPER_SETTLE_DELAY: seconds (default: 0.5)

        Args:
            overrides: Explicit values that win over the environment
        """
        load_dotenv()

        values: dict[str, Any] = {
            "headless": os.getenv("SCRAPER_HEADLESS", "true").lower() in ("true", "1", "yes"),
            "attach_host": os.getenv("SCRAPER_ATTACH_HOST", DEFAULT_ATTACH_HOST),
        }

        window_size = os.getenv("SCRAPER_WINDOW_SIZE")
        if window_size:
            values["window_size"] = _parse_window_size(window_size)

        numeric = {
            "attach_port": ("SCRAPER_ATTACH_PORT", int),
            "retry_attempts": ("SCRAPER_RETRY_ATTEMPTS", int),
            "retry_delay": ("SCRAPER_RETRY_DELAY", float),
            "element_timeout_ms": ("SCRAPER_ELEMENT_TIMEOUT_MS", int),
            "settle_delay": ("SCRAPER_SETTLE_DELAY", float),
        }
        for field_name, (env_name, convert) in numeric.items():
            raw = os.getenv(env_name)
            if raw is None or raw == "":
                continue
            try:
                values[field_name] = convert(raw)
            except ValueError as e:
                raise ConfigurationError(f"{env_name}={raw!r} is not a valid number") from e

        values.update(overrides)
        return cls(**values)


def _parse_window_size(raw: str) -> tuple[int, int]:
    """Parse 'WIDTHxHEIGHT' (or 'WIDTH,HEIGHT')."""
    parts = raw.lower().replace(",", "x").split("x")
    if len(parts) != 2:
        raise ConfigurationError(f"Window size must look like 1920x1080, got {raw!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as e:
        raise ConfigurationError(f"Window size must look like 1920x1080, got {raw!r}") from e


class PageTarget(BaseModel):
    """One descriptor returned by the remote-debugging discovery endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str
    url: str = ""
    title: str = ""
    id: Optional[str] = None
    web_socket_debugger_url: Optional[str] = Field(
        default=None, alias="webSocketDebuggerUrl"
    )


async def discover_page_target(
    host: str,
    port: int,
    timeout: float = 5.0,
    client: Optional[httpx.AsyncClient] = None,
) -> PageTarget:
    """
    Query ``http://host:port/json`` and return the first page descriptor.

    Args:
        host: Remote-debugging host
        port: Remote-debugging port
        timeout: HTTP timeout in seconds
        client: Optional client to reuse (tests pass a mocked transport)

    Returns:
        The first descriptor whose type is "page"

    Raises:
        SessionConnectionError: On HTTP failure, a malformed body, or when
            no page descriptor with a websocket address exists
    """
    endpoint = f"http://{host}:{port}/json"
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=timeout)

    try:
        response = await client.get(endpoint)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as e:
        raise SessionConnectionError(f"Discovery request to {endpoint} failed: {e}") from e
    except ValueError as e:
        raise SessionConnectionError(f"Discovery endpoint {endpoint} returned invalid JSON") from e
    finally:
        if owns_client:
            await client.aclose()

    if not isinstance(payload, list):
        raise SessionConnectionError(
            f"Discovery endpoint {endpoint} did not return a JSON array"
        )

    for entry in payload:
        if not isinstance(entry, dict) or entry.get("type") != "page":
            continue
        try:
            target = PageTarget.model_validate(entry)
        except ValidationError as e:
            raise SessionConnectionError(f"Malformed page descriptor: {e}") from e
        # Only the first page target counts; later ones are not consulted
        # even if this one lacks a websocket address.
        if not target.web_socket_debugger_url:
            raise SessionConnectionError(
                f"Page target {target.id or target.url!r} exposes no websocket debugger address"
            )
        logger.debug(f"Discovered page target {target.url} at {target.web_socket_debugger_url}")
        return target

    raise SessionConnectionError(f"No page target listed at {endpoint}")


class ConnectionManager:
    """
    Establishes browser sessions.

    Provides:
    - Launching an isolated Chromium process (``open``)
    - Attaching to a running browser over CDP (``attach``)
    - Mode selection from ScrapeOptions (``connect``)

    Usage:
        >>> async with ConnectionManager(options) as manager:
        ...     session = await manager.connect()
        ...     await session.page.goto("https://example.com")
    """

    def __init__(self, options: Optional[ScrapeOptions] = None):
        """
        Initialize connection manager.

        Args:
            options: Scrape options (uses env if None)
        """
        self.options = options or ScrapeOptions.from_env()

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._owns_browser = False

    @property
    def is_connected(self) -> bool:
        """Check if a browser is launched or attached."""
        return self._browser is not None and self._browser.is_connected()

    async def _ensure_playwright(self) -> Playwright:
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        return self._playwright

    async def connect(self) -> Session:
        """
        Open or attach, depending on whether an attach port is configured.

        Returns:
            The new Session
        """
        if self.options.attach_mode:
            return await self.attach(self.options.attach_host, self.options.attach_port)
        return await self.open(self.options.headless, self.options.window_size)

    async def open(
        self,
        headless: bool = True,
        window_size: Optional[tuple[int, int]] = None,
    ) -> Session:
        """
        Launch a new browser process and select its newest tab.

        Args:
            headless: Run without a visible window
            window_size: Optional (width, height) of the window and viewport

        Returns:
            Session over the most recently created tab

        Raises:
            SessionConnectionError: If the browser cannot be started
        """
        if self._browser is not None:
            raise SessionConnectionError("This manager already holds a browser connection")

        playwright = await self._ensure_playwright()

        args = []
        context_options: dict[str, Any] = {}
        if window_size is not None:
            width, height = window_size
            args.append(f"--window-size={width},{height}")
            context_options["viewport"] = {"width": width, "height": height}

        try:
            self._browser = await playwright.chromium.launch(headless=headless, args=args)
            self._owns_browser = True
            context = await self._browser.new_context(**context_options)
            await context.new_page()
        except PlaywrightError as e:
            raise SessionConnectionError(f"Failed to launch browser: {e.message}") from e

        page = context.pages[-1]
        logger.info(f"Launched browser (headless={headless}, window_size={window_size})")
        return Session(page, mode="launch")

    async def attach(self, host: str, port: int) -> Session:
        """
        Attach to a running browser through its discovery endpoint.

        Args:
            host: Remote-debugging host
            port: Remote-debugging port

        Returns:
            Session over the tab matching the discovered page target

        Raises:
            SessionConnectionError: If discovery or the CDP connection fails
        """
        if self._browser is not None:
            raise SessionConnectionError("This manager already holds a browser connection")

        target = await discover_page_target(host, port, timeout=self.options.discovery_timeout)
        playwright = await self._ensure_playwright()

        try:
            self._browser = await playwright.chromium.connect_over_cdp(f"http://{host}:{port}")
        except PlaywrightError as e:
            raise SessionConnectionError(
                f"Failed to attach to {target.web_socket_debugger_url}: {e.message}"
            ) from e
        self._owns_browser = False

        pages = [page for context in self._browser.contexts for page in context.pages]
        if not pages:
            raise SessionConnectionError(f"Browser at {host}:{port} has no open tabs")

        # Enumeration order is whatever the browser reports; it is not
        # guaranteed to be stable across browser versions.
        matching = [page for page in pages if page.url == target.url]
        page = (matching or pages)[-1]

        logger.info(f"Attached to {target.web_socket_debugger_url} ({page.url})")
        return Session(page, mode="attach", target_url=target.web_socket_debugger_url)

    async def close(self, session: Session) -> None:
        """Close the session's tab, leaving the browser process running."""
        await session.close()

    async def shutdown(self) -> None:
        """
        Release the driver.

        A launched browser is closed; an attached browser is only
        disconnected from.
        """
        if self._browser is not None:
            if self._owns_browser:
                try:
                    await self._browser.close()
                except PlaywrightError as e:
                    logger.debug(f"Browser close failed: {e}")
            self._browser = None

        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def __aenter__(self) -> "ConnectionManager":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.shutdown()
