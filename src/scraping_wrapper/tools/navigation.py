"""
Navigation Tools

Retried page navigation, load-completion waits and the dialog checkpoint.
"""

import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError, Page

from ..errors import InteractionError
from ..retry import RetryPolicy, retry

logger = logging.getLogger(__name__)


DEFAULT_DIALOG_MESSAGE = "Please press OK to continue."

# Defer the alert so evaluate() returns as soon as it is dispatched
_DISPATCH_ALERT_SCRIPT = "message => { setTimeout(() => window.alert(message), 0); }"


async def navigate(
    page: Page,
    url: str,
    policy: RetryPolicy,
    timeout: int = 30000,
) -> None:
    """
    Navigate to a URL and block until the load event fires.

    Args:
        page: Playwright Page instance
        url: URL to navigate to
        policy: Retry policy for the navigation
        timeout: Per-attempt navigation timeout in ms

    Raises:
        InteractionError: If every attempt failed
    """

    async def attempt(_: int) -> None:
        try:
            await page.goto(url, wait_until="load", timeout=timeout)
        except PlaywrightError as e:
            raise InteractionError(f"Navigation to {url} failed: {e.message}") from e

    await retry(attempt, policy, description=f"navigate to {url}")
    logger.info(f"Navigated to {page.url}")


async def wait_for_load(
    page: Page,
    policy: RetryPolicy,
    state: str = "load",
    timeout: int = 30000,
) -> None:
    """
    Block until the page reaches ``state``.

    Returns at once if the page is already in that state.

    Raises:
        InteractionError: If every attempt timed out or failed
    """

    async def attempt(_: int) -> None:
        try:
            await page.wait_for_load_state(state, timeout=timeout)
        except PlaywrightError as e:
            raise InteractionError(f"Waiting for {state} state failed: {e.message}") from e

    await retry(attempt, policy, description=f"wait for {state}")


async def show_dialog_and_wait(page: Page, message: Optional[str] = None) -> None:
    """
    Show a native alert with ``message`` (or a default prompt).

    Despite the name this only dispatches the alert; it does not block
    until the user dismisses it.

    Raises:
        InteractionError: If the script could not be evaluated
    """
    dialog_message = message if message is not None else DEFAULT_DIALOG_MESSAGE
    try:
        await page.evaluate(_DISPATCH_ALERT_SCRIPT, dialog_message)
    except PlaywrightError as e:
        raise InteractionError(f"Could not show dialog: {e.message}") from e
    logger.info(f"Dispatched dialog: {dialog_message}")
