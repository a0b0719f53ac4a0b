"""
Element Interaction Tools

Retried click and type, and a single text read, on resolved element handles.
Handles must come from the current navigation context; resolve again after
any navigation.
"""

import logging

from playwright.async_api import ElementHandle, Error as PlaywrightError

from ..errors import InteractionError
from ..retry import RetryPolicy, retry

logger = logging.getLogger(__name__)


def _preview(text: str, limit: int = 50) -> str:
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


async def click(element: ElementHandle, policy: RetryPolicy, label: str = "element") -> None:
    """
    Click an element.

    Args:
        element: Resolved element handle
        policy: Retry policy for the click
        label: Name used in logs and errors

    Raises:
        InteractionError: If every attempt failed
    """

    async def attempt(_: int) -> None:
        try:
            await element.click()
        except PlaywrightError as e:
            raise InteractionError(f"Click on {label} failed: {e.message}") from e

    await retry(attempt, policy, description=f"click {label}")
    logger.debug(f"Clicked {label}")


async def type_text(
    element: ElementHandle,
    content: str,
    policy: RetryPolicy,
    label: str = "element",
) -> None:
    """
    Type ``content`` into an element, key by key.

    Args:
        element: Resolved element handle
        content: Text to type
        policy: Retry policy for typing
        label: Name used in logs and errors

    Raises:
        InteractionError: If every attempt failed
    """

    async def attempt(_: int) -> None:
        try:
            await element.type(content)
        except PlaywrightError as e:
            raise InteractionError(f"Typing into {label} failed: {e.message}") from e

    await retry(attempt, policy, description=f"type into {label}")
    logger.debug(f"Typed {_preview(content)!r} into {label}")


async def read_inner_text(element: ElementHandle, label: str = "element") -> str:
    """
    Read the rendered text of an element once.

    Not retried: a stale handle stays stale, so callers retry the
    resolution together with the read.

    Raises:
        InteractionError: If the read failed
    """
    try:
        return await element.inner_text()
    except PlaywrightError as e:
        raise InteractionError(f"Reading text of {label} failed: {e.message}") from e
