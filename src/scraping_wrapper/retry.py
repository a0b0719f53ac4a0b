"""
Retry Executor

Bounded-attempt, fixed-delay combinator wrapping any fallible async action.

The delay between attempts never grows and carries no jitter. Page-settle
windows are short, so a flat delay is all that is needed.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from .errors import ConfigurationError, RetryExhausted

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_DELAY = 2.0


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attempt budget and fixed delay applied to every driver interaction.

    Attributes:
        max_attempts: Total number of calls allowed (0 fails without calling)
        delay: Seconds slept between consecutive attempts
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay: float = DEFAULT_DELAY

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ConfigurationError(
                f"max_attempts must be >= 0, got {self.max_attempts}"
            )
        if self.delay < 0:
            raise ConfigurationError(f"delay must be >= 0, got {self.delay}")


async def retry(
    action: Callable[[int], Awaitable[T]],
    policy: RetryPolicy,
    *,
    description: str = "action",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run ``action`` until it succeeds or the policy's attempts run out.

    Args:
        action: Async callable receiving the 0-based attempt index
        policy: Attempt budget and delay
        description: Label used in log messages
        sleep: Suspension used between attempts

    Returns:
        The value of the first successful attempt

    Raises:
        RetryExhausted: If ``policy.max_attempts`` is 0
        Exception: Whatever the final attempt raised, unmodified
    """
    if policy.max_attempts == 0:
        raise RetryExhausted(f"{description}: retry policy allows no attempts")

    last_attempt = policy.max_attempts - 1
    for attempt in range(policy.max_attempts):
        try:
            return await action(attempt)
        except Exception as e:
            if attempt == last_attempt:
                logger.warning(
                    f"{description} failed after {policy.max_attempts} attempt(s): {e}"
                )
                raise
            logger.debug(
                f"{description} attempt {attempt + 1}/{policy.max_attempts} failed: {e}; "
                f"retrying in {policy.delay}s"
            )
            await sleep(policy.delay)

    # Unreachable: the loop either returns or re-raises on its last pass
    raise RetryExhausted(f"{description}: retry attempts exceeded")
