"""
Operation Interpreter

Replays a declarative sequence of operations against one session, strictly
in order. Each driver call is retried with the session's policy; the first
failure that survives its retries aborts the rest of the sequence. Steps
that already ran are not rolled back.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from playwright.async_api import ElementHandle

from ..browser.session import Session
from ..retry import RetryPolicy
from ..tools.interactions import click, type_text
from ..tools.navigation import navigate, wait_for_load
from ..tools.operation_models import (
    Click,
    Fill,
    Navigate,
    describe_operation,
    parse_operations,
)
from ..tools.resolver import ElementResolver
from ..tui import OperationConsole, print_error, print_operation, print_result

logger = logging.getLogger(__name__)


DEFAULT_SETTLE_DELAY = 0.5

AnyOperation = Union[Navigate, Click, Fill]


class OperationInterpreter:
    """
    Executes operation sequences on a session.

    Per operation:
    - Navigate: retried navigation, blocking until the load event
    - Click: resolve by name, retried click, settle delay, wait for load
    - Fill: no-op without content, otherwise resolve by name and type
    """

    def __init__(
        self,
        session: Session,
        resolver: ElementResolver,
        policy: RetryPolicy,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        console: Optional[OperationConsole] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the interpreter.

        Args:
            session: Session whose tab is driven
            resolver: Element resolver bound to the same session
            policy: Retry policy for every driver call
            settle_delay: Seconds to wait after a click before the load wait
            console: Echo each step to this console when given
            sleep: Suspension used for the settle delay
        """
        self.session = session
        self.resolver = resolver
        self.policy = policy
        self.settle_delay = settle_delay
        self.console = console
        self._sleep = sleep

    async def run(self, operations: Iterable[Union[AnyOperation, dict[str, Any]]]) -> None:
        """
        Execute ``operations`` in order.

        Args:
            operations: Operation models or dicts accepted by parse_operations

        Raises:
            ConfigurationError: If the sequence is malformed (nothing runs)
            ScrapingError: The first failure; later operations do not run
        """
        sequence = parse_operations(operations)
        logger.info(f"Running {len(sequence)} operation(s)")

        for step, operation in enumerate(sequence, start=1):
            if self.console:
                print_operation(
                    step,
                    operation.method,
                    params=describe_operation(operation),
                    console=self.console,
                )
            try:
                await self.execute(operation)
            except Exception as e:
                logger.error(f"Step {step} ({operation.method}) aborted the sequence: {e}")
                if self.console:
                    print_error(str(e), error_type=type(e).__name__, console=self.console)
                raise

    async def execute(self, operation: AnyOperation) -> None:
        """Execute a single operation."""
        if isinstance(operation, Navigate):
            await self._navigate(operation)
        elif isinstance(operation, Click):
            await self._click(operation)
        elif isinstance(operation, Fill):
            await self._fill(operation)
        else:
            raise TypeError(f"Unsupported operation: {operation!r}")

    async def _navigate(self, operation: Navigate) -> None:
        await navigate(self.session.page, operation.url, self.policy)
        self._report(f"Loaded {self.session.url}")

    async def _click(self, operation: Click) -> None:
        element = await self.resolver.by_name(operation.target)
        await self.click_and_settle(element, label=operation.target)
        self._report(f"Clicked '{operation.target}'")

    async def click_and_settle(self, element: ElementHandle, label: str = "element") -> None:
        """Click, pause for the settle delay, then wait for the load event."""
        await click(element, self.policy, label=label)

        # Waits even when the click triggers no navigation. The load state is
        # then already reached and the wait returns at once, which also
        # means a navigation that starts after the settle delay is missed.
        await self._sleep(self.settle_delay)
        await wait_for_load(self.session.page, self.policy)

    async def _fill(self, operation: Fill) -> None:
        if operation.content is None:
            logger.info(f"Fill '{operation.target}' has no content; skipping")
            self._report(f"Skipped '{operation.target}' (no content)", success=False)
            return

        element = await self.resolver.by_name(operation.target)
        await type_text(element, operation.content, self.policy, label=operation.target)
        self._report(f"Filled '{operation.target}'")

    def _report(self, message: str, success: bool = True) -> None:
        logger.info(message)
        if self.console:
            print_result(message, success=success, console=self.console)
