"""
Unit tests for operation models and the operation interpreter.

Playwright pages and element handles are replaced with mocks; the tests
assert call order, the Fill no-op branch and abort-on-first-failure.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from rich.console import Console

from scraping_wrapper.agents.interpreter import OperationInterpreter
from scraping_wrapper.errors import ConfigurationError, InteractionError
from scraping_wrapper.retry import RetryPolicy
from scraping_wrapper.tools.operation_models import Click, Fill, Navigate, parse_operations
from scraping_wrapper.tools.registry import ElementRegistry
from scraping_wrapper.tools.resolver import ElementResolver
from scraping_wrapper.tui import TUIConfig, create_console


class FakeTab:
    """Records driver calls in order on a shared log."""

    def __init__(self):
        self.log = []
        self.url = "about:blank"
        self.element = MagicMock()
        self.element.scroll_into_view_if_needed = AsyncMock()
        self.element.click = AsyncMock(side_effect=lambda: self.log.append("click"))
        self.element.type = AsyncMock(side_effect=lambda text: self.log.append(f"type:{text}"))

        self.page = MagicMock()
        self.page.goto = AsyncMock(side_effect=self._goto)
        self.page.wait_for_load_state = AsyncMock(
            side_effect=lambda state, timeout: self.log.append(f"wait:{state}")
        )
        self.page.wait_for_selector = AsyncMock(side_effect=self._wait_for_selector)

    async def _goto(self, url, wait_until, timeout):
        self.log.append(f"goto:{url}:{wait_until}")
        self.url = url

    async def _wait_for_selector(self, selector, state, timeout):
        self.log.append(f"query:{selector}")
        return self.element


def make_interpreter(tab, selectors=None, settle_delay=0.5, console=None):
    session = MagicMock()
    session.page = tab.page
    type(session).url = property(lambda _: tab.url)
    policy = RetryPolicy(3, 0)
    registry = ElementRegistry(selectors if selectors is not None else {"q": "input[name=q]"})
    resolver = ElementResolver(session, registry, policy)

    async def sleep(delay):
        tab.log.append(f"sleep:{delay}")

    return OperationInterpreter(
        session,
        resolver,
        policy,
        settle_delay=settle_delay,
        console=console,
        sleep=sleep,
    )


class TestOperationModels:
    """Test parsing of declarative operations."""

    def test_parse_dicts_with_aliases(self):
        operations = parse_operations(
            [
                {"method": "go", "target": "https://example.test/"},
                {"method": "NAVIGATE", "url": "https://example.test/next"},
                {"method": "fill", "target": "q", "content": "hello"},
                {"method": "click", "target": "q", "content": None},
            ]
        )

        assert operations == [
            Navigate(url="https://example.test/"),
            Navigate(url="https://example.test/next"),
            Fill(target="q", content="hello"),
            Click(target="q"),
        ]

    def test_fill_content_is_optional(self):
        (operation,) = parse_operations([{"method": "fill", "target": "q"}])
        assert operation.content is None

    def test_models_pass_through(self):
        operation = Click(target="q")
        assert parse_operations([operation]) == [operation]

    @pytest.mark.parametrize(
        "raw",
        [
            {"method": "scroll", "target": "q"},
            {"method": "click"},
            {"method": "go"},
            {"method": "click", "target": "q", "content": "unexpected"},
            {"method": "fill", "target": ""},
        ],
    )
    def test_malformed_operations_rejected(self, raw):
        with pytest.raises(ConfigurationError):
            parse_operations([raw])

    def test_operations_are_immutable(self):
        operation = Navigate(url="https://example.test/")
        with pytest.raises(Exception):
            operation.url = "https://elsewhere.test/"


class TestOperationInterpreter:
    """Test sequencing and per-variant behavior."""

    @pytest.mark.asyncio
    async def test_navigate_waits_for_load(self):
        tab = FakeTab()
        interpreter = make_interpreter(tab)

        await interpreter.run([Navigate(url="https://example.test/")])

        assert tab.log == ["goto:https://example.test/:load"]

    @pytest.mark.asyncio
    async def test_click_settles_then_waits_for_load(self):
        tab = FakeTab()
        interpreter = make_interpreter(tab, settle_delay=0.5)

        await interpreter.run([Click(target="q")])

        assert tab.log == ["query:input[name=q]", "click", "sleep:0.5", "wait:load"]

    @pytest.mark.asyncio
    async def test_fill_types_content(self):
        tab = FakeTab()
        interpreter = make_interpreter(tab)

        await interpreter.run([Fill(target="q", content="hello")])

        assert tab.log == ["query:input[name=q]", "type:hello"]

    @pytest.mark.asyncio
    async def test_fill_without_content_is_a_no_op(self):
        tab = FakeTab()
        interpreter = make_interpreter(tab, selectors={})

        # Unregistered target is never looked up
        await interpreter.run([Fill(target="unregistered", content=None)])

        assert tab.log == []

    @pytest.mark.asyncio
    async def test_operations_run_in_order(self):
        tab = FakeTab()
        interpreter = make_interpreter(tab, settle_delay=0)

        await interpreter.run(
            [
                Navigate(url="https://example.test/"),
                Fill(target="q", content="hello"),
                Click(target="q"),
            ]
        )

        assert tab.log == [
            "goto:https://example.test/:load",
            "query:input[name=q]",
            "type:hello",
            "query:input[name=q]",
            "click",
            "sleep:0",
            "wait:load",
        ]

    @pytest.mark.asyncio
    async def test_unregistered_fill_aborts_after_navigation(self):
        tab = FakeTab()
        interpreter = make_interpreter(tab)

        with pytest.raises(LookupError):
            await interpreter.run(
                [
                    Navigate(url="https://example.test/"),
                    Fill(target="missing", content="x"),
                    Click(target="q"),
                ]
            )

        # Navigation stays applied; nothing after the failing step runs
        assert tab.log == ["goto:https://example.test/:load"]
        assert tab.url == "https://example.test/"

    @pytest.mark.asyncio
    async def test_exhausted_click_raises_interaction_error(self):
        tab = FakeTab()
        tab.element.click = AsyncMock(side_effect=PlaywrightError("element is detached"))
        interpreter = make_interpreter(tab)

        with pytest.raises(InteractionError):
            await interpreter.run([Click(target="q"), Navigate(url="https://example.test/")])

        assert tab.element.click.await_count == 3
        tab.page.goto.assert_not_called()
        tab.page.wait_for_load_state.assert_not_called()

    @pytest.mark.asyncio
    async def test_navigation_retries_then_succeeds(self):
        tab = FakeTab()
        tab.page.goto = AsyncMock(side_effect=[PlaywrightError("net::ERR_ABORTED"), None])
        interpreter = make_interpreter(tab)

        await interpreter.run([Navigate(url="https://example.test/")])

        assert tab.page.goto.await_count == 2

    @pytest.mark.asyncio
    async def test_malformed_sequence_runs_nothing(self):
        tab = FakeTab()
        interpreter = make_interpreter(tab)

        with pytest.raises(ConfigurationError):
            await interpreter.run(
                [{"method": "go", "target": "https://example.test/"}, {"method": "hover"}]
            )

        assert tab.log == []

    @pytest.mark.asyncio
    async def test_verbose_console_echoes_steps(self):
        tab = FakeTab()
        rich_console = Console(record=True, width=100)
        console = create_console(TUIConfig(show_timestamps=False), rich_console)
        interpreter = make_interpreter(tab, console=console)

        with pytest.raises(LookupError):
            await interpreter.run(
                [
                    {"method": "go", "target": "https://example.test/"},
                    {"method": "fill", "target": "missing", "content": "x"},
                ]
            )

        output = rich_console.export_text()
        assert "[ACTION]" in output
        assert "https://example.test/" in output
        assert "[ERROR]" in output
        assert "SelectorLookupError" in output
