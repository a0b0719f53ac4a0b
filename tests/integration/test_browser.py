"""
Integration tests against a real headless Chromium.

Pages are served with page.set_content or page.route, so no network access
is needed. Requires `playwright install chromium`.
"""

import time

import pytest

from scraping_wrapper import (
    Click,
    ElementNotFoundError,
    Fill,
    Navigate,
    ScrapeOptions,
    ScrapingWrapper,
)
from scraping_wrapper.browser import ConnectionManager

pytestmark = pytest.mark.browser


SEARCH_PAGE = """
<html>
<head><title>Search</title></head>
<body>
    <form onsubmit="return false;">
        <input type="text" name="q" />
        <button type="submit" id="go">Search</button>
    </form>
</body>
</html>
"""

RESULTS_PAGE = """
<html>
<body>
    <h3>Result</h3>
    <p>Result</p>
    <h3>  Result  </h3>
    <h3>Result</h3>
    <h3>Other</h3>
</body>
</html>
"""


def fast_options(**overrides) -> ScrapeOptions:
    values = dict(
        headless=True,
        dom_defs={"q": "input[name=q]", "heading": "h3", "button": "#go"},
        retry_attempts=2,
        retry_delay=0,
        element_timeout_ms=200,
        settle_delay=0,
    )
    values.update(overrides)
    return ScrapeOptions(**values)


async def serve(page, url: str, html: str) -> None:
    async def fulfill(route):
        await route.fulfill(status=200, content_type="text/html", body=html)

    await page.route(url, fulfill)


@pytest.mark.asyncio
async def test_launch_selects_newest_tab_and_close_keeps_browser():
    async with ConnectionManager(fast_options(window_size=(1024, 700))) as manager:
        session = await manager.connect()

        assert session.mode == "launch"
        assert session.page.viewport_size == {"width": 1024, "height": 700}

        await manager.close(session)
        assert session.is_closed
        assert manager.is_connected


@pytest.mark.asyncio
async def test_search_box_end_to_end():
    async with ScrapingWrapper(fast_options()) as wrapper:
        page = wrapper.session.page
        await serve(page, "https://example.test/", SEARCH_PAGE)

        load_waits = []
        original_wait = page.wait_for_load_state

        async def recording_wait(*args, **kwargs):
            load_waits.append(args)
            return await original_wait(*args, **kwargs)

        page.wait_for_load_state = recording_wait

        await wrapper.operate(
            [
                Navigate(url="https://example.test/"),
                Fill(target="q", content="hello"),
                Click(target="q"),
            ]
        )

        element = await wrapper.get_dom("q")
        assert await element.input_value() == "hello"
        assert load_waits == [("load",)]


@pytest.mark.asyncio
async def test_failed_step_keeps_earlier_navigation():
    async with ScrapingWrapper(fast_options()) as wrapper:
        page = wrapper.session.page
        await serve(page, "https://example.test/", SEARCH_PAGE)

        with pytest.raises(LookupError):
            await wrapper.operate(
                [
                    Navigate(url="https://example.test/"),
                    Fill(target="missing", content="x"),
                ]
            )

        assert page.url == "https://example.test/"
        assert await page.title() == "Search"


@pytest.mark.asyncio
async def test_by_text_returns_nth_match_in_document_order():
    async with ScrapingWrapper(fast_options()) as wrapper:
        page = wrapper.session.page
        await page.set_content(RESULTS_PAGE)
        await page.evaluate(
            "() => document.querySelectorAll('h3').forEach((h, i) => h.dataset.pos = i)"
        )

        second = await wrapper.get_dom_by_text("Result", "h3", 2)
        assert await second.get_attribute("data-pos") == "1"

        third = await wrapper.get_dom_by_text("Result", "h3", 3)
        assert await third.get_attribute("data-pos") == "2"

        any_tag = await wrapper.get_dom_by_text("Result", index=2)
        assert await any_tag.evaluate("el => el.tagName") == "P"


@pytest.mark.asyncio
async def test_by_text_index_beyond_matches_fails():
    async with ScrapingWrapper(fast_options()) as wrapper:
        await wrapper.session.page.set_content(RESULTS_PAGE)

        with pytest.raises(ElementNotFoundError):
            await wrapper.get_dom_by_text("Result", "h3", 5)


@pytest.mark.asyncio
async def test_get_inner_text_reads_first_match():
    async with ScrapingWrapper(fast_options()) as wrapper:
        await wrapper.session.page.set_content(RESULTS_PAGE)

        assert await wrapper.get_inner_text("heading") == "Result"


@pytest.mark.asyncio
async def test_hidden_element_resolves_without_waiting_for_visibility():
    async with ScrapingWrapper(fast_options()) as wrapper:
        await wrapper.session.page.set_content(
            '<html><body><input name="q" style="display:none"></body></html>'
        )

        start = time.monotonic()
        element = await wrapper.get_dom("q")
        elapsed = time.monotonic() - start

        assert await element.get_attribute("name") == "q"
        assert elapsed < 5.0


@pytest.mark.asyncio
async def test_show_dialog_dispatches_alert_without_blocking():
    async with ScrapingWrapper(fast_options()) as wrapper:
        page = wrapper.session.page
        await page.set_content("<html><body></body></html>")

        async with page.expect_event("dialog") as dialog_info:
            await wrapper.show_dialog_and_wait("Solve the captcha, then press OK")

        dialog = await dialog_info.value
        assert dialog.type == "alert"
        assert dialog.message == "Solve the captcha, then press OK"
        await dialog.accept()
