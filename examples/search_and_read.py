#!/usr/bin/env python
"""
Search and Read Example

Fills a search box, submits it and prints the first result heading, using
a named-element registry and a declarative operation sequence.

Usage:
    python examples/search_and_read.py

    # Attach to a Chrome started with --remote-debugging-port=9222
    SCRAPER_ATTACH_PORT=9222 python examples/search_and_read.py

Requirements:
    - Package installed: pip install -e .
    - Browser installed: playwright install chromium
"""

import asyncio

from scraping_wrapper import Click, Fill, Navigate, ScrapeOptions, ScrapingWrapper
from scraping_wrapper.config import configure_logging


async def main():
    """Run the search sequence."""
    options = ScrapeOptions.from_env(
        dom_defs={
            "search_text_area": "input[name=q]",
            "search_button": "button[type=submit]",
            "first_result": "h3",
        },
        headless=False,
        window_size=(1920, 1080),
        verbose=True,
    )

    operations = [
        Navigate(url="https://duckduckgo.com/html/"),
        Fill(target="search_text_area", content="playwright python"),
        Click(target="search_button"),
    ]

    async with ScrapingWrapper(options) as wrapper:
        await wrapper.operate(operations)
        first_result = await wrapper.get_inner_text("first_result")
        print(f"first_result: {first_result}")

        await wrapper.show_dialog_and_wait("Done. Press OK to close.")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
