"""
Browser Connection Module

Launches or attaches to a Chromium browser through Playwright and hands out
single-tab sessions.
"""

from .controller import ConnectionManager, PageTarget, ScrapeOptions, discover_page_target
from .session import Session, SessionMode

__all__ = [
    "ConnectionManager",
    "PageTarget",
    "ScrapeOptions",
    "discover_page_target",
    "Session",
    "SessionMode",
]
