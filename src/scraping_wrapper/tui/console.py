"""
Rich Console Setup

Themed console used to echo operations and their outcomes.
Configured via environment variables for customizable appearance.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

from rich.console import Console
from rich.markup import escape
from rich.style import Style
from rich.theme import Theme


BlockType = Literal["action", "result", "error"]


@dataclass
class TUIConfig:
    """
    TUI configuration loaded from environment variables.

    Attributes:
        color_action: Color for ACTION blocks (operations about to run)
        color_result: Color for RESULT blocks (outcomes)
        color_error: Color for ERROR blocks (aborting failures)
        show_timestamps: Whether to display timestamps
    """

    color_action: str = "green"
    color_result: str = "yellow"
    color_error: str = "red"
    show_timestamps: bool = True

    @classmethod
    def from_env(cls) -> "TUIConfig":
        """Load configuration from environment variables."""
        return cls(
            color_action=os.getenv("COLOR_ACTION", "green"),
            color_result=os.getenv("COLOR_RESULT", "yellow"),
            color_error=os.getenv("COLOR_ERROR", "red"),
            show_timestamps=os.getenv("SHOW_TIMESTAMPS", "true").lower() == "true",
        )


def create_theme(config: TUIConfig) -> Theme:
    """Create a Rich theme from TUI configuration."""
    return Theme(
        {
            "action": Style(color=config.color_action, bold=True),
            "result": Style(color=config.color_result, bold=True),
            "error": Style(color=config.color_error, bold=True),
            "timestamp": Style(dim=True),
            "label": Style(bold=True),
        }
    )


class OperationConsole:
    """
    Rich console wrapper for operation output.

    Provides formatted ACTION/RESULT/ERROR blocks with consistent styling
    and optional timestamps.
    """

    def __init__(self, config: Optional[TUIConfig] = None, console: Optional[Console] = None):
        """
        Initialize the console.

        Args:
            config: TUI configuration. If None, loads from environment.
            console: Rich console to write to (tests pass a recording one)
        """
        self.config = config or TUIConfig.from_env()
        self._theme = create_theme(self.config)
        self.console = console or Console(theme=self._theme)

    def get_timestamp(self) -> str:
        """Get formatted timestamp if enabled."""
        if self.config.show_timestamps:
            return datetime.now().strftime("%H:%M:%S")
        return ""

    def block_title(self, label: str) -> str:
        """Panel title with the timestamp prefix when enabled."""
        timestamp = self.get_timestamp()
        title = escape(f"[{label}]")
        if timestamp:
            return f"{timestamp} {title}"
        return title

    def color_for(self, block_type: BlockType) -> str:
        """Border color for a block type."""
        return {
            "action": self.config.color_action,
            "result": self.config.color_result,
            "error": self.config.color_error,
        }[block_type]


_console: Optional[OperationConsole] = None


def get_console() -> OperationConsole:
    """Get or create the global console instance."""
    global _console
    if _console is None:
        _console = OperationConsole()
    return _console


def create_console(
    config: Optional[TUIConfig] = None,
    console: Optional[Console] = None,
) -> OperationConsole:
    """Create a new console instance with optional configuration."""
    return OperationConsole(config, console)
