"""
RESULT and ERROR block display for operation outcomes.
"""

from typing import Optional

from rich.panel import Panel
from rich.text import Text

from .console import OperationConsole, get_console


def print_result(
    content: str,
    *,
    success: bool = True,
    console: Optional[OperationConsole] = None,
) -> None:
    """
    Print a RESULT block.

    Args:
        content: The result content to display
        success: Whether the step succeeded (skipped steps pass False)
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    text = Text()
    text.append("ok " if success else "-- ", style="bold green" if success else "dim")
    text.append(content)

    panel = Panel(
        text,
        title=console.block_title("RESULT"),
        title_align="left",
        border_style=console.color_for("result"),
        padding=(0, 1),
    )
    console.console.print(panel)


def print_error(
    error_message: str,
    *,
    error_type: Optional[str] = None,
    console: Optional[OperationConsole] = None,
) -> None:
    """
    Print an ERROR block for the failure that aborted a sequence.

    Args:
        error_message: The error message
        error_type: Exception class name
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    content = Text()
    content.append("Error", style=f"bold {console.config.color_error}")
    if error_type:
        content.append(f" ({error_type})", style="dim")
    content.append("\n\n")
    content.append(error_message)

    panel = Panel(
        content,
        title=console.block_title("ERROR"),
        title_align="left",
        border_style=console.color_for("error"),
        padding=(0, 1),
    )
    console.console.print(panel)
