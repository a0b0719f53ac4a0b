"""
ACTION block display for operations about to run.
"""

from typing import Any, Optional

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .console import OperationConsole, get_console


def format_operation_params(params: dict[str, Any]) -> Table:
    """
    Format operation fields as a Rich table.

    Args:
        params: Dictionary of field names to values

    Returns:
        Rich Table renderable
    """
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Param", style="bold")
    table.add_column("Value")

    for key, value in params.items():
        str_value = "-" if value is None else str(value)
        if len(str_value) > 100:
            str_value = str_value[:97] + "..."
        table.add_row(key, Text(str_value))

    return table


def print_operation(
    step: int,
    method: str,
    *,
    params: Optional[dict[str, Any]] = None,
    console: Optional[OperationConsole] = None,
) -> None:
    """
    Print an ACTION block for one step of a sequence.

    Args:
        step: 1-based position in the sequence
        method: Operation tag (go, click, fill)
        params: Operation fields to display
        console: Console to use (defaults to global console)
    """
    console = console or get_console()

    content = Text()
    content.append(f"{step}. ", style="bold")
    content.append(method, style=f"bold {console.config.color_action}")

    panel = Panel(
        content,
        title=console.block_title("ACTION"),
        title_align="left",
        border_style=console.color_for("action"),
        padding=(0, 1),
    )
    console.console.print(panel)

    if params:
        console.console.print(format_operation_params(params))
