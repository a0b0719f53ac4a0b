"""
Rich TUI Output Module

Echoes operation sequences to the terminal when verbose mode is on.

Components:
- OperationConsole: Console wrapper with themed output
- TUIConfig: Configuration for colors and display options
- ACTION/RESULT/ERROR block display functions
"""

from scraping_wrapper.tui.console import (
    BlockType,
    OperationConsole,
    TUIConfig,
    create_console,
    get_console,
)
from scraping_wrapper.tui.action import format_operation_params, print_operation
from scraping_wrapper.tui.result import print_error, print_result

__all__ = [
    # Console infrastructure
    "BlockType",
    "OperationConsole",
    "TUIConfig",
    "create_console",
    "get_console",
    # Block display
    "format_operation_params",
    "print_operation",
    "print_error",
    "print_result",
]
