"""
Browser Tools

Driver-facing building blocks, each retried with a fixed policy:
- Element registry and resolver (by name, by text)
- Navigation, load waits and the dialog checkpoint
- Click, type and text extraction
- Declarative operation models
"""

from .registry import ElementRegistry
from .resolver import ElementResolver, build_text_xpath, xpath_literal
from .navigation import navigate, wait_for_load, show_dialog_and_wait
from .interactions import click, type_text, read_inner_text
from .operation_models import (
    Click,
    Fill,
    Navigate,
    Operation,
    describe_operation,
    parse_operations,
)

__all__ = [
    # Elements
    "ElementRegistry",
    "ElementResolver",
    "build_text_xpath",
    "xpath_literal",
    # Navigation
    "navigate",
    "wait_for_load",
    "show_dialog_and_wait",
    # Interactions
    "click",
    "type_text",
    "read_inner_text",
    # Operations
    "Click",
    "Fill",
    "Navigate",
    "Operation",
    "describe_operation",
    "parse_operations",
]
