"""
Operation execution.
"""

from .interpreter import AnyOperation, OperationInterpreter

__all__ = [
    "AnyOperation",
    "OperationInterpreter",
]
