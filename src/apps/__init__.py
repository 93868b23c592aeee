"""
Built-in Apps
Example schemas and the action handlers that drive them.
"""

from .calculator import CALCULATOR_SCHEMA, CalculatorActions, evaluate_arithmetic
from .todo import TODO_SCHEMA, TodoActions
from .registry import (
    APPS,
    AppDefinition,
    example_prompts,
    get_app,
    list_apps,
    select_app,
)

__all__ = [
    "CALCULATOR_SCHEMA",
    "CalculatorActions",
    "evaluate_arithmetic",
    "TODO_SCHEMA",
    "TodoActions",
    "APPS",
    "AppDefinition",
    "example_prompts",
    "get_app",
    "list_apps",
    "select_app",
]
