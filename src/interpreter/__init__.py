"""
Schema Interpreter
Turns SchemaNode trees plus a Context into rendered Element trees.
"""

from primitives import Element
from .context import MISSING, Context, lookup_path
from .expression import ExpressionError, evaluate, is_truthy
from .template import resolve, resolve_props, resolve_string
from .state import (
    SET_STATE_KEY,
    StatePatch,
    StateScope,
    StateRegistry,
    fingerprint,
    structurally_equal,
)
from .renderer import Dispatch, Interpreter, interpret

__all__ = [
    "Context",
    "MISSING",
    "lookup_path",
    "ExpressionError",
    "evaluate",
    "is_truthy",
    "resolve",
    "resolve_props",
    "resolve_string",
    "SET_STATE_KEY",
    "StatePatch",
    "StateScope",
    "StateRegistry",
    "fingerprint",
    "structurally_equal",
    "Dispatch",
    "Interpreter",
    "interpret",
    "Element",
]
