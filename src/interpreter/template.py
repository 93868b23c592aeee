"""
Template Resolution
Turns raw prop values into resolved values against a Context.

Strings may reference context values with ``{{name}}`` or ``{{a.b.c}}``:

- ``"{{count}}"`` alone returns the raw value (type preserved)
- ``"Hello {{name}}!"`` interpolates
- ``"{{completed}} ? 'done' : 'open'"`` interpolates, then evaluates
"""

import re
from typing import Any, Mapping

from core import get_logger
from .context import MISSING, Context, lookup_path
from .expression import ExpressionError, evaluate

logger = get_logger(__name__)

TEMPLATE_MARKER = "{{"

_SINGLE_REFERENCE = re.compile(r"\{\{(\w+)\}\}")
_REFERENCE = re.compile(r"\{\{([\w.]+)\}\}")
_CONDITIONAL_OPERATORS = ("?", "==", "!=")


def has_template(value: Any) -> bool:
    """True when a string carries at least one template marker."""
    return isinstance(value, str) and TEMPLATE_MARKER in value


def missing_default(name: str, template: str) -> Any:
    """
    Fallback for a single reference whose name is not in context.

    Keeps half-initialized state (e.g. right after switching schemas) from
    showing raw ``{{...}}`` markers in inputs and counters.
    """
    if "input" in name.lower():
        return ""
    if name == "display":
        return "0"
    if "length" in name or "count" in name:
        return 0
    return template


def format_literal(value: Any) -> str:
    """
    Literal form of a context value inside an expression.

    ``None`` becomes the quoted string ``"null"``, so it is truthy in a
    conditional the same way any other non-empty string is.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return '"null"'
    if isinstance(value, (int, float)):
        return _format_number(value)
    return f'"{display_string(value)}"'


def display_string(value: Any) -> str:
    """String form of a value as it appears when interpolated."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else display_string(item) for item in value)
    return str(value)


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _lookup(context: Mapping[str, Any], path: str) -> Any:
    if isinstance(context, Context):
        return context.lookup(path)
    head, _, rest = path.partition(".")
    if head not in context:
        return MISSING
    return lookup_path(context[head], rest) if rest else context[head]


def resolve_string(template: str, context: Mapping[str, Any]) -> Any:
    """Resolve a single string value (see module docstring)."""
    if TEMPLATE_MARKER not in template:
        return template

    single = _SINGLE_REFERENCE.fullmatch(template)
    if single:
        name = single.group(1)
        value = context.get(name) if name in context else None
        if value is not None:
            return value
        logger.debug("template_unresolved", name=name)
        return missing_default(name, template)

    replaced = False

    def substitute(match: re.Match[str]) -> str:
        nonlocal replaced
        value = _lookup(context, match.group(1))
        if value is MISSING:
            return match.group(0)
        replaced = True
        return format_literal(value)

    substituted = _REFERENCE.sub(substitute, template)
    if not replaced:
        return template

    if any(op in substituted for op in _CONDITIONAL_OPERATORS):
        try:
            return evaluate(substituted)
        except ExpressionError as e:
            logger.debug("expression_failed", expression=substituted, error=str(e))

    return substituted.replace('"', "")


def resolve(value: Any, context: Mapping[str, Any]) -> Any:
    """
    Resolve a raw prop value.

    Strings follow the template rules, mappings resolve field by field,
    everything else (numbers, booleans, sequences, None) passes through.
    Never raises for any input.
    """
    if isinstance(value, str):
        return resolve_string(value, context)
    if isinstance(value, Mapping):
        return {key: resolve(item, context) for key, item in value.items()}
    return value


def resolve_props(props: Mapping[str, Any], context: Mapping[str, Any]) -> dict[str, Any]:
    """Resolve every prop of a node."""
    return {key: resolve(value, context) for key, value in props.items()}


__all__ = [
    "resolve",
    "resolve_props",
    "resolve_string",
    "has_template",
    "missing_default",
    "format_literal",
    "display_string",
]
