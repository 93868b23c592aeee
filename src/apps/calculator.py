"""
Calculator App
Schema plus the action handler that drives its display.
"""

import ast
import math
import operator as op
import re
from typing import Any, Mapping

from core import get_logger
from interpreter import SET_STATE_KEY
from monitoring import metrics_collector

logger = get_logger(__name__)

ERROR_DISPLAY = "Error"
INITIAL_DISPLAY = "0"

# Display symbols -> arithmetic operators
SYMBOL_MAP = {"÷": "/", "×": "*", "−": "-", "+": "+"}

_TRAILING_OPERATOR = re.compile(r"[+\-*/÷×−]$")
_DISALLOWED = re.compile(r"[^0-9+\-*/().\s]")
# Leading zeros of a number (not after a digit or a decimal point)
_LEADING_ZEROS = re.compile(r"(?<![\d.])0+(?=\d)")

_BINARY_OPS = {
    ast.Add: op.add,
    ast.Sub: op.sub,
    ast.Mult: op.mul,
    ast.Div: op.truediv,
}
_UNARY_OPS = {
    ast.UAdd: op.pos,
    ast.USub: op.neg,
}


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant):
        if isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
            return node.value
        raise ValueError("Only numeric constants allowed")
    if isinstance(node, ast.BinOp):
        func = _BINARY_OPS.get(type(node.op))
        if func is None:
            raise ValueError("Operator not allowed")
        return func(_eval_node(node.left), _eval_node(node.right))
    if isinstance(node, ast.UnaryOp):
        func = _UNARY_OPS.get(type(node.op))
        if func is None:
            raise ValueError("Unary operator not allowed")
        return func(_eval_node(node.operand))
    raise ValueError(f"Unsupported expression: {type(node).__name__}")


def evaluate_arithmetic(expression: str) -> str:
    """
    Evaluate a display expression to its display result.

    Only digits, ``+ - * /``, parentheses and dots survive sanitizing.
    Integral results print without decimals, others are rounded to 10
    places. Division by zero, non-finite results and malformed input all
    yield ``"Error"``.

    Examples:
        >>> evaluate_arithmetic("7 + 3")
        '10'
        >>> evaluate_arithmetic("5 + 05")
        '10'
        >>> evaluate_arithmetic("1 / 0")
        'Error'
    """
    sanitized = _LEADING_ZEROS.sub("", _DISALLOWED.sub("", expression).strip())
    if not sanitized:
        return INITIAL_DISPLAY

    try:
        result = float(_eval_node(ast.parse(sanitized, mode="eval")))
    except (SyntaxError, ValueError, ZeroDivisionError, OverflowError) as e:
        logger.warning("calculation_failed", expression=sanitized, error=str(e))
        return ERROR_DISPLAY

    if not math.isfinite(result):
        return ERROR_DISPLAY
    if result.is_integer():
        return str(int(result))
    return repr(round(result, 10))


def to_operators(display: str) -> str:
    """Map display symbols to arithmetic operators."""
    expression = display.strip()
    for symbol, operator_symbol in SYMBOL_MAP.items():
        expression = expression.replace(symbol, operator_symbol)
    return expression


class CalculatorActions:
    """
    Action handler for the calculator schema.

    Reads ``display`` and ``buttonLabel`` from the event context and writes
    the new display back through the scope's ``setState``.
    """

    def __call__(self, action: str, context: Mapping[str, Any]) -> None:
        set_state = context.get(SET_STATE_KEY)
        if set_state is None:
            logger.error("set_state_missing", app="calculator", action=action)
            metrics_collector.record_diagnostic("set_state_missing")
            return

        display = context.get("display")
        display = INITIAL_DISPLAY if display is None else str(display)
        label = context.get("buttonLabel")
        label = "" if label is None else str(label)

        if action == "number":
            display = self.press_number(display, label)
        elif action == "operator":
            display = self.press_operator(display, label)
        elif action == "equals":
            display = evaluate_arithmetic(to_operators(display))
        elif action == "clear":
            display = INITIAL_DISPLAY
        else:
            logger.warning("unknown_action", app="calculator", action=action)

        set_state({"display": display})

    @staticmethod
    def press_number(display: str, label: str) -> str:
        if display in (INITIAL_DISPLAY, ERROR_DISPLAY):
            return label
        return display.rstrip() + label

    @staticmethod
    def press_operator(display: str, label: str) -> str:
        if display in (INITIAL_DISPLAY, ERROR_DISPLAY):
            return display
        display = display.rstrip()
        # Replace a trailing operator instead of stacking a second one
        if _TRAILING_OPERATOR.search(display):
            display = display[:-1].rstrip()
        return f"{display} {label} "


# Schema

_DIGIT_STYLE = {
    "backgroundColor": "#ffffff",
    "color": "#1f2937",
    "fontSize": "20px",
    "fontWeight": "600",
    "padding": "20px",
    "borderRadius": "12px",
    "boxShadow": "0 4px 12px rgba(0, 0, 0, 0.1)",
    "border": "1px solid #e5e7eb",
}

_OPERATOR_STYLE = {
    "backgroundColor": "#f59e0b",
    "color": "#ffffff",
    "fontSize": "24px",
    "fontWeight": "600",
    "padding": "20px",
    "borderRadius": "12px",
    "boxShadow": "0 4px 12px rgba(245, 158, 11, 0.3)",
}


def _button(label: str, action: str, style: dict[str, Any], **extra_style: Any) -> dict[str, Any]:
    return {
        "type": "Button",
        "props": {"label": label, "style": {**style, **extra_style}},
        "onClick": action,
    }


def _digit(label: str, **extra_style: Any) -> dict[str, Any]:
    return _button(label, "number", _DIGIT_STYLE, **extra_style)


def _operator(label: str) -> dict[str, Any]:
    return _button(label, "operator", _OPERATOR_STYLE)


CALCULATOR_SCHEMA: dict[str, Any] = {
    "type": "Container",
    "props": {
        "flexDirection": "column",
        "gap": 24,
        "padding": 32,
        "style": {
            "maxWidth": "420px",
            "margin": "0 auto",
            "background": "linear-gradient(145deg, #ffffff 0%, #f8f9fa 100%)",
            "borderRadius": "24px",
            "boxShadow": "0 20px 60px rgba(0, 0, 0, 0.15), 0 0 0 1px rgba(0, 0, 0, 0.05)",
        },
    },
    "children": [
        {
            "type": "Text",
            "props": {
                "content": "Calculator",
                "fontSize": 28,
                "fontWeight": "bold",
                "color": "#1f2937",
                "style": {"textAlign": "center", "marginBottom": "8px"},
            },
        },
        {
            "type": "State",
            "props": {"initialState": {"display": "0"}},
            "children": [
                {
                    "type": "Container",
                    "props": {
                        "style": {
                            "background": "linear-gradient(135deg, #1e293b 0%, #0f172a 100%)",
                            "padding": "24px 28px",
                            "borderRadius": "16px",
                            "minHeight": "100px",
                            "alignItems": "center",
                            "justifyContent": "flex-end",
                        },
                    },
                    "children": [
                        {
                            "type": "Text",
                            "props": {
                                "content": "{{display}}",
                                "fontSize": 42,
                                "fontWeight": "bold",
                                "color": "#ffffff",
                                "style": {
                                    "fontFamily": "'SF Mono', 'Monaco', 'Roboto Mono', monospace",
                                    "wordBreak": "break-all",
                                    "textAlign": "right",
                                },
                            },
                        },
                    ],
                },
                {
                    "type": "Grid",
                    "props": {"columns": 4, "gap": 12, "style": {"marginTop": "8px"}},
                    "children": [
                        _button(
                            "C",
                            "clear",
                            {**_OPERATOR_STYLE, "backgroundColor": "#ef4444", "fontSize": "20px",
                             "boxShadow": "0 4px 12px rgba(239, 68, 68, 0.3)"},
                        ),
                        _operator("÷"),
                        _operator("×"),
                        _operator("−"),
                        _digit("7"),
                        _digit("8"),
                        _digit("9"),
                        _operator("+"),
                        _digit("4"),
                        _digit("5"),
                        _digit("6"),
                        _button(
                            "=",
                            "equals",
                            {**_OPERATOR_STYLE, "backgroundColor": "#10b981", "fontSize": "28px",
                             "fontWeight": "700", "boxShadow": "0 4px 16px rgba(16, 185, 129, 0.4)"},
                            gridRow="span 2",
                        ),
                        _digit("1"),
                        _digit("2"),
                        _digit("3"),
                        _digit("0", gridColumn="span 2"),
                        _digit(".", fontSize="24px"),
                    ],
                },
            ],
        },
    ],
}
