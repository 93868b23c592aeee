"""
Conditional Expression Evaluator

Evaluates the literal-only expressions left after template substitution,
e.g. ``true ? "done" : "open"`` or ``3 === 1 ? "task" : "tasks"``.

Grammar::

    expr     := or ( "?" expr ":" expr )?
    or       := and ( "||" and )*
    and      := equality ( "&&" equality )*
    equality := unary ( ("===" | "!==" | "==" | "!=") unary )*
    unary    := ("!" | "-") unary | primary
    primary  := NUMBER | STRING | true | false | null | undefined | "(" expr ")"

Identifiers other than the four keywords are rejected, so nothing outside the
substituted literals can be reached.
"""

import re
from dataclasses import dataclass
from typing import Any


class ExpressionError(ValueError):
    """Expression is not well-formed."""


@dataclass(frozen=True)
class Token:
    kind: str  # "num", "str", "kw", "op", "end"
    value: Any
    pos: int


KEYWORDS = {"true": True, "false": False, "null": None, "undefined": None}

_NUMBER = re.compile(r"\d+(?:\.\d+)?(?:[eE][+-]?\d+)?|\.\d+")
_WORD = re.compile(r"[A-Za-z_$][\w$]*")
_OPERATORS = ("===", "!==", "==", "!=", "&&", "||", "!", "?", ":", "(", ")", "-")


def tokenize(text: str) -> list[Token]:
    """Split expression text into tokens."""
    tokens: list[Token] = []
    pos = 0
    length = len(text)

    while pos < length:
        char = text[pos]

        if char.isspace():
            pos += 1
            continue

        if char in "\"'":
            end = text.find(char, pos + 1)
            if end == -1:
                raise ExpressionError(f"unterminated string at {pos}")
            tokens.append(Token("str", text[pos + 1:end], pos))
            pos = end + 1
            continue

        match = _NUMBER.match(text, pos)
        if match:
            literal = match.group()
            number = float(literal) if any(c in literal for c in ".eE") else int(literal)
            tokens.append(Token("num", number, pos))
            pos = match.end()
            continue

        match = _WORD.match(text, pos)
        if match:
            word = match.group()
            if word not in KEYWORDS:
                raise ExpressionError(f"unexpected name {word!r} at {pos}")
            tokens.append(Token("kw", KEYWORDS[word], pos))
            pos = match.end()
            continue

        for op in _OPERATORS:
            if text.startswith(op, pos):
                tokens.append(Token("op", op, pos))
                pos += len(op)
                break
        else:
            raise ExpressionError(f"unexpected character {char!r} at {pos}")

    tokens.append(Token("end", None, length))
    return tokens


def is_truthy(value: Any) -> bool:
    """Truthiness of the schema language: "", 0, NaN, false and null are falsy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0 and value == value
    if isinstance(value, str):
        return value != ""
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """``===``: same type family and same value; booleans never equal numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def loose_equals(left: Any, right: Any) -> bool:
    """``==``: like ``===`` but numbers compare with numeric strings and booleans."""
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool):
        left = int(left)
    if isinstance(right, bool):
        right = int(right)
    if _is_number(left) and isinstance(right, str):
        return _coerce_number(right) == left
    if isinstance(left, str) and _is_number(right):
        return _coerce_number(left) == right
    return strict_equals(left, right)


def _coerce_number(text: str) -> float | None:
    stripped = text.strip()
    if not stripped:
        return 0
    try:
        return float(stripped)
    except ValueError:
        return None


class _Parser:
    """Recursive-descent evaluator over a token list."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _accept(self, op: str) -> bool:
        token = self.current
        if token.kind == "op" and token.value == op:
            self.index += 1
            return True
        return False

    def _expect(self, op: str) -> None:
        if not self._accept(op):
            raise ExpressionError(f"expected {op!r} at {self.current.pos}")

    def parse(self) -> Any:
        value = self.expr()
        if self.current.kind != "end":
            raise ExpressionError(f"unexpected token {self.current.value!r} at {self.current.pos}")
        return value

    def expr(self) -> Any:
        condition = self.logical_or()
        if self._accept("?"):
            when_true = self.expr()
            self._expect(":")
            when_false = self.expr()
            return when_true if is_truthy(condition) else when_false
        return condition

    def logical_or(self) -> Any:
        value = self.logical_and()
        while self._accept("||"):
            right = self.logical_and()
            value = value if is_truthy(value) else right
        return value

    def logical_and(self) -> Any:
        value = self.equality()
        while self._accept("&&"):
            right = self.equality()
            value = right if is_truthy(value) else value
        return value

    def equality(self) -> Any:
        value = self.unary()
        while True:
            if self._accept("==="):
                value = strict_equals(value, self.unary())
            elif self._accept("!=="):
                value = not strict_equals(value, self.unary())
            elif self._accept("=="):
                value = loose_equals(value, self.unary())
            elif self._accept("!="):
                value = not loose_equals(value, self.unary())
            else:
                return value

    def unary(self) -> Any:
        if self._accept("!"):
            return not is_truthy(self.unary())
        if self._accept("-"):
            operand = self.unary()
            if not _is_number(operand):
                raise ExpressionError("unary '-' needs a number")
            return -operand
        return self.primary()

    def primary(self) -> Any:
        token = self.current
        if token.kind in ("num", "str", "kw"):
            self.index += 1
            return token.value
        if self._accept("("):
            value = self.expr()
            self._expect(")")
            return value
        raise ExpressionError(f"unexpected token {token.value!r} at {token.pos}")


def evaluate(text: str) -> Any:
    """
    Evaluate a literal-only conditional expression.

    Returns:
        The expression value (bool, number, string or None)

    Raises:
        ExpressionError: If the text is not a well-formed expression
    """
    try:
        return _Parser(tokenize(text)).parse()
    except RecursionError as e:
        raise ExpressionError("expression nested too deeply") from e


__all__ = ["ExpressionError", "evaluate", "tokenize", "is_truthy", "strict_equals", "loose_equals"]
