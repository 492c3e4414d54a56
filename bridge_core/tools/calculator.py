"""Arithmetic evaluator used by the ``calculate`` tool.

Grammar (whitespace ignored)::

    expr   := term (("+" | "-") term)*
    term   := factor (("*" | "/") factor)*
    factor := ("+" | "-") factor | "(" expr ")" | NUMBER
    NUMBER := DIGITS ["." DIGITS?] | "." DIGITS

No general-purpose evaluator is involved: the input is tokenized and walked
directly, so nothing outside this grammar can execute.
"""

import re
from typing import List, Optional, Tuple, Union

from bridge_core.config.settings import settings
from bridge_core.domain.exceptions import CalculationError

Number = Union[int, float]

DISALLOWED_CHARS = re.compile(r"[^0-9+\-*/().\s]")
_TOKEN = re.compile(r"\s*(?:(\d+\.\d*|\.\d+|\d+)|(.))")


def sanitize(expression: str) -> str:
    """Drop every character outside ``[0-9+-*/().\\s]``."""

    return DISALLOWED_CHARS.sub("", expression)


def _tokenize(expression: str) -> List[Tuple[str, str]]:
    tokens: List[Tuple[str, str]] = []
    for number, op in _TOKEN.findall(expression):
        if number:
            tokens.append(("num", number))
        elif op.strip():
            tokens.append(("op", op))
    return tokens


class _Parser:
    def __init__(self, tokens: List[Tuple[str, str]], max_depth: int):
        self._tokens = tokens
        self._pos = 0
        self._depth = 0
        self._max_depth = max_depth

    def parse(self) -> Number:
        if not self._tokens:
            raise CalculationError(code="EMPTY_EXPRESSION", message="Empty expression")
        value = self._expr()
        if self._pos < len(self._tokens):
            raise CalculationError(
                code="UNEXPECTED_TOKEN",
                message=f"Unexpected token '{self._tokens[self._pos][1]}'",
            )
        return value

    def _peek(self) -> Optional[str]:
        if self._pos < len(self._tokens):
            kind, text = self._tokens[self._pos]
            return text if kind == "op" else None
        return None

    def _expr(self) -> Number:
        value = self._term()
        while self._peek() in ("+", "-"):
            op = self._tokens[self._pos][1]
            self._pos += 1
            rhs = self._term()
            value = value + rhs if op == "+" else value - rhs
        return value

    def _term(self) -> Number:
        value = self._factor()
        while self._peek() in ("*", "/"):
            op = self._tokens[self._pos][1]
            self._pos += 1
            rhs = self._factor()
            value = value * rhs if op == "*" else _divide(value, rhs)
        return value

    def _factor(self) -> Number:
        if self._pos >= len(self._tokens):
            raise CalculationError(code="UNEXPECTED_END", message="Unexpected end of expression")
        self._depth += 1
        if self._depth > self._max_depth:
            raise CalculationError(code="TOO_DEEP", message="Expression is nested too deeply")
        try:
            kind, text = self._tokens[self._pos]
            self._pos += 1
            if kind == "num":
                return float(text) if "." in text else int(text)
            if text in ("+", "-"):
                operand = self._factor()
                return operand if text == "+" else -operand
            if text == "(":
                value = self._expr()
                if self._peek() != ")":
                    raise CalculationError(code="UNBALANCED", message="Missing closing parenthesis")
                self._pos += 1
                return value
            raise CalculationError(code="UNEXPECTED_TOKEN", message=f"Unexpected token '{text}'")
        finally:
            self._depth -= 1


def _divide(lhs: Number, rhs: Number) -> Number:
    if rhs == 0:
        raise CalculationError(code="DIVISION_BY_ZERO", message="Division by zero")
    if isinstance(lhs, int) and isinstance(rhs, int) and lhs % rhs == 0:
        return lhs // rhs
    return lhs / rhs


def evaluate(expression: str, max_depth: Optional[int] = None) -> Number:
    """Evaluate an already-sanitized arithmetic expression.

    Raises:
        CalculationError: on any syntax error, division by zero or excessive nesting.
    """

    if sanitize(expression) != expression:
        raise CalculationError(code="INVALID_CHARACTERS", message="Invalid characters in expression")
    depth = max_depth if max_depth is not None else settings.calculator_max_depth
    return _Parser(_tokenize(expression), depth).parse()
