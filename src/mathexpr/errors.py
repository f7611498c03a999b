"""Exceptions raised by the mathexpr lexer, parser and evaluators.

Every error carries the offending token, symbol or name in ``data`` so
callers can report it without parsing the message. None of these are
caught inside the library: any error rejects the whole expression.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mathexpr.nodes import Node


class MathExpressionError(Exception):
    """Base class for all expression errors."""

    def __init__(self, message: str, data: str = ""):
        self.data = data
        super().__init__(message)


class UnknownTokenError(MathExpressionError):
    """No token definition matches the remaining input."""

    def __init__(self, text: str, position: int = 0):
        self.position = position
        super().__init__(f"Unknown token '{text}' encountered at position {position}", text)


class ExpressionSyntaxError(MathExpressionError):
    """The token sequence does not form a valid expression."""

    def __init__(self, data: str = "", message: str | None = None):
        if message is None:
            message = f"Syntax error near '{data}'" if data else "Syntax error"
        super().__init__(message, data)


class DelimiterMismatchError(MathExpressionError):
    """Unmatched parenthesis or brace.

    Attributes:
        node: Placeholder node for an unmatched closing delimiter, or None
            when the problem is an opening delimiter left unclosed.
    """

    def __init__(self, delimiter: str = "", node: Node | None = None):
        self.node = node
        super().__init__(f"Unable to match delimiter '{delimiter}'", delimiter)


class UnknownOperatorError(MathExpressionError):
    def __init__(self, operator: str):
        super().__init__(f"Unknown operator '{operator}'", operator)


class UnexpectedOperatorError(MathExpressionError):
    def __init__(self, operator: str):
        super().__init__(f"Unexpected operator '{operator}'", operator)


class UnknownFunctionError(MathExpressionError):
    def __init__(self, name: str):
        super().__init__(f"Unknown function '{name}'", name)


class UnknownVariableError(MathExpressionError):
    def __init__(self, name: str):
        super().__init__(f"Unknown variable '{name}'", name)


class UnknownConstantError(MathExpressionError):
    def __init__(self, name: str):
        super().__init__(f"Unknown constant '{name}'", name)


class DivisionByZeroError(MathExpressionError, ZeroDivisionError):
    def __init__(self, data: str = "/"):
        super().__init__("Division by zero", data)


class ExponentialError(MathExpressionError):
    """Raised for the undefined form 0^0."""

    def __init__(self, data: str = "0^0"):
        super().__init__("Undefined exponentiation 0^0", data)


class LogarithmOfZeroError(MathExpressionError):
    def __init__(self, data: str = "log"):
        super().__init__("Logarithm of zero is undefined", data)


class NullOperandError(MathExpressionError):
    """An operator node is missing a required operand."""

    def __init__(self, operator: str = ""):
        super().__init__(f"Missing operand for '{operator}'", operator)
