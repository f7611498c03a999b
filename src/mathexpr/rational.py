"""Exact evaluation over rational numbers.

Every value is a ``fractions.Fraction``. Anything that would leave the
rationals (a float literal, pi, sin, an irrational root) raises
ValueError instead of silently rounding.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any, Mapping

from mathexpr.errors import (
    DivisionByZeroError,
    ExponentialError,
    ExpressionSyntaxError,
    NullOperandError,
    UnknownConstantError,
    UnknownFunctionError,
    UnknownOperatorError,
    UnknownVariableError,
)
from mathexpr.functions import Domain, FunctionRegistry
from mathexpr.nodes import (
    CONSTANTS,
    BooleanNode,
    ConstantNode,
    FloatNode,
    FunctionNode,
    InfixNode,
    IntegerNode,
    Node,
    RationalNode,
    StringNode,
    TernaryNode,
    VariableNode,
)
from mathexpr.numbers import integer_root, parse_rational
from mathexpr.visitor import Visitor


def rational_power(base: Fraction, exponent: Fraction) -> Fraction:
    """Exact ``base ** exponent``.

    Fractional exponents p/q succeed only when base is a perfect q-th power.

    Raises:
        ExponentialError: For 0^0
        DivisionByZeroError: For zero raised to a negative power
        ValueError: If the result is not rational
    """
    if base == 0:
        if exponent == 0:
            raise ExponentialError("0^0")
        if exponent < 0:
            raise DivisionByZeroError("^")
        return Fraction(0)

    if exponent.denominator == 1:
        return base ** exponent.numerator

    root = exponent.denominator
    negative = base < 0
    if negative and root % 2 == 0:
        raise ValueError(f"Expecting rational number, {base}^({exponent}) is not real")

    numerator = integer_root(abs(base.numerator), root)
    denominator = integer_root(base.denominator, root)
    if numerator is None or denominator is None:
        raise ValueError(f"Expecting rational number, {base}^({exponent}) is irrational")

    result = Fraction(-numerator if negative else numerator, denominator)
    return result ** exponent.numerator


class RationalEvaluator(Visitor):
    """Evaluate an AST exactly.

    Variables may be bound to ints, Fractions or "p/q" strings.

    Usage:
        evaluator = RationalEvaluator({"x": "1/3"})
        evaluator.evaluate(parse("x + 1/6"))  # Fraction(1, 2)
    """

    domain = Domain.RATIONAL

    def __init__(self, variables: Mapping[str, Any] | None = None):
        self.variables: dict[str, Any] = dict(variables or {})

    def evaluate(self, node: Node) -> Fraction:
        return node.accept(self)

    def visit_integer(self, node: IntegerNode) -> Fraction:
        return Fraction(node.value)

    def visit_rational(self, node: RationalNode) -> Fraction:
        return node.to_fraction()

    def visit_float(self, node: FloatNode) -> Fraction:
        raise ValueError(f"Expecting rational number, got {node.value}")

    def visit_boolean(self, node: BooleanNode) -> Fraction:
        raise ValueError("Expecting rational number, got a boolean")

    def visit_constant(self, node: ConstantNode) -> Fraction:
        if node.name in CONSTANTS:
            raise ValueError(f"Expecting rational number, '{node.name}' is not rational")
        raise UnknownConstantError(node.name)

    def visit_variable(self, node: VariableNode) -> Fraction:
        if node.name not in self.variables:
            raise UnknownVariableError(node.name)
        return parse_rational(self.variables[node.name])

    def visit_string(self, node: StringNode) -> Fraction:
        raise ExpressionSyntaxError(node.text, f"Unexpected literal '{node.text}'")

    def visit_infix(self, node: InfixNode) -> Fraction:
        """Evaluate an arithmetic operator exactly.

        Raises:
            DivisionByZeroError: For x/0
            ExponentialError: For 0^0
            NullOperandError: If an operand is missing
            UnknownOperatorError: For relational or boolean operators
        """
        if node.left is None or (node.right is None and not node.is_unary):
            raise NullOperandError(node.operator)
        if node.operator == "-" and node.right is None:
            return -node.left.accept(self)
        if node.is_logical:
            raise UnknownOperatorError(node.operator)

        a = node.left.accept(self)
        b = node.right.accept(self)

        if node.operator == "+":
            return a + b
        if node.operator == "-":
            return a - b
        if node.operator == "*":
            return a * b
        if node.operator == "/":
            if b == 0:
                raise DivisionByZeroError("/")
            return a / b
        if node.operator == "^":
            return rational_power(a, b)
        raise UnknownOperatorError(node.operator)

    def visit_ternary(self, node: TernaryNode) -> Fraction:
        raise ExpressionSyntaxError("if", "Conditionals need a logic evaluator")

    def visit_function(self, node: FunctionNode) -> Fraction:
        """Apply an exact function.

        Raises:
            ValueError: For functions that only exist over the reals
            UnknownFunctionError: For names no domain knows
        """
        if not FunctionRegistry.is_registered(node.name, self.domain):
            if FunctionRegistry.is_registered(node.name, Domain.REAL):
                raise ValueError(
                    f"Expecting rational number, '{node.name}' is not a rational function"
                )
            raise UnknownFunctionError(node.name)
        definition = FunctionRegistry.get(node.name, self.domain)
        arguments = [argument.accept(self) for argument in node.arguments]
        return definition.implementation(*arguments)
