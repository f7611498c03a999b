"""Evaluation over the complex numbers.

Real operands are promoted to complex with a zero imaginary part. The
function table lives in ``mathexpr.builtins`` and is built on cmath.
"""

from __future__ import annotations

import cmath
import math
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
from mathexpr.numbers import parse_complex
from mathexpr.visitor import Visitor

_COMPLEX_CONSTANTS: dict[str, complex] = {
    "pi": complex(math.pi, 0.0),
    "e": complex(math.e, 0.0),
    "i": 1j,
    "NAN": complex(math.nan, 0.0),
    "INF": complex(math.inf, 0.0),
}


def complex_power(base: complex, exponent: complex) -> complex:
    """Principal value of ``base ** exponent``.

    Raises:
        ExponentialError: For 0^0
        DivisionByZeroError: For zero raised to a negative or complex power
    """
    if base == 0 and exponent == 0:
        raise ExponentialError("0^0")
    try:
        return base ** exponent
    except ZeroDivisionError:
        raise DivisionByZeroError("^")


class ComplexEvaluator(Visitor):
    """Evaluate an AST to a Python ``complex``.

    Variables may be bound to numbers or strings such as "1+2i", "-i"
    and "3/4".

    Usage:
        evaluator = ComplexEvaluator({"z": "1+i"})
        evaluator.evaluate(parse("z*conj(z)", lexer=ComplexMathLexer()))  # (2+0j)
    """

    domain = Domain.COMPLEX

    def __init__(self, variables: Mapping[str, Any] | None = None):
        self.variables: dict[str, Any] = dict(variables or {})

    def evaluate(self, node: Node) -> complex:
        return node.accept(self)

    def visit_integer(self, node: IntegerNode) -> complex:
        return complex(node.value, 0.0)

    def visit_rational(self, node: RationalNode) -> complex:
        return complex(node.value, 0.0)

    def visit_float(self, node: FloatNode) -> complex:
        return complex(node.value, 0.0)

    def visit_boolean(self, node: BooleanNode) -> complex:
        raise ExpressionSyntaxError(
            str(node.value).lower(), "Boolean values are not allowed in arithmetic"
        )

    def visit_constant(self, node: ConstantNode) -> complex:
        if node.name not in _COMPLEX_CONSTANTS:
            raise UnknownConstantError(node.name)
        return _COMPLEX_CONSTANTS[node.name]

    def visit_variable(self, node: VariableNode) -> complex:
        if node.name not in self.variables:
            raise UnknownVariableError(node.name)
        return parse_complex(self.variables[node.name])

    def visit_string(self, node: StringNode) -> complex:
        raise ExpressionSyntaxError(node.text, f"Unexpected literal '{node.text}'")

    def visit_infix(self, node: InfixNode) -> complex:
        """Evaluate an arithmetic operator.

        Raises:
            DivisionByZeroError: For z/0
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

        # e^z is exp(z)
        if (
            node.operator == "^"
            and isinstance(node.left, ConstantNode)
            and node.left.name == "e"
        ):
            return cmath.exp(node.right.accept(self))

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
            return complex_power(a, b)
        raise UnknownOperatorError(node.operator)

    def visit_ternary(self, node: TernaryNode) -> complex:
        raise ExpressionSyntaxError("if", "Conditionals need a logic evaluator")

    def visit_function(self, node: FunctionNode) -> complex:
        if not FunctionRegistry.is_registered(node.name, self.domain):
            raise UnknownFunctionError(node.name)
        definition = FunctionRegistry.get(node.name, self.domain)
        arguments = [argument.accept(self) for argument in node.arguments]
        return definition.implementation(*arguments)
