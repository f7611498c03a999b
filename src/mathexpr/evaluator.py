"""Evaluators over real numbers and the logic/pricing DSL.

Each evaluator binds variable values at construction and walks the AST
through the visitor protocol, computing one value per node.

- StdMathEvaluator: floating-point arithmetic and the real function table
- LogicEvaluator: adds booleans, relational/boolean operators and
  runtime conditionals
- PricingEvaluator: the logic evaluator with the pricing function table
  (round, ceil, floor, ending) and literal decimal tails
"""

from __future__ import annotations

import math
import operator
from typing import Any, Callable, Mapping

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
from mathexpr.visitor import Visitor

# Integer powers stay exact while the result fits in this many bits
_MAX_EXACT_POWER_BITS = 4096

_REAL_CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
    "NAN": math.nan,
    "INF": math.inf,
}

_RELATIONS: dict[str, Callable[[Any, Any], bool]] = {
    "=": operator.eq,
    "<>": operator.ne,
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}


def _operands(node: InfixNode) -> tuple[Node, Node | None]:
    """Return (left, right); right is None only for prefix operators.

    Raises:
        NullOperandError: If a required operand is missing
    """
    if node.left is None:
        raise NullOperandError(node.operator)
    if node.right is None and not node.is_unary:
        raise NullOperandError(node.operator)
    return node.left, node.right


class StdMathEvaluator(Visitor):
    """Evaluate an AST to a real number.

    Integers stay ``int`` while exact; everything else is ``float``.

    Usage:
        evaluator = StdMathEvaluator({"x": 2})
        evaluator.evaluate(parse("x^2 + 1"))  # 5.0
    """

    domain = Domain.REAL

    def __init__(self, variables: Mapping[str, Any] | None = None):
        self.variables: dict[str, Any] = dict(variables or {})

    def evaluate(self, node: Node) -> Any:
        """Evaluate an AST node and return the result."""
        return node.accept(self)

    def _lookup(self, name: str) -> Any:
        if name not in self.variables:
            raise UnknownVariableError(name)
        return self.variables[name]

    # -------------------------------------------------------------------------
    # Operands
    # -------------------------------------------------------------------------

    def visit_integer(self, node: IntegerNode) -> int:
        return node.value

    def visit_rational(self, node: RationalNode) -> float:
        return node.value

    def visit_float(self, node: FloatNode) -> float:
        return node.value

    def visit_boolean(self, node: BooleanNode) -> Any:
        raise ExpressionSyntaxError(
            str(node.value).lower(), "Boolean values are not allowed in arithmetic"
        )

    def visit_constant(self, node: ConstantNode) -> float:
        if node.name not in _REAL_CONSTANTS:
            raise UnknownConstantError(node.name)
        return _REAL_CONSTANTS[node.name]

    def visit_variable(self, node: VariableNode) -> Any:
        return float(self._lookup(node.name))

    def visit_string(self, node: StringNode) -> Any:
        raise ExpressionSyntaxError(node.text, f"Unexpected literal '{node.text}'")

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def visit_infix(self, node: InfixNode) -> Any:
        """Evaluate an arithmetic operator.

        Raises:
            DivisionByZeroError: For x/0
            ExponentialError: For 0^0
            NullOperandError: If an operand is missing
            UnknownOperatorError: For relational or boolean operators
        """
        left, right = _operands(node)
        symbol = node.operator

        if symbol == "-" and right is None:
            return -left.accept(self)
        if node.is_logical:
            raise UnknownOperatorError(symbol)

        # e^x is exp(x)
        if symbol == "^" and isinstance(left, ConstantNode) and left.name == "e":
            return self._exp(right.accept(self))

        a = left.accept(self)
        b = right.accept(self)

        if symbol == "+":
            return a + b
        if symbol == "-":
            return a - b
        if symbol == "*":
            return a * b
        if symbol == "/":
            if b == 0:
                raise DivisionByZeroError("/")
            return a / b
        if symbol == "^":
            return self._power(a, b)
        raise UnknownOperatorError(symbol)

    @staticmethod
    def _exp(x: float) -> float:
        try:
            return math.exp(x)
        except OverflowError:
            return math.inf

    @staticmethod
    def _power(base: Any, exponent: Any) -> Any:
        if base == 0 and exponent == 0:
            raise ExponentialError("0^0")
        if base == 0 and exponent < 0:
            raise DivisionByZeroError("^")
        if (
            isinstance(base, int)
            and isinstance(exponent, int)
            and exponent >= 0
            and max(abs(base), 1).bit_length() * exponent <= _MAX_EXACT_POWER_BITS
        ):
            return base ** exponent
        try:
            result = float(base) ** float(exponent)
        except OverflowError:
            return math.inf
        if isinstance(result, complex):
            return math.nan
        return result

    def visit_ternary(self, node: TernaryNode) -> Any:
        raise ExpressionSyntaxError("if", "Conditionals need a logic evaluator")

    def visit_function(self, node: FunctionNode) -> Any:
        """Apply a function from this evaluator's domain table.

        Raises:
            UnknownFunctionError: If the name has no entry for the domain
        """
        if not FunctionRegistry.is_registered(node.name, self.domain):
            raise UnknownFunctionError(node.name)
        definition = FunctionRegistry.get(node.name, self.domain)
        arguments = [argument.accept(self) for argument in node.arguments]
        return definition.implementation(*arguments)


class LogicEvaluator(StdMathEvaluator):
    """Evaluate numeric, boolean and conditional expressions.

    Relational operators yield booleans, ``&&``/``||`` short-circuit, and
    conditionals evaluate only the branch that is taken.

    Usage:
        evaluator = LogicEvaluator({"price": 150.0})
        evaluator.evaluate(parse("IF price > 100 THEN 1 ELSE 0", lexer=LogicLexer()))
    """

    logic_aware = True

    def visit_boolean(self, node: BooleanNode) -> bool:
        return node.value

    def visit_variable(self, node: VariableNode) -> Any:
        value = self._lookup(node.name)
        if isinstance(value, bool):
            return value
        return float(value)

    def visit_logical_infix(self, node: InfixNode) -> bool:
        """Evaluate a relational or boolean operator.

        Raises:
            NullOperandError: If an operand is missing
            UnknownOperatorError: If the operator is not logical
        """
        left, right = _operands(node)
        symbol = node.operator

        if symbol == "!":
            return not left.accept(self)
        if symbol == "&&":
            return bool(left.accept(self)) and bool(right.accept(self))
        if symbol == "||":
            return bool(left.accept(self)) or bool(right.accept(self))
        if symbol in _RELATIONS:
            return _RELATIONS[symbol](left.accept(self), right.accept(self))
        raise UnknownOperatorError(symbol)

    def visit_ternary(self, node: TernaryNode) -> Any:
        if node.condition.accept(self):
            return node.then_branch.accept(self)
        return node.else_branch.accept(self)


class PricingEvaluator(LogicEvaluator):
    """Evaluate pricing rules.

    Usage:
        evaluator = PricingEvaluator({"$price": 512.34})
        evaluator.evaluate(parse("ending($price, 9.90)", lexer=PricingLexer()))  # 519.9
    """

    domain = Domain.PRICING

    def visit_string(self, node: StringNode) -> str:
        return node.text
