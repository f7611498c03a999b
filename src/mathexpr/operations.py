"""Operation builder: constant folding applied while parsing.

Each method takes already-built operand nodes and returns either a single
reduced node or an unreduced operator node. Inputs are never modified.

Numeric operands combine in the least general type covering both, along
the tower Integer < Rational < Float. Division of two integers gives a
Rational, so "8/4/2" folds exactly to 1.

Usage:
    builder = OperationBuilder()
    builder.addition(IntegerNode(1), RationalNode(1, 2))  # RationalNode(3, 2)
    builder.multiplication(VariableNode("x"), IntegerNode(1))  # VariableNode("x")
"""

from __future__ import annotations

import math
import operator
from fractions import Fraction
from typing import Any, Callable

from mathexpr.errors import (
    DivisionByZeroError,
    ExponentialError,
    UnknownOperatorError,
)
from mathexpr.nodes import (
    BooleanNode,
    FloatNode,
    InfixNode,
    IntegerNode,
    Node,
    RationalNode,
    RELATIONAL_OPERATORS,
    StringNode,
    TernaryNode,
    is_numeric,
    numeric_rank,
)

# Integer powers are folded only while the result stays below this many bits
MAX_POWER_BITS = 1024

_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "=": operator.eq,
    "<>": operator.ne,
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}

_ARITHMETIC: dict[str, Callable[[Any, Any], Any]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
}

# Operand variants whose values may be compared at parse time
_LITERAL_NODES = (IntegerNode, RationalNode, FloatNode, BooleanNode, StringNode)


def _python_value(node: Node) -> int | Fraction | float:
    """Integer -> int, Rational -> Fraction, Float -> float."""
    if isinstance(node, RationalNode):
        return node.to_fraction()
    return node.value


def _numeric_node(value: int | Fraction | float, rank: int) -> Node:
    """Wrap a Python number as the node type at position ``rank``."""
    if rank == 0:
        return IntegerNode(int(value))
    if rank == 1:
        return RationalNode.from_fraction(Fraction(value))
    return FloatNode(float(value))


def _is_zero(node: Node) -> bool:
    return is_numeric(node) and _python_value(node) == 0


def _is_one(node: Node) -> bool:
    return is_numeric(node) and _python_value(node) == 1


def _literal_value(node: Node) -> Any:
    if isinstance(node, StringNode):
        return node.text
    if isinstance(node, RationalNode):
        return node.to_fraction()
    return node.value


def _same_literal_type(left: Node | None, right: Node | None) -> bool:
    return (
        isinstance(left, _LITERAL_NODES)
        and type(left) is type(right)
    )


class OperationBuilder:
    """Builds operator nodes, folding constant subexpressions.

    Only domain errors intrinsic to an operator are raised: division by
    zero and 0^0. Everything else that cannot be folded comes back as an
    unreduced InfixNode or TernaryNode.
    """

    def build(self, symbol: str, left: Node, right: Node | None = None) -> Node:
        """Dispatch on an operator symbol.

        Raises:
            UnknownOperatorError: If the symbol is not a known operator
        """
        if symbol == "+":
            return self.addition(left, right)
        if symbol == "-":
            if right is None:
                return self.unary_minus(left)
            return self.subtraction(left, right)
        if symbol == "*":
            return self.multiplication(left, right)
        if symbol == "/":
            return self.division(left, right)
        if symbol == "^":
            return self.exponentiation(left, right)
        if symbol in RELATIONAL_OPERATORS:
            return self.relation(symbol, left, right)
        if symbol == "&&":
            return self.conjunction(left, right)
        if symbol == "||":
            return self.disjunction(left, right)
        if symbol == "!":
            return self.negation(left)
        raise UnknownOperatorError(symbol)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _fold_numeric(self, symbol: str, left: Node, right: Node) -> Node:
        rank = max(numeric_rank(left), numeric_rank(right))
        result = _ARITHMETIC[symbol](_python_value(left), _python_value(right))
        return _numeric_node(result, rank)

    def addition(self, left: Node, right: Node) -> Node:
        if is_numeric(left) and is_numeric(right):
            return self._fold_numeric("+", left, right)
        if _is_zero(left):
            return right
        if _is_zero(right):
            return left
        return InfixNode("+", left, right)

    def subtraction(self, left: Node, right: Node) -> Node:
        if is_numeric(left) and is_numeric(right):
            return self._fold_numeric("-", left, right)
        if _is_zero(right):
            return left
        if _is_zero(left):
            return self.unary_minus(right)
        if left == right:
            return IntegerNode(0)
        return InfixNode("-", left, right)

    def unary_minus(self, operand: Node) -> Node:
        """Negate: -(-x) is x and numbers negate in place."""
        if isinstance(operand, InfixNode) and operand.operator == "-" and operand.right is None:
            return operand.left
        if isinstance(operand, IntegerNode):
            return IntegerNode(-operand.value)
        if isinstance(operand, RationalNode):
            return RationalNode(-operand.numerator, operand.denominator)
        if isinstance(operand, FloatNode):
            return FloatNode(-operand.value)
        return InfixNode("-", operand, None)

    def multiplication(self, left: Node, right: Node) -> Node:
        if is_numeric(left) and is_numeric(right):
            return self._fold_numeric("*", left, right)
        if _is_zero(left) or _is_zero(right):
            return IntegerNode(0)
        if _is_one(left):
            return right
        if _is_one(right):
            return left
        return InfixNode("*", left, right)

    def division(self, left: Node, right: Node) -> Node:
        """Fold a quotient; the zero-divisor check comes first, so 0/0 raises.

        Raises:
            DivisionByZeroError: If the divisor is a numeric zero
        """
        if _is_zero(right):
            raise DivisionByZeroError("/")

        if is_numeric(left) and is_numeric(right):
            rank = max(numeric_rank(left), numeric_rank(right), 1)
            if rank == 1:
                quotient = Fraction(_python_value(left)) / Fraction(_python_value(right))
                return RationalNode.from_fraction(quotient)
            return FloatNode(float(_python_value(left)) / float(_python_value(right)))

        if _is_zero(left):
            return IntegerNode(0)
        if _is_one(right):
            return left
        if left == right:
            return IntegerNode(1)
        return InfixNode("/", left, right)

    def exponentiation(self, left: Node, right: Node) -> Node:
        """Fold powers where the result is exact or a finite real.

        Raises:
            ExponentialError: For 0^0
            DivisionByZeroError: For a zero base with a negative integer exponent
        """
        if is_numeric(right):
            if _is_zero(right):
                if _is_zero(left):
                    raise ExponentialError("0^0")
                return IntegerNode(1)
            if _is_one(right):
                return left
            if is_numeric(left):
                folded = self._numeric_power(left, right)
                if folded is not None:
                    return folded
                return InfixNode("^", left, right)

        # (x^a)^b -> x^(a*b), exact only for integer exponents
        if (
            isinstance(left, InfixNode)
            and left.operator == "^"
            and isinstance(left.right, IntegerNode)
            and isinstance(right, IntegerNode)
        ):
            return self.exponentiation(left.left, self.multiplication(left.right, right))

        return InfixNode("^", left, right)

    def _numeric_power(self, left: Node, right: Node) -> Node | None:
        base = _python_value(left)
        exponent = _python_value(right)

        if isinstance(right, IntegerNode) and not isinstance(left, FloatNode):
            if exponent < 0:
                if base == 0:
                    raise DivisionByZeroError("^")
                # Reciprocals are left for the evaluator
                return None
            magnitude = max(abs(Fraction(base).numerator), abs(Fraction(base).denominator))
            if magnitude.bit_length() * abs(exponent) <= MAX_POWER_BITS:
                result = Fraction(base) ** exponent
                if isinstance(left, IntegerNode) and result.denominator == 1:
                    return IntegerNode(int(result))
                return RationalNode.from_fraction(result)
            return None

        # Exact base with a fractional exponent: left for the evaluator
        if not isinstance(left, FloatNode) and not isinstance(right, FloatNode):
            return None

        try:
            result = float(base) ** float(exponent)
        except (OverflowError, ZeroDivisionError):
            return None
        if isinstance(result, complex) or not math.isfinite(result):
            return None
        return FloatNode(result)

    # -------------------------------------------------------------------------
    # Relational and logical
    # -------------------------------------------------------------------------

    def relation(self, symbol: str, left: Node, right: Node) -> Node:
        """Compare two literals of the same type, else build the node.

        Raises:
            UnknownOperatorError: If the symbol is not relational
        """
        if symbol not in _COMPARISONS:
            raise UnknownOperatorError(symbol)
        if _same_literal_type(left, right):
            return BooleanNode(
                _COMPARISONS[symbol](_literal_value(left), _literal_value(right))
            )
        return InfixNode(symbol, left, right)

    def conjunction(self, left: Node, right: Node) -> Node:
        if isinstance(left, BooleanNode) and isinstance(right, BooleanNode):
            return BooleanNode(left.value and right.value)
        return InfixNode("&&", left, right)

    def disjunction(self, left: Node, right: Node) -> Node:
        if isinstance(left, BooleanNode) and isinstance(right, BooleanNode):
            return BooleanNode(left.value or right.value)
        return InfixNode("||", left, right)

    def negation(self, operand: Node) -> Node:
        if isinstance(operand, BooleanNode):
            return BooleanNode(not operand.value)
        return InfixNode("!", operand, None)

    # -------------------------------------------------------------------------
    # Conditional
    # -------------------------------------------------------------------------

    def condition(self, condition: Node, then_branch: Node, else_branch: Node) -> Node:
        """Pick a branch when the condition is known at parse time.

        The discarded branch is dropped without being inspected.
        """
        decided = self._static_truth(condition)
        if decided is None:
            return TernaryNode(condition, then_branch, else_branch)
        return then_branch if decided else else_branch

    def _static_truth(self, condition: Node) -> bool | None:
        if isinstance(condition, BooleanNode):
            return condition.value
        if is_numeric(condition):
            return _python_value(condition) != 0
        if (
            isinstance(condition, InfixNode)
            and condition.operator in RELATIONAL_OPERATORS
            and _same_literal_type(condition.left, condition.right)
        ):
            return _COMPARISONS[condition.operator](
                _literal_value(condition.left), _literal_value(condition.right)
            )
        return None
