"""Symbolic differentiation of an AST.

The Differentiator walks a tree through the visitor protocol and returns
a new tree for the derivative with respect to one variable. Every result
node is built through an OperationBuilder, so constant subexpressions of
the derivative fold the same way they do while parsing.

Usage:
    tree = parse("exp(2x) + x*y")
    Differentiator("x").differentiate(tree)  # 2*exp(2*x)+y
"""

from __future__ import annotations

from mathexpr.errors import (
    ExpressionSyntaxError,
    NullOperandError,
    UnknownFunctionError,
    UnknownOperatorError,
)
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
    is_numeric,
)
from mathexpr.operations import OperationBuilder
from mathexpr.visitor import Visitor

_ZERO = IntegerNode(0)
_ONE = IntegerNode(1)
_TWO = IntegerNode(2)

# d/dx of a degree-based trig function carries this factor
_DEGREE = InfixNode("/", ConstantNode("pi"), IntegerNode(180))


def _call(name: str, argument: Node) -> FunctionNode:
    return FunctionNode(name, (argument,))


def _is_zero(node: Node) -> bool:
    return is_numeric(node) and node.value == 0


class Differentiator(Visitor):
    """Differentiate with respect to ``variable``.

    Sum, product, quotient and power rules cover the arithmetic
    operators; the chain rule covers every elementary function of the
    real table. Rounding, factorials and the pricing functions have no
    derivative here and raise UnknownFunctionError.
    """

    def __init__(self, variable: str, builder: OperationBuilder | None = None):
        self.variable = variable
        self.builder = builder or OperationBuilder()

    def differentiate(self, node: Node) -> Node:
        """Return the derivative of ``node``."""
        return node.accept(self)

    # -------------------------------------------------------------------------
    # Operands
    # -------------------------------------------------------------------------

    def visit_integer(self, node: IntegerNode) -> Node:
        return _ZERO

    def visit_rational(self, node: RationalNode) -> Node:
        return _ZERO

    def visit_float(self, node: FloatNode) -> Node:
        return _ZERO

    def visit_boolean(self, node: BooleanNode) -> Node:
        raise ExpressionSyntaxError(
            str(node.value).lower(), "Boolean values cannot be differentiated"
        )

    def visit_constant(self, node: ConstantNode) -> Node:
        if node.name == "NAN":
            return node
        return _ZERO

    def visit_variable(self, node: VariableNode) -> Node:
        return _ONE if node.name == self.variable else _ZERO

    def visit_string(self, node: StringNode) -> Node:
        raise ExpressionSyntaxError(node.text, f"Unexpected literal '{node.text}'")

    def visit_ternary(self, node: TernaryNode) -> Node:
        raise ExpressionSyntaxError("if", "Conditionals cannot be differentiated")

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def visit_infix(self, node: InfixNode) -> Node:
        """Apply the rule for ``+``, ``-``, ``*``, ``/`` or ``^``.

        Raises:
            NullOperandError: If an operand is missing
            UnknownOperatorError: For relational or boolean operators
        """
        left, right, symbol = node.left, node.right, node.operator
        if left is None or (right is None and not node.is_unary):
            raise NullOperandError(symbol)

        build = self.builder
        if symbol == "-" and right is None:
            return build.unary_minus(left.accept(self))
        if symbol == "+":
            return build.addition(left.accept(self), right.accept(self))
        if symbol == "-":
            return build.subtraction(left.accept(self), right.accept(self))
        if symbol == "*":
            # (fg)' = fg' + f'g
            return build.addition(
                build.multiplication(left, right.accept(self)),
                build.multiplication(left.accept(self), right),
            )
        if symbol == "/":
            # (f/g)' = (f'g - fg') / g^2
            numerator = build.subtraction(
                build.multiplication(left.accept(self), right),
                build.multiplication(left, right.accept(self)),
            )
            return build.division(numerator, build.exponentiation(right, _TWO))
        if symbol == "^":
            return self._power(node, left, right)
        raise UnknownOperatorError(symbol)

    def _power(self, node: InfixNode, base: Node, exponent: Node) -> Node:
        build = self.builder
        base_derivative = base.accept(self)

        if is_numeric(exponent):
            # (f^n)' = n f^(n-1) f'
            if _is_zero(base_derivative):
                return _ZERO
            lowered = build.exponentiation(base, build.subtraction(exponent, _ONE))
            return build.multiplication(
                exponent, build.multiplication(lowered, base_derivative)
            )

        if isinstance(base, ConstantNode) and base.name == "e":
            return build.multiplication(exponent.accept(self), node)

        log_term = build.multiplication(exponent.accept(self), _call("ln", base))
        if _is_zero(base_derivative):
            return build.multiplication(node, log_term)

        # (f^g)' = f^g (g' ln(f) + g f'/f)
        ratio_term = build.division(build.multiplication(exponent, base_derivative), base)
        return build.multiplication(node, build.addition(log_term, ratio_term))

    # -------------------------------------------------------------------------
    # Functions
    # -------------------------------------------------------------------------

    def visit_function(self, node: FunctionNode) -> Node:
        """Chain rule: f(g)' = g' f'(g).

        Raises:
            UnknownFunctionError: If the function has no derivative rule
        """
        if node.arity != 1:
            raise UnknownFunctionError(node.name)

        build = self.builder
        arg = node.operand
        inner = arg.accept(self)
        name = node.name

        if name == "sin":
            outer = _call("cos", arg)
        elif name == "cos":
            outer = build.unary_minus(_call("sin", arg))
        elif name == "tan":
            outer = build.addition(_ONE, build.exponentiation(node, _TWO))
        elif name == "cot":
            outer = build.subtraction(IntegerNode(-1), build.exponentiation(node, _TWO))
        elif name == "sind":
            outer = build.multiplication(_DEGREE, _call("cosd", arg))
        elif name == "cosd":
            outer = build.unary_minus(build.multiplication(_DEGREE, _call("sind", arg)))
        elif name == "tand":
            outer = build.multiplication(
                _DEGREE, build.addition(_ONE, build.exponentiation(node, _TWO))
            )
        elif name == "cotd":
            outer = build.unary_minus(
                build.multiplication(
                    _DEGREE, build.addition(_ONE, build.exponentiation(node, _TWO))
                )
            )
        elif name == "arcsin":
            return build.division(inner, _call("sqrt", self._one_minus_square(arg)))
        elif name == "arccos":
            return build.division(
                build.unary_minus(inner), _call("sqrt", self._one_minus_square(arg))
            )
        elif name == "arctan":
            return build.division(inner, self._one_plus_square(arg))
        elif name == "arccot":
            return build.division(build.unary_minus(inner), self._one_plus_square(arg))
        elif name == "exp":
            outer = node
        elif name in ("ln", "log"):
            return build.division(inner, arg)
        elif name == "lg":
            return build.division(
                inner, build.multiplication(_call("ln", IntegerNode(10)), arg)
            )
        elif name == "sqrt":
            return build.division(inner, build.multiplication(_TWO, node))
        elif name == "sinh":
            outer = _call("cosh", arg)
        elif name == "cosh":
            outer = _call("sinh", arg)
        elif name in ("tanh", "coth"):
            outer = build.subtraction(_ONE, build.exponentiation(node, _TWO))
        elif name == "arsinh":
            square = build.exponentiation(arg, _TWO)
            return build.division(inner, _call("sqrt", build.addition(square, _ONE)))
        elif name == "arcosh":
            square = build.exponentiation(arg, _TWO)
            return build.division(inner, _call("sqrt", build.subtraction(square, _ONE)))
        elif name in ("artanh", "arcoth"):
            return build.division(inner, self._one_minus_square(arg))
        elif name == "abs":
            outer = _call("sgn", arg)
        else:
            raise UnknownFunctionError(name)

        return build.multiplication(inner, outer)

    def _one_minus_square(self, node: Node) -> Node:
        return self.builder.subtraction(_ONE, self.builder.exponentiation(node, _TWO))

    def _one_plus_square(self, node: Node) -> Node:
        return self.builder.addition(_ONE, self.builder.exponentiation(node, _TWO))

