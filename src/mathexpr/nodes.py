"""AST node model.

Nodes are frozen dataclasses built bottom-up by the parser and never
mutated afterwards. Each node exposes ``accept(visitor)``, which calls
exactly one visitor method for its concrete variant.

Operand variants: IntegerNode, FloatNode, RationalNode, BooleanNode,
ConstantNode, VariableNode, StringNode.

Operator variants: InfixNode, TernaryNode, FunctionNode, plus the
structural placeholders PostfixNode, CloseParenthesisNode and
CloseBraceNode, which only printers may visit.

Operator precedence (lowest to highest):
1. && || ! (left)
2. = <> > < >= <= (left)
3. + - (left)
4. * / (left)
5. ^ (right)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from math import gcd
from typing import TYPE_CHECKING, Any

from mathexpr.errors import (
    DivisionByZeroError,
    ExpressionSyntaxError,
    UnknownOperatorError,
)

if TYPE_CHECKING:
    from mathexpr.visitor import Visitor


class Associativity(Enum):
    LEFT = "left"
    RIGHT = "right"


OPERATORS: dict[str, tuple[int, Associativity]] = {
    "&&": (1, Associativity.LEFT),
    "||": (1, Associativity.LEFT),
    "!": (1, Associativity.LEFT),
    "=": (2, Associativity.LEFT),
    "<>": (2, Associativity.LEFT),
    ">": (2, Associativity.LEFT),
    "<": (2, Associativity.LEFT),
    ">=": (2, Associativity.LEFT),
    "<=": (2, Associativity.LEFT),
    "+": (3, Associativity.LEFT),
    "-": (3, Associativity.LEFT),
    "*": (4, Associativity.LEFT),
    "/": (4, Associativity.LEFT),
    "^": (5, Associativity.RIGHT),
}

RELATIONAL_OPERATORS = frozenset({"=", "<>", ">", "<", ">=", "<="})
BOOLEAN_OPERATORS = frozenset({"&&", "||", "!"})
LOGICAL_OPERATORS = RELATIONAL_OPERATORS | BOOLEAN_OPERATORS

CONSTANTS = frozenset({"pi", "e", "i", "NAN", "INF"})

# Functions taking more than one argument; every other function takes one
FUNCTION_ARITY: dict[str, int] = {
    "ending": 2,
}

POSTFIX_FUNCTIONS = frozenset({"!", "!!"})


@dataclass(frozen=True)
class Node:
    """Base class for AST nodes."""

    def accept(self, visitor: Visitor) -> Any:
        raise NotImplementedError


# -----------------------------------------------------------------------------
# Operands
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class OperandNode(Node):
    """A leaf: number, boolean, constant, variable or literal text."""
    pass


@dataclass(frozen=True)
class IntegerNode(OperandNode):
    value: int

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_integer(self)

    @property
    def numerator(self) -> int:
        return self.value

    @property
    def denominator(self) -> int:
        return 1


@dataclass(frozen=True)
class FloatNode(OperandNode):
    value: float

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_float(self)


@dataclass(frozen=True)
class RationalNode(OperandNode):
    """Exact fraction, always stored reduced with a positive denominator.

    Raises:
        DivisionByZeroError: If the denominator is zero
    """

    numerator: int
    denominator: int
    value: float = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if self.denominator == 0:
            raise DivisionByZeroError(f"{self.numerator}/0")

        divisor = gcd(self.numerator, self.denominator)
        numerator = self.numerator // divisor
        denominator = self.denominator // divisor
        if denominator < 0:
            numerator, denominator = -numerator, -denominator

        object.__setattr__(self, "numerator", numerator)
        object.__setattr__(self, "denominator", denominator)
        object.__setattr__(self, "value", numerator / denominator)

    @classmethod
    def from_fraction(cls, value: Fraction) -> RationalNode:
        return cls(value.numerator, value.denominator)

    def to_fraction(self) -> Fraction:
        return Fraction(self.numerator, self.denominator)

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_rational(self)


@dataclass(frozen=True)
class BooleanNode(OperandNode):
    value: bool

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_boolean(self)


@dataclass(frozen=True)
class ConstantNode(OperandNode):
    """A named constant: pi, e, i, NAN or INF."""
    name: str

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_constant(self)


@dataclass(frozen=True)
class VariableNode(OperandNode):
    name: str

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_variable(self)


@dataclass(frozen=True)
class StringNode(OperandNode):
    """Literal text kept verbatim, such as the decimal tail '.99'."""
    text: str

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_string(self)


NUMERIC_NODES = (IntegerNode, RationalNode, FloatNode)


def is_numeric(node: Node | None) -> bool:
    """True for Integer, Rational and Float operands."""
    return isinstance(node, NUMERIC_NODES)


def numeric_rank(node: Node) -> int:
    """Position in the numeric tower Integer < Rational < Float."""
    return NUMERIC_NODES.index(type(node))


# -----------------------------------------------------------------------------
# Operators
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class InfixNode(Node):
    """Binary operator node.

    A missing right operand denotes a prefix operator: unary minus for '-'
    and logical negation for '!'.

    Raises:
        UnknownOperatorError: If the operator is not in the precedence table
    """

    operator: str
    left: Node | None
    right: Node | None = None

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise UnknownOperatorError(self.operator)

    @property
    def precedence(self) -> int:
        return OPERATORS[self.operator][0]

    @property
    def associativity(self) -> Associativity:
        return OPERATORS[self.operator][1]

    @property
    def is_logical(self) -> bool:
        return self.operator in LOGICAL_OPERATORS

    @property
    def is_unary(self) -> bool:
        return self.right is None and self.operator in ("-", "!")

    def lower_precedence_than(self, other: Node | None) -> bool:
        """Whether ``other`` binds at least as tightly, honouring associativity."""
        if not isinstance(other, InfixNode):
            return False
        if self.precedence != other.precedence:
            return self.precedence < other.precedence
        return self.associativity == Associativity.LEFT

    def strictly_lower_precedence_than(self, other: Node | None) -> bool:
        if not isinstance(other, InfixNode):
            return False
        return self.precedence < other.precedence

    def accept(self, visitor: Visitor) -> Any:
        if self.is_logical and visitor.logic_aware:
            return visitor.visit_logical_infix(self)
        return visitor.visit_infix(self)


@dataclass(frozen=True)
class TernaryNode(Node):
    """Conditional: ``if (condition) then_branch else else_branch``."""

    condition: Node
    then_branch: Node
    else_branch: Node
    operator: str = field(default="if", init=False)

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_ternary(self)


@dataclass(frozen=True)
class FunctionNode(Node):
    """Function application.

    Factorial and semi-factorial are functions named '!' and '!!'.

    Raises:
        ExpressionSyntaxError: If the argument count differs from the arity
    """

    name: str
    arguments: tuple[Node, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))
        if len(self.arguments) != self.arity:
            raise ExpressionSyntaxError(
                self.name,
                f"Function '{self.name}' expects {self.arity} argument(s), "
                f"got {len(self.arguments)}",
            )

    @property
    def arity(self) -> int:
        return FUNCTION_ARITY.get(self.name, 1)

    @property
    def operand(self) -> Node:
        """The first (for most functions, only) argument."""
        return self.arguments[0]

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_function(self)


# -----------------------------------------------------------------------------
# Structural placeholders
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class PlaceholderNode(Node):
    """Parse-time structural marker that numeric visitors must never see."""

    symbol: str

    def accept(self, visitor: Visitor) -> Any:
        if not visitor.renders_placeholders:
            raise ExpressionSyntaxError(self.symbol)
        return visitor.visit_placeholder(self)


@dataclass(frozen=True)
class PostfixNode(PlaceholderNode):
    """Postfix '!' or '!!' awaiting conversion into a FunctionNode."""

    operand: Node | None = None

    def fold(self) -> FunctionNode:
        if self.operand is None:
            raise ExpressionSyntaxError(self.symbol)
        return FunctionNode(self.symbol, (self.operand,))


@dataclass(frozen=True)
class CloseParenthesisNode(PlaceholderNode):
    symbol: str = ")"


@dataclass(frozen=True)
class CloseBraceNode(PlaceholderNode):
    symbol: str = "}"
