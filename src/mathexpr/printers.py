"""Printers: render an AST as text.

- ASCIIPrinter: canonical infix text that parses back to an equal value
- LaTeXPrinter: LaTeX math markup
- TreePrinter: indented tree with operand types, for debugging

Printers are the only visitors that may see structural placeholder nodes.
"""

from __future__ import annotations

import math

from mathexpr.nodes import (
    BooleanNode,
    ConstantNode,
    FloatNode,
    FunctionNode,
    InfixNode,
    IntegerNode,
    Node,
    PlaceholderNode,
    PostfixNode,
    RationalNode,
    StringNode,
    TernaryNode,
    VariableNode,
    is_numeric,
)
from mathexpr.visitor import Visitor


def _format_float(value: float) -> str:
    """repr() with a guaranteed decimal point before any exponent."""
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    text = repr(value)
    mantissa, _, exponent = text.partition("e")
    if "." not in mantissa:
        mantissa += ".0"
    return f"{mantissa}e{exponent}" if exponent else mantissa


def _is_negative_number(node: Node | None) -> bool:
    return is_numeric(node) and node.value < 0


def _is_unary_minus(node: Node | None) -> bool:
    return isinstance(node, InfixNode) and node.operator == "-" and node.right is None


class _InfixPrinter(Visitor):
    """Shared parenthesization rules for the infix printers."""

    logic_aware = True
    renders_placeholders = True

    def parenthesize(self, node: Node | None, cutoff: InfixNode, conservative: bool = False) -> str:
        """Render ``node`` as an operand of ``cutoff``, adding parentheses where needed."""
        text = node.accept(self) if node is not None else ""
        wrapped = f"({text})"

        if isinstance(node, InfixNode):
            if _is_unary_minus(node):
                return wrapped
            if cutoff.operator == "-" and node.lower_precedence_than(cutoff):
                return wrapped
            if conservative:
                if cutoff.operator == "/" and node.lower_precedence_than(cutoff):
                    return wrapped
                if cutoff.operator == "^" and node.operator == "^":
                    return wrapped
            if node.strictly_lower_precedence_than(cutoff):
                return wrapped

        if isinstance(node, TernaryNode):
            return wrapped

        if _is_negative_number(node):
            return wrapped

        # A fraction prints as a division
        if isinstance(node, RationalNode) and node.denominator != 1:
            if InfixNode("/", None, None).lower_precedence_than(cutoff):
                return wrapped

        return text

    def visit_placeholder(self, node: PlaceholderNode) -> str:
        if isinstance(node, PostfixNode) and node.operand is not None:
            return f"{node.operand.accept(self)}{node.symbol}"
        return node.symbol

    def visit_logical_infix(self, node: InfixNode) -> str:
        return self.visit_infix(node)


class ASCIIPrinter(_InfixPrinter):
    """Render an AST as plain text.

    The output parses back, with the matching lexer, to a tree of equal
    value: negative numbers and unary minus are parenthesized, fractions
    print as p/q and floats keep a decimal point.

    Usage:
        ASCIIPrinter().print(parse("2x^2 + 1/2", simplify=False))  # "2*x^2+1/2"
    """

    def print(self, node: Node) -> str:
        return node.accept(self)

    def visit_integer(self, node: IntegerNode) -> str:
        return str(node.value)

    def visit_rational(self, node: RationalNode) -> str:
        if node.denominator == 1:
            return str(node.numerator)
        return f"{node.numerator}/{node.denominator}"

    def visit_float(self, node: FloatNode) -> str:
        return _format_float(node.value)

    def visit_boolean(self, node: BooleanNode) -> str:
        return "TRUE" if node.value else "FALSE"

    def visit_constant(self, node: ConstantNode) -> str:
        return node.name

    def visit_variable(self, node: VariableNode) -> str:
        return node.name

    def visit_string(self, node: StringNode) -> str:
        return node.text

    def visit_infix(self, node: InfixNode) -> str:
        symbol = node.operator

        if symbol == "-" and node.right is None:
            return f"-{self.parenthesize(node.left, node)}"
        if symbol == "!":
            operand = node.left.accept(self) if node.left is not None else ""
            return f"NOT ({operand})"

        if symbol in ("*", "/"):
            left = self.parenthesize(node.left, node)
            right = self.parenthesize(node.right, node, conservative=True)
        elif symbol == "^":
            left = self.parenthesize(node.left, node, conservative=True)
            right = self.parenthesize(node.right, node)
        else:
            left = node.left.accept(self) if node.left is not None else ""
            right = self.parenthesize(node.right, node)

        if symbol == "&&":
            return f"{left} AND {right}"
        if symbol == "||":
            return f"{left} OR {right}"
        return f"{left}{symbol}{right}"

    def visit_ternary(self, node: TernaryNode) -> str:
        return (
            f"if ({node.condition.accept(self)}) "
            f"{{{node.then_branch.accept(self)}}} "
            f"else {{{node.else_branch.accept(self)}}}"
        )

    def visit_function(self, node: FunctionNode) -> str:
        if node.name in ("!", "!!"):
            return self._factorial(node)
        arguments = ", ".join(argument.accept(self) for argument in node.arguments)
        return f"{node.name}({arguments})"

    def _factorial(self, node: FunctionNode) -> str:
        operand = node.operand
        text = operand.accept(self)
        if is_numeric(operand):
            if operand.value < 0 or isinstance(operand, RationalNode):
                text = f"({text})"
        elif not isinstance(operand, (VariableNode, ConstantNode)):
            text = f"({text})"
        return f"{text}{node.name}"


_LATEX_CONSTANTS = {
    "pi": r"\pi",
    "e": "e",
    "i": "i",
    "NAN": r"\mathrm{NaN}",
    "INF": r"\infty",
}

_LATEX_RELATIONS = {
    "=": "=",
    "<>": r"\neq ",
    ">": ">",
    "<": "<",
    ">=": r"\geq ",
    "<=": r"\leq ",
    "&&": r"\land ",
    "||": r"\lor ",
}

# Functions with a LaTeX control sequence of the same name
_LATEX_FUNCTIONS = frozenset({
    "sin", "cos", "tan", "cot", "sinh", "cosh", "tanh", "coth",
    "arcsin", "arccos", "arctan", "exp", "log", "ln", "arg",
})


class LaTeXPrinter(_InfixPrinter):
    """Render an AST as LaTeX.

    Divisions and fractions use \\frac, products of a number and a letter
    are written implicitly, and other products use \\cdot.
    """

    def print(self, node: Node) -> str:
        return node.accept(self)

    def visit_integer(self, node: IntegerNode) -> str:
        return str(node.value)

    def visit_rational(self, node: RationalNode) -> str:
        if node.denominator == 1:
            return str(node.numerator)
        sign = "-" if node.numerator < 0 else ""
        return f"{sign}\\frac{{{abs(node.numerator)}}}{{{node.denominator}}}"

    def visit_float(self, node: FloatNode) -> str:
        if math.isnan(node.value):
            return r"\mathrm{NaN}"
        if math.isinf(node.value):
            return r"\infty" if node.value > 0 else r"-\infty"
        return repr(node.value)

    def visit_boolean(self, node: BooleanNode) -> str:
        return r"\mathrm{true}" if node.value else r"\mathrm{false}"

    def visit_constant(self, node: ConstantNode) -> str:
        return _LATEX_CONSTANTS.get(node.name, node.name)

    def visit_variable(self, node: VariableNode) -> str:
        return node.name.lstrip("$")

    def visit_string(self, node: StringNode) -> str:
        return node.text

    def visit_infix(self, node: InfixNode) -> str:
        symbol = node.operator

        if symbol == "-" and node.right is None:
            return f"-{self.parenthesize(node.left, node)}"
        if symbol == "!":
            return f"\\neg ({node.left.accept(self)})"

        if symbol == "*":
            left = self.parenthesize(node.left, node)
            right = self.parenthesize(node.right, node, conservative=True)
            if self._needs_cdot(node.left, node.right):
                return f"{left}\\cdot {right}"
            return f"{left}{right}"
        if symbol == "/":
            return f"\\frac{{{node.left.accept(self)}}}{{{node.right.accept(self)}}}"
        if symbol == "^":
            base = self.parenthesize(node.left, node, conservative=True)
            return f"{base}^{self._braces(node.right)}"

        left = node.left.accept(self)
        right = self.parenthesize(node.right, node)
        return f"{left}{_LATEX_RELATIONS.get(symbol, symbol)}{right}"

    @staticmethod
    def _needs_cdot(left: Node | None, right: Node | None) -> bool:
        if isinstance(left, FunctionNode):
            return True
        if is_numeric(right) or _is_unary_minus(right):
            return True
        if isinstance(right, InfixNode) and is_numeric(right.left):
            return True
        return False

    def _braces(self, node: Node) -> str:
        text = node.accept(self)
        if isinstance(node, (VariableNode, ConstantNode)) and len(text) == 1:
            return text
        if isinstance(node, IntegerNode) and 0 <= node.value < 10:
            return text
        return f"{{{text}}}"

    def visit_ternary(self, node: TernaryNode) -> str:
        return (
            "\\begin{cases} "
            f"{node.then_branch.accept(self)} & \\text{{if }} {node.condition.accept(self)} \\\\ "
            f"{node.else_branch.accept(self)} & \\text{{otherwise}} "
            "\\end{cases}"
        )

    def visit_function(self, node: FunctionNode) -> str:
        name = node.name
        if name in ("!", "!!"):
            operand = node.operand
            text = operand.accept(self)
            if not isinstance(operand, (VariableNode, ConstantNode, IntegerNode)) or _is_negative_number(operand):
                text = f"({text})"
            return f"{text}{name}"

        arguments = ", ".join(argument.accept(self) for argument in node.arguments)
        if name == "sqrt":
            return f"\\sqrt{{{arguments}}}"
        if name == "abs":
            return f"\\lvert {arguments}\\rvert "
        if name == "lg":
            return f"\\log_{{10}}({arguments})"
        if name in _LATEX_FUNCTIONS:
            return f"\\{name}({arguments})"
        return f"\\operatorname{{{name}}}({arguments})"


class TreePrinter(Visitor):
    """Render an AST as an indented tree, one node per line.

    Operands carry their type: ``2:int``, ``1/2:rational``, ``2.5:float``,
    ``true:bool``.

    Usage:
        print(TreePrinter().print(parse("2x + 1", simplify=False)))
        # +
        #   *
        #     2:int
        #     x
        #   1:int
    """

    logic_aware = True
    renders_placeholders = True
    indent = "  "

    def print(self, node: Node) -> str:
        return node.accept(self)

    def _branch(self, label: str, children: list[Node | None]) -> str:
        lines = [label]
        for child in children:
            if child is None:
                continue
            for line in child.accept(self).splitlines():
                lines.append(f"{self.indent}{line}")
        return "\n".join(lines)

    def visit_integer(self, node: IntegerNode) -> str:
        return f"{node.value}:int"

    def visit_rational(self, node: RationalNode) -> str:
        return f"{node.numerator}/{node.denominator}:rational"

    def visit_float(self, node: FloatNode) -> str:
        return f"{node.value!r}:float"

    def visit_boolean(self, node: BooleanNode) -> str:
        return f"{str(node.value).lower()}:bool"

    def visit_constant(self, node: ConstantNode) -> str:
        return node.name

    def visit_variable(self, node: VariableNode) -> str:
        return node.name

    def visit_string(self, node: StringNode) -> str:
        return f"{node.text}:string"

    def visit_infix(self, node: InfixNode) -> str:
        return self._branch(node.operator, [node.left, node.right])

    def visit_ternary(self, node: TernaryNode) -> str:
        return self._branch("if", [node.condition, node.then_branch, node.else_branch])

    def visit_function(self, node: FunctionNode) -> str:
        return self._branch(f"{node.name}()", list(node.arguments))

    def visit_placeholder(self, node: PlaceholderNode) -> str:
        if isinstance(node, PostfixNode):
            return self._branch(node.symbol, [node.operand])
        return node.symbol
