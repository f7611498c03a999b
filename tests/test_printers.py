"""Tests for the ASCII, LaTeX and tree printers."""

from fractions import Fraction

import pytest

from mathexpr.complex import ComplexEvaluator
from mathexpr.evaluator import StdMathEvaluator
from mathexpr.lexers import ComplexMathLexer, LogicLexer
from mathexpr.nodes import (
    BooleanNode,
    FloatNode,
    FunctionNode,
    InfixNode,
    IntegerNode,
    RationalNode,
    VariableNode,
)
from mathexpr.parser import parse
from mathexpr.printers import ASCIIPrinter, LaTeXPrinter, TreePrinter
from mathexpr.rational import RationalEvaluator


def ascii_text(text, lexer=None):
    return ASCIIPrinter().print(parse(text, lexer, simplify=False))


def latex(text):
    return LaTeXPrinter().print(parse(text, simplify=False))


x = VariableNode("x")


class TestASCIIPrinter:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1+2*3", "1+2*3"),
            ("(1+2)*3", "(1+2)*3"),
            ("x-(y-1)", "x-(y-1)"),
            ("x-y-1", "x-y-1"),
            ("x/(y*2)", "x/(y*2)"),
            ("(x^2)^3", "(x^2)^3"),
            ("x^y^2", "x^y^2"),
            ("2x", "2*x"),
            ("-x", "-x"),
            ("-(x+1)", "-(x+1)"),
            ("sin(x)+1", "sin(x)+1"),
            ("asin(x)", "arcsin(x)"),
            ("5!", "5!"),
            ("(x+1)!!", "(x+1)!!"),
        ],
    )
    def test_expressions(self, text, expected):
        assert ascii_text(text) == expected

    def test_operands(self):
        printer = ASCIIPrinter()

        assert printer.print(RationalNode(-1, 2)) == "-1/2"
        assert printer.print(RationalNode(4, 2)) == "2"
        assert printer.print(FloatNode(2.0)) == "2.0"
        assert printer.print(FloatNode(1e20)) == "1.0e+20"
        assert printer.print(BooleanNode(True)) == "TRUE"

    def test_negative_operands_are_parenthesized(self):
        node = InfixNode("*", x, IntegerNode(-2))
        assert ASCIIPrinter().print(node) == "x*(-2)"

    def test_fraction_operand_of_power(self):
        node = InfixNode("^", RationalNode(1, 2), IntegerNode(2))
        assert ASCIIPrinter().print(node) == "(1/2)^2"

    def test_logic(self):
        text = ascii_text("IF (x < 1 && y >= 2) THEN 0 ELSE x", LogicLexer())
        assert text == "if (x<1 AND y>=2) {0} else {x}"

    def test_two_arguments(self):
        node = FunctionNode("ending", (VariableNode("$price"), FloatNode(0.9)))
        assert ASCIIPrinter().print(node) == "ending($price, 0.9)"


class TestLaTeXPrinter:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("x/2", r"\frac{x}{2}"),
            ("2x", "2x"),
            ("x*2", r"x\cdot 2"),
            ("x^2", "x^2"),
            ("x^(y+1)", "x^{y+1}"),
            ("sqrt(x)", r"\sqrt{x}"),
            ("sin(x)", r"\sin(x)"),
            ("pi", r"\pi"),
            ("abs(x)", r"\lvert x\rvert "),
            ("lg(x)", r"\log_{10}(x)"),
            ("sgn(x)", r"\operatorname{sgn}(x)"),
            ("5!", "5!"),
        ],
    )
    def test_expressions(self, text, expected):
        assert latex(text) == expected

    def test_rational(self):
        assert LaTeXPrinter().print(RationalNode(-3, 4)) == r"-\frac{3}{4}"

    def test_relation(self):
        tree = parse("x <= 1", LogicLexer(), simplify=False)
        assert LaTeXPrinter().print(tree) == r"x\leq 1"


class TestTreePrinter:
    def test_tree(self):
        text = TreePrinter().print(parse("2x + 1", simplify=False))

        assert text.splitlines() == [
            "+",
            "  *",
            "    2:int",
            "    x",
            "  1:int",
        ]

    def test_operand_types(self):
        printer = TreePrinter()

        assert printer.print(RationalNode(1, 2)) == "1/2:rational"
        assert printer.print(FloatNode(2.5)) == "2.5:float"
        assert printer.print(BooleanNode(False)) == "false:bool"

    def test_function_and_ternary(self):
        tree = parse("IF x THEN sin(x) ELSE 0", LogicLexer(), simplify=False)

        assert TreePrinter().print(tree).splitlines() == [
            "if",
            "  x",
            "  sin()",
            "    x",
            "  0:int",
        ]


class TestRoundTrip:
    """Printing and re-parsing preserves the value."""

    @pytest.mark.parametrize(
        "tree",
        [
            InfixNode("+", IntegerNode(1), RationalNode(1, 3)),
            InfixNode("*", RationalNode(-2, 3), IntegerNode(-4)),
            InfixNode("-", IntegerNode(2), InfixNode("-", IntegerNode(5), RationalNode(1, 2))),
            InfixNode("/", IntegerNode(1), InfixNode("/", IntegerNode(2), IntegerNode(3))),
            InfixNode("^", RationalNode(2, 3), InfixNode("^", IntegerNode(2), IntegerNode(2))),
            InfixNode("^", InfixNode("^", IntegerNode(2), IntegerNode(2)), IntegerNode(3)),
            InfixNode("-", InfixNode("*", IntegerNode(3), IntegerNode(2)), None),
        ],
    )
    def test_rational_trees(self, tree):
        text = ASCIIPrinter().print(tree)
        evaluator = RationalEvaluator()

        assert evaluator.evaluate(parse(text)) == evaluator.evaluate(tree)
        assert isinstance(evaluator.evaluate(tree), Fraction)

    @pytest.mark.parametrize(
        "tree",
        [
            InfixNode("+", FloatNode(0.1), FloatNode(-2.5)),
            InfixNode("*", FloatNode(1e-7), RationalNode(3, 7)),
            InfixNode("/", FloatNode(1.5), InfixNode("+", IntegerNode(2), FloatNode(0.25))),
            InfixNode("^", FloatNode(1.5), IntegerNode(-2)),
        ],
    )
    def test_float_trees(self, tree):
        text = ASCIIPrinter().print(tree)

        for lexer, evaluator in [
            (None, StdMathEvaluator()),
            (ComplexMathLexer(), ComplexEvaluator()),
        ]:
            assert evaluator.evaluate(parse(text, lexer)) == pytest.approx(
                evaluator.evaluate(tree)
            )
