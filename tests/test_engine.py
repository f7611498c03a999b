"""Tests for the convenience wrappers."""

from fractions import Fraction

import pytest

from mathexpr.engine import (
    ComplexMathEval,
    LogicEval,
    PricingEval,
    RationalMathEval,
    StdMathEval,
    evaluate,
)
from mathexpr.errors import DelimiterMismatchError, DivisionByZeroError, UnknownTokenError
from mathexpr.lexer import TokenType
from mathexpr.nodes import InfixNode, IntegerNode, VariableNode


class TestMathEval:
    def test_std(self):
        assert StdMathEval().evaluate("2x + 1", {"x": 3}) == 7.0

    def test_keeps_tokens_and_tree(self):
        engine = StdMathEval(simplify=False)
        engine.evaluate("2x", {"x": 1})

        assert [t.type for t in engine.tokens] == [TokenType.NATURAL_NUMBER, TokenType.VARIABLE]
        assert engine.tree == InfixNode("*", IntegerNode(2), VariableNode("x"))

    def test_rational(self):
        assert RationalMathEval().evaluate("x/3 + 1/6", {"x": 1}) == Fraction(1, 2)

    def test_complex(self):
        assert ComplexMathEval().evaluate("(1+i)^2") == pytest.approx(2j)

    def test_logic(self):
        assert LogicEval().evaluate("IF (2<1) THEN 1 ELSE 0") == 0

    def test_pricing(self):
        engine = PricingEval()
        assert engine.evaluate("ending($price, .90)", {"$price": 500}) == pytest.approx(500.9)

    def test_engine_reuse(self):
        engine = StdMathEval()

        assert engine.evaluate("x^2", {"x": 3}) == 9.0
        assert engine.evaluate("x^2", {"x": 4}) == 16.0


class TestEvaluate:
    @pytest.mark.parametrize(
        "text,domain,expected",
        [
            ("2^3^2", "real", 512),
            ("8/4/2", "real", 1),
            ("8/4/2", "rational", Fraction(1)),
            ("i*i", "complex", -1),
            ("if (3 < 2) { return 1+1; } else { return 2^3; }", "logic", 8),
        ],
    )
    def test_domains(self, text, domain, expected):
        assert evaluate(text, domain=domain) == pytest.approx(expected)

    def test_unknown_domain(self):
        with pytest.raises(ValueError, match="Unknown domain"):
            evaluate("1", domain="quaternion")

    @pytest.mark.parametrize("domain", ["real", "rational", "complex"])
    def test_division_by_zero_everywhere(self, domain):
        with pytest.raises(DivisionByZeroError):
            evaluate("1/0", domain=domain)

        with pytest.raises(DivisionByZeroError):
            evaluate("0/0", domain=domain, simplify=False)

    def test_errors_propagate(self):
        with pytest.raises(DelimiterMismatchError):
            evaluate("(x+y", {"x": 1, "y": 2})

        with pytest.raises(UnknownTokenError):
            evaluate("1 # 2")
