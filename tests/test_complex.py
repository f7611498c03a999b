"""Tests for complex evaluation and complex number helpers."""

import cmath
import math

import pytest

from mathexpr.complex import ComplexEvaluator, complex_power
from mathexpr.errors import (
    DivisionByZeroError,
    ExponentialError,
    LogarithmOfZeroError,
    UnknownFunctionError,
)
from mathexpr.lexers import ComplexMathLexer
from mathexpr.nodes import FunctionNode, IntegerNode
from mathexpr.parser import parse


def evaluate(text, variables=None, **options):
    tree = parse(text, ComplexMathLexer(), **options)
    return ComplexEvaluator(variables).evaluate(tree)


class TestComplexEvaluator:
    def test_real_operands_are_promoted(self):
        result = evaluate("1 + 1/2")

        assert isinstance(result, complex)
        assert result == complex(1.5, 0)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("i^2", -1),
            ("2i", 2j),
            ("(1+i)(1-i)", 2),
            ("(3+4i)/(1+2i)", complex(2.2, -0.4)),
            ("e^(i*pi)", -1),
            ("exp(i*pi/2)", 1j),
            ("sqrt(-4)", 2j),
            ("abs(3+4i)", 5),
            ("arg(i)", math.pi / 2),
            ("re(3-2i)", 3),
            ("im(3-2i)", -2),
            ("conj(3-2i)", complex(3, 2)),
            ("log(-1)", complex(0, math.pi)),
            ("ln(e)", 1),
            ("lg(100)", 2),
            ("sin(i)", cmath.sin(1j)),
            ("cosh(i)", cmath.cos(1)),
        ],
    )
    def test_expressions(self, text, expected):
        assert evaluate(text) == pytest.approx(complex(expected))

    def test_variables(self):
        result = evaluate("z*conj(z)", {"z": "1+i"})
        assert result == pytest.approx(2)

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1+2i", complex(1, 2)),
            ("-i", -1j),
            ("3/4", complex(0.75, 0)),
            ("2,5-i", complex(2.5, -1)),
            (2, complex(2, 0)),
            (1j, 1j),
        ],
    )
    def test_variable_forms(self, value, expected):
        assert evaluate("z", {"z": value}) == expected

    def test_unsimplified(self):
        assert evaluate("2i + 3", simplify=False) == complex(3, 2)


class TestComplexErrors:
    def test_division_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            evaluate("z/0", {"z": "i"}, simplify=False)

    def test_zero_to_zero(self):
        with pytest.raises(ExponentialError):
            evaluate("z^z", {"z": 0})

    def test_zero_to_negative(self):
        with pytest.raises(DivisionByZeroError):
            complex_power(0j, complex(-1, 0))

    def test_log_of_zero(self):
        with pytest.raises(LogarithmOfZeroError):
            evaluate("log(z)", {"z": 0})

    def test_ln_needs_positive_real(self):
        with pytest.raises(ValueError):
            evaluate("ln(i)")

    def test_unknown_function(self):
        with pytest.raises(UnknownFunctionError):
            ComplexEvaluator().evaluate(FunctionNode("!", (IntegerNode(3),)))

    def test_malformed_variable(self):
        with pytest.raises(ValueError):
            evaluate("z", {"z": "abc"})
