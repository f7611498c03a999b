"""Tests for the exact-number helpers."""

from fractions import Fraction

import pytest

from mathexpr.errors import DivisionByZeroError
from mathexpr.numbers import (
    format_complex,
    integer_root,
    parse_complex,
    parse_rational,
    rational_from_float,
    semi_factorial,
)


class TestParseRational:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (3, Fraction(3)),
            (Fraction(2, 4), Fraction(1, 2)),
            ("3/4", Fraction(3, 4)),
            (" -6 / 8 ", Fraction(-3, 4)),
            ("5", Fraction(5)),
        ],
    )
    def test_accepted(self, value, expected):
        assert parse_rational(value) == expected

    @pytest.mark.parametrize("value", [0.5, True, "1.5", "x", None])
    def test_rejected(self, value):
        with pytest.raises(ValueError):
            parse_rational(value)

    def test_zero_denominator(self):
        with pytest.raises(DivisionByZeroError):
            parse_rational("1/0")


class TestRationalFromFloat:
    """Continued-fraction approximation, pinned with explicit vectors."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.7, Fraction(7, 10)),
            (0.5, Fraction(1, 2)),
            (-0.75, Fraction(-3, 4)),
            (1 / 3, Fraction(1, 3)),
            (0.125, Fraction(1, 8)),
            (2.0, Fraction(2)),
            (0.0, Fraction(0)),
            (3.14159265, Fraction(355, 113)),
            ("0,7", Fraction(7, 10)),
            ("1.25", Fraction(5, 4)),
        ],
    )
    def test_vectors(self, value, expected):
        assert rational_from_float(value) == expected

    def test_tighter_tolerance(self):
        assert rational_from_float(3.14159265, tolerance=1e-10) != Fraction(355, 113)

    def test_not_finite(self):
        with pytest.raises(ValueError):
            rational_from_float(float("inf"))


class TestComplexText:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1+2i", complex(1, 2)),
            ("1-i", complex(1, -1)),
            ("-3+i", complex(-3, 1)),
            ("2i", 2j),
            ("-i", -1j),
            ("i", 1j),
            ("1/2+3/4i", complex(0.5, 0.75)),
            ("2.5", complex(2.5, 0)),
            ("-4", complex(-4, 0)),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_complex(text) == expected

    def test_parse_rejects_booleans(self):
        with pytest.raises(ValueError):
            parse_complex(False)

    @pytest.mark.parametrize(
        "value,expected",
        [
            (complex(1, 2), "1+2i"),
            (complex(3, 0), "3"),
            (1j, "i"),
            (-1j, "-i"),
            (0.5j, "1/2i"),
            (complex(1, -1), "1-i"),
            (complex(0.25, -0.5), "1/4-1/2i"),
            (complex(0, 0), "0"),
        ],
    )
    def test_format(self, value, expected):
        assert format_complex(value) == expected

    def test_format_irrational(self):
        assert format_complex(complex(3.14159265358979, 0)) == "3.141593"


class TestIntegerHelpers:
    @pytest.mark.parametrize(
        "n,k,expected",
        [
            (27, 3, 3),
            (16, 4, 2),
            (0, 2, 0),
            (1, 5, 1),
            (10, 2, None),
            (-8, 3, None),
            (2 ** 300, 3, 2 ** 100),
        ],
    )
    def test_integer_root(self, n, k, expected):
        assert integer_root(n, k) == expected

    @pytest.mark.parametrize("n,expected", [(0, 1), (1, 1), (5, 15), (6, 48), (7, 105)])
    def test_semi_factorial(self, n, expected):
        assert semi_factorial(n) == expected

    def test_semi_factorial_negative(self):
        with pytest.raises(ValueError):
            semi_factorial(-1)
