"""Exact-number helpers over ``fractions.Fraction`` and ``complex``.

Parsing of bound variable values, decimal-to-fraction approximation,
complex formatting and the integer routines the evaluators need.
"""

from __future__ import annotations

import math
import re
from fractions import Fraction

from mathexpr.errors import DivisionByZeroError

_RATIONAL_PATTERN = re.compile(r"^\s*(-?\d+)(?:\s*/\s*(\d+))?\s*$")
_REAL_PATTERN = re.compile(r"^-?\d+([,.]\d+)?$")
_COMPLEX_PATTERN = re.compile(r"^([-+])?([0-9/,.]*?)([-+]?)([0-9/,.]*?)i$")

# Largest denominator shown as a fraction when formatting complex numbers
_DISPLAY_DENOMINATOR = 100


def parse_rational(value: object) -> Fraction:
    """Convert an int, Fraction or "p/q" string to a Fraction.

    Raises:
        ValueError: For floats, booleans and malformed strings
    """
    if isinstance(value, bool):
        raise ValueError("Expecting rational number")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, str):
        match = _RATIONAL_PATTERN.match(value)
        if match:
            denominator = int(match.group(2) or 1)
            if denominator == 0:
                raise DivisionByZeroError(value)
            return Fraction(int(match.group(1)), denominator)
    raise ValueError(f"Expecting rational number, got {value!r}")


def rational_from_float(value: float | str, tolerance: float = 1e-7) -> Fraction:
    """Approximate a decimal by its continued-fraction convergents.

    Stops at the first convergent within ``tolerance`` relative error, so
    0.7 gives 7/10 and 3.14159265 gives 355/113.
    """
    if isinstance(value, str):
        value = float(value.strip().replace(",", "."))
    if not math.isfinite(value):
        raise ValueError(f"Cannot convert {value} to a fraction")
    if value == 0:
        return Fraction(0)

    x = abs(value)
    numerator, previous_numerator = 1, 0
    denominator, previous_denominator = 0, 1
    remainder = x

    for _ in range(64):
        whole = math.floor(remainder)
        numerator, previous_numerator = whole * numerator + previous_numerator, numerator
        denominator, previous_denominator = (
            whole * denominator + previous_denominator,
            denominator,
        )
        if abs(x - numerator / denominator) <= x * tolerance:
            break
        fractional = remainder - whole
        if fractional == 0:
            break
        remainder = 1 / fractional

    result = Fraction(numerator, denominator)
    return -result if value < 0 else result


def _parse_part(text: str) -> float:
    """Parse one real or imaginary component of a complex literal."""
    if text in ("", "-", "+"):
        return 0.0
    try:
        return float(parse_rational(text))
    except ValueError:
        pass
    if _REAL_PATTERN.match(text):
        return float(text.replace(",", "."))
    raise ValueError(f"Expecting complex number, got {text!r}")


def parse_complex(value: object) -> complex:
    """Convert a number or a string such as "1+2i", "-i" or "3/4" to complex.

    Raises:
        ValueError: If the value cannot be read as a complex number
    """
    if isinstance(value, bool):
        raise ValueError("Expecting complex number")
    if isinstance(value, complex):
        return value
    if isinstance(value, (int, float, Fraction)):
        return complex(float(value), 0.0)
    if not isinstance(value, str):
        raise ValueError(f"Expecting complex number, got {value!r}")

    text = value.strip().replace(" ", "")
    match = _COMPLEX_PATTERN.match(text)
    if match is None:
        return complex(_parse_part(text), 0.0)

    sign, real, imaginary_sign, imaginary = match.groups()
    if real == "":
        # "2i", "-i": the only sign belongs to the imaginary part
        imaginary_sign = sign or ""
        sign = ""
        real = "0"
    if imaginary == "":
        imaginary = "1"

    real_part = _parse_part(real)
    imaginary_part = _parse_part(imaginary)
    if sign == "-":
        real_part = -real_part
    if imaginary_sign == "-":
        imaginary_part = -imaginary_part
    return complex(real_part, imaginary_part)


def _format_part(value: float, signed: bool = False) -> str:
    approximation = rational_from_float(value) if math.isfinite(value) else None
    if approximation is not None and approximation.denominator <= _DISPLAY_DENOMINATOR:
        text = str(approximation)
        if signed and approximation >= 0:
            text = f"+{text}"
        return text
    return f"{value:+f}" if signed else f"{value:f}"


def format_complex(z: complex) -> str:
    """Render a complex number, using small fractions where they are exact enough.

    Examples: 1+2i -> "1+2i", 0.5i -> "1/2i", -1i -> "-i", 3 -> "3".
    """
    real, imaginary = z.real, z.imag
    real_text = _format_part(real)

    if imaginary == 0:
        return real_text

    if real == 0:
        if imaginary == 1:
            return "i"
        if imaginary == -1:
            return "-i"
        return f"{_format_part(imaginary)}i"

    if imaginary == 1:
        imaginary_text = "+"
    elif imaginary == -1:
        imaginary_text = "-"
    else:
        imaginary_text = _format_part(imaginary, signed=True)
    return f"{real_text}{imaginary_text}i"


def integer_root(n: int, k: int) -> int | None:
    """Exact non-negative k-th root of n, or None when n is not a k-th power."""
    if n < 0 or k < 1:
        return None
    if n < 2 or k == 1:
        return n
    # Newton iteration from a power of two above the root down to its floor
    guess = 1 << -(-n.bit_length() // k)
    while True:
        smaller = ((k - 1) * guess + n // guess ** (k - 1)) // k
        if smaller >= guess:
            break
        guess = smaller
    return guess if guess ** k == n else None


def semi_factorial(n: int) -> int:
    """n!! = n * (n-2) * (n-4) * ...

    Raises:
        ValueError: For negative n
    """
    if n < 0:
        raise ValueError("Semi-factorial expects a non-negative integer")
    result = 1
    while n >= 2:
        result *= n
        n -= 2
    return result
