"""Built-in functions for the expression evaluators.

This module registers every built-in function with the FunctionRegistry.
``mathexpr`` calls ``register_all_builtins()`` on import; tests call it
again after clearing the registry.

Domains:
- Real: trigonometric (also in degrees), inverse trigonometric,
  hyperbolic, inverse hyperbolic, exp, log/ln/lg, sqrt, abs, sgn,
  rounding, factorial and semi-factorial
- Rational: abs, sgn, sqrt, factorial and semi-factorial over Fraction
- Complex: the real table over cmath, plus re, im, arg and conj
- Pricing: round, ceil, floor and ending
"""

import cmath
import math
import re
from decimal import Decimal, ROUND_HALF_UP, ROUND_FLOOR
from fractions import Fraction
from typing import Any, Callable

from mathexpr.errors import (
    DivisionByZeroError,
    ExpressionSyntaxError,
    LogarithmOfZeroError,
)
from mathexpr.functions import (
    Domain,
    FunctionCategory,
    FunctionDefinition,
    FunctionParameter,
    FunctionRegistry,
)
from mathexpr.numbers import integer_root, semi_factorial

_DECIMAL_TAIL = re.compile(r"^\d*\.\d\d$")


def register_all_builtins() -> None:
    """Register all built-in functions with the FunctionRegistry."""
    _register_real_functions()
    _register_rational_functions()
    _register_complex_functions()
    _register_pricing_functions()


def _unary(
    name: str,
    description: str,
    category: FunctionCategory,
    domain: Domain,
    implementation: Callable[..., Any],
    examples: list[str] | None = None,
) -> FunctionDefinition:
    kind = "complex" if domain == Domain.COMPLEX else "number"
    return FunctionDefinition(
        name=name,
        description=description,
        category=category,
        domain=domain,
        parameters=[FunctionParameter("x", kind, "The argument")],
        implementation=implementation,
        examples=examples or [f"{name}(x)"],
    )


# -----------------------------------------------------------------------------
# Real Functions
# -----------------------------------------------------------------------------
#
# Arguments outside a function's real domain give NaN rather than an
# error, so "sqrt(-1)" evaluates to NAN. Only log of zero raises.


def _cot(x: float) -> float:
    sine = math.sin(x)
    if sine == 0:
        return math.copysign(math.inf, math.cos(x))
    return math.cos(x) / sine


def _sind(x: float) -> float:
    return math.sin(math.radians(x))


def _cosd(x: float) -> float:
    return math.cos(math.radians(x))


def _tand(x: float) -> float:
    return math.tan(math.radians(x))


def _cotd(x: float) -> float:
    return _cot(math.radians(x))


def _arcsin(x: float) -> float:
    return math.asin(x) if -1 <= x <= 1 else math.nan


def _arccos(x: float) -> float:
    return math.acos(x) if -1 <= x <= 1 else math.nan


def _arccot(x: float) -> float:
    return math.pi / 2 - math.atan(x)


def _coth(x: float) -> float:
    if x == 0:
        return math.nan
    return 1 / math.tanh(x)


def _arcosh(x: float) -> float:
    return math.acosh(x) if x >= 1 else math.nan


def _artanh(x: float) -> float:
    if abs(x) > 1 or math.isnan(x):
        return math.nan
    if abs(x) == 1:
        return math.copysign(math.inf, x)
    return math.atanh(x)


def _arcoth(x: float) -> float:
    """arcoth(x) = artanh(1/x)."""
    if x == 0:
        return math.nan
    return _artanh(1 / x)


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _logarithm(name: str, base: float | None = None) -> Callable[[float], float]:
    def logarithm(x: float) -> float:
        if x == 0:
            raise LogarithmOfZeroError(name)
        if x < 0 or math.isnan(x):
            return math.nan
        if base is None:
            return math.log(x)
        return math.log(x, base)

    return logarithm


def _sqrt(x: float) -> float:
    return math.sqrt(x) if x >= 0 else math.nan


def _sgn(x: float) -> int:
    """Sign of x; zero counts as positive."""
    return -1 if x < 0 else 1


def _round_half_up(x: float) -> float:
    """Round to the nearest integer, halves away from zero."""
    if not math.isfinite(x):
        return x
    return float(Decimal(repr(x)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _ceil(x: float) -> float:
    return float(math.ceil(x)) if math.isfinite(x) else x


def _floor(x: float) -> float:
    return float(math.floor(x)) if math.isfinite(x) else x


def _factorial(x: float) -> float:
    """x! for integers, gamma(x + 1) otherwise.

    Raises:
        ValueError: For negative integers
    """
    if float(x).is_integer():
        if x < 0:
            raise ValueError("Factorial of a negative integer is undefined")
        return math.factorial(int(x))
    try:
        return math.gamma(x + 1)
    except OverflowError:
        return math.inf


def _semi_factorial(x: float) -> int:
    """x!!; only defined for non-negative integers.

    Raises:
        ValueError: For negative or fractional arguments
    """
    if not float(x).is_integer():
        raise ValueError("Semi-factorial expects a non-negative integer")
    return semi_factorial(int(x))


_REAL_TABLE: list[tuple[str, str, FunctionCategory, Callable[..., Any]]] = [
    ("sin", "Sine (radians)", FunctionCategory.TRIGONOMETRIC, math.sin),
    ("cos", "Cosine (radians)", FunctionCategory.TRIGONOMETRIC, math.cos),
    ("tan", "Tangent (radians)", FunctionCategory.TRIGONOMETRIC, math.tan),
    ("cot", "Cotangent (radians)", FunctionCategory.TRIGONOMETRIC, _cot),
    ("sind", "Sine (degrees)", FunctionCategory.TRIGONOMETRIC, _sind),
    ("cosd", "Cosine (degrees)", FunctionCategory.TRIGONOMETRIC, _cosd),
    ("tand", "Tangent (degrees)", FunctionCategory.TRIGONOMETRIC, _tand),
    ("cotd", "Cotangent (degrees)", FunctionCategory.TRIGONOMETRIC, _cotd),
    ("arcsin", "Inverse sine", FunctionCategory.TRIGONOMETRIC, _arcsin),
    ("arccos", "Inverse cosine", FunctionCategory.TRIGONOMETRIC, _arccos),
    ("arctan", "Inverse tangent", FunctionCategory.TRIGONOMETRIC, math.atan),
    ("arccot", "Inverse cotangent", FunctionCategory.TRIGONOMETRIC, _arccot),
    ("sinh", "Hyperbolic sine", FunctionCategory.HYPERBOLIC, math.sinh),
    ("cosh", "Hyperbolic cosine", FunctionCategory.HYPERBOLIC, math.cosh),
    ("tanh", "Hyperbolic tangent", FunctionCategory.HYPERBOLIC, math.tanh),
    ("coth", "Hyperbolic cotangent", FunctionCategory.HYPERBOLIC, _coth),
    ("arsinh", "Inverse hyperbolic sine", FunctionCategory.HYPERBOLIC, math.asinh),
    ("arcosh", "Inverse hyperbolic cosine", FunctionCategory.HYPERBOLIC, _arcosh),
    ("artanh", "Inverse hyperbolic tangent", FunctionCategory.HYPERBOLIC, _artanh),
    ("arcoth", "Inverse hyperbolic cotangent", FunctionCategory.HYPERBOLIC, _arcoth),
    ("exp", "Exponential function", FunctionCategory.EXPONENTIAL, _exp),
    ("log", "Natural logarithm", FunctionCategory.EXPONENTIAL, _logarithm("log")),
    ("ln", "Natural logarithm", FunctionCategory.EXPONENTIAL, _logarithm("ln")),
    ("lg", "Base-10 logarithm", FunctionCategory.EXPONENTIAL, _logarithm("lg", 10)),
    ("sqrt", "Square root", FunctionCategory.EXPONENTIAL, _sqrt),
    ("abs", "Absolute value", FunctionCategory.ARITHMETIC, abs),
    ("sgn", "Sign: -1 for negative, 1 otherwise", FunctionCategory.ARITHMETIC, _sgn),
    ("round", "Round to nearest integer, halves up", FunctionCategory.ROUNDING, _round_half_up),
    ("ceil", "Round up", FunctionCategory.ROUNDING, _ceil),
    ("floor", "Round down", FunctionCategory.ROUNDING, _floor),
    ("!", "Factorial; gamma(x+1) for non-integers", FunctionCategory.ARITHMETIC, _factorial),
    ("!!", "Semi-factorial", FunctionCategory.ARITHMETIC, _semi_factorial),
]


def _register_real_functions() -> None:
    for name, description, category, implementation in _REAL_TABLE:
        FunctionRegistry.register(
            _unary(name, description, category, Domain.REAL, implementation)
        )


# -----------------------------------------------------------------------------
# Rational Functions
# -----------------------------------------------------------------------------


def _rational_abs(x: Fraction) -> Fraction:
    return abs(x)


def _rational_sgn(x: Fraction) -> Fraction:
    return Fraction(-1) if x < 0 else Fraction(1)


def _rational_sqrt(x: Fraction) -> Fraction:
    """Exact square root.

    Raises:
        ValueError: If x is negative or not the square of a rational
    """
    numerator = integer_root(x.numerator, 2)
    denominator = integer_root(x.denominator, 2)
    if numerator is None or denominator is None:
        raise ValueError(f"Expecting rational number, sqrt({x}) is irrational")
    return Fraction(numerator, denominator)


def _require_natural(x: Fraction, symbol: str) -> int:
    if x.denominator != 1 or x < 0:
        raise ValueError(f"'{symbol}' expects a non-negative integer, got {x}")
    return x.numerator


def _rational_factorial(x: Fraction) -> Fraction:
    return Fraction(math.factorial(_require_natural(x, "!")))


def _rational_semi_factorial(x: Fraction) -> Fraction:
    return Fraction(semi_factorial(_require_natural(x, "!!")))


def _register_rational_functions() -> None:
    FunctionRegistry.register(
        _unary("abs", "Absolute value", FunctionCategory.ARITHMETIC,
               Domain.RATIONAL, _rational_abs, ["abs(-3/4)"])
    )
    FunctionRegistry.register(
        _unary("sgn", "Sign: -1 for negative, 1 otherwise",
               FunctionCategory.ARITHMETIC, Domain.RATIONAL, _rational_sgn)
    )
    FunctionRegistry.register(
        _unary("sqrt", "Exact square root of a rational square",
               FunctionCategory.EXPONENTIAL, Domain.RATIONAL, _rational_sqrt,
               ["sqrt(9/4)"])
    )
    FunctionRegistry.register(
        _unary("!", "Factorial", FunctionCategory.ARITHMETIC,
               Domain.RATIONAL, _rational_factorial, ["5!"])
    )
    FunctionRegistry.register(
        _unary("!!", "Semi-factorial", FunctionCategory.ARITHMETIC,
               Domain.RATIONAL, _rational_semi_factorial, ["7!!"])
    )


# -----------------------------------------------------------------------------
# Complex Functions
# -----------------------------------------------------------------------------


def _complex_reciprocal(func: Callable[[complex], complex]) -> Callable[[complex], complex]:
    def reciprocal(z: complex) -> complex:
        value = func(z)
        if value == 0:
            raise DivisionByZeroError(func.__name__)
        return 1 / value

    return reciprocal


def _complex_arccot(z: complex) -> complex:
    return cmath.pi / 2 - cmath.atan(z)


def _complex_arcoth(z: complex) -> complex:
    if z == 0:
        raise DivisionByZeroError("arcoth")
    return cmath.atanh(1 / z)


def _complex_log(z: complex) -> complex:
    if z == 0:
        raise LogarithmOfZeroError("log")
    return cmath.log(z)


def _complex_ln(z: complex) -> complex:
    """Natural logarithm, restricted to the positive real axis.

    Raises:
        LogarithmOfZeroError: If z is zero
        ValueError: If z is not a positive real number
    """
    if z == 0:
        raise LogarithmOfZeroError("ln")
    if z.imag != 0 or z.real < 0:
        raise ValueError("ln expects a positive real number; use log for complex arguments")
    return complex(math.log(z.real), 0.0)


def _complex_lg(z: complex) -> complex:
    if z == 0:
        raise LogarithmOfZeroError("lg")
    return cmath.log(z) / math.log(10)


_COMPLEX_TABLE: list[tuple[str, str, FunctionCategory, Callable[..., Any]]] = [
    ("sin", "Complex sine", FunctionCategory.TRIGONOMETRIC, cmath.sin),
    ("cos", "Complex cosine", FunctionCategory.TRIGONOMETRIC, cmath.cos),
    ("tan", "Complex tangent", FunctionCategory.TRIGONOMETRIC, cmath.tan),
    ("cot", "Complex cotangent", FunctionCategory.TRIGONOMETRIC, _complex_reciprocal(cmath.tan)),
    ("arcsin", "Complex inverse sine", FunctionCategory.TRIGONOMETRIC, cmath.asin),
    ("arccos", "Complex inverse cosine", FunctionCategory.TRIGONOMETRIC, cmath.acos),
    ("arctan", "Complex inverse tangent", FunctionCategory.TRIGONOMETRIC, cmath.atan),
    ("arccot", "Complex inverse cotangent", FunctionCategory.TRIGONOMETRIC, _complex_arccot),
    ("sinh", "Complex hyperbolic sine", FunctionCategory.HYPERBOLIC, cmath.sinh),
    ("cosh", "Complex hyperbolic cosine", FunctionCategory.HYPERBOLIC, cmath.cosh),
    ("tanh", "Complex hyperbolic tangent", FunctionCategory.HYPERBOLIC, cmath.tanh),
    ("coth", "Complex hyperbolic cotangent", FunctionCategory.HYPERBOLIC, _complex_reciprocal(cmath.tanh)),
    ("arsinh", "Complex inverse hyperbolic sine", FunctionCategory.HYPERBOLIC, cmath.asinh),
    ("arcosh", "Complex inverse hyperbolic cosine", FunctionCategory.HYPERBOLIC, cmath.acosh),
    ("artanh", "Complex inverse hyperbolic tangent", FunctionCategory.HYPERBOLIC, cmath.atanh),
    ("arcoth", "Complex inverse hyperbolic cotangent", FunctionCategory.HYPERBOLIC, _complex_arcoth),
    ("exp", "Complex exponential", FunctionCategory.EXPONENTIAL, cmath.exp),
    ("log", "Principal complex logarithm", FunctionCategory.EXPONENTIAL, _complex_log),
    ("ln", "Natural logarithm of a positive real", FunctionCategory.EXPONENTIAL, _complex_ln),
    ("lg", "Principal base-10 logarithm", FunctionCategory.EXPONENTIAL, _complex_lg),
    ("sqrt", "Principal square root", FunctionCategory.EXPONENTIAL, cmath.sqrt),
    ("abs", "Modulus", FunctionCategory.COMPLEX, lambda z: complex(abs(z), 0.0)),
    ("arg", "Argument (phase)", FunctionCategory.COMPLEX, lambda z: complex(cmath.phase(z), 0.0)),
    ("re", "Real part", FunctionCategory.COMPLEX, lambda z: complex(z.real, 0.0)),
    ("im", "Imaginary part", FunctionCategory.COMPLEX, lambda z: complex(z.imag, 0.0)),
    ("conj", "Complex conjugate", FunctionCategory.COMPLEX, lambda z: z.conjugate()),
]


def _register_complex_functions() -> None:
    for name, description, category, implementation in _COMPLEX_TABLE:
        FunctionRegistry.register(
            _unary(name, description, category, Domain.COMPLEX, implementation)
        )


# -----------------------------------------------------------------------------
# Pricing Functions
# -----------------------------------------------------------------------------


def _format_tail(tail: Any) -> str:
    """Render a decimal tail argument as text: 9.9 -> "9.90", 0.9 -> ".90"."""
    if isinstance(tail, str):
        text = tail
    else:
        text = f"{float(tail):.2f}"
        if 0 <= float(tail) < 1:
            text = text[1:]
    if not _DECIMAL_TAIL.match(text):
        raise ExpressionSyntaxError(text, f"Invalid price ending '{text}'")
    return text


def _ending(value: float, tail: Any) -> float:
    """Overwrite the trailing digits of a price with a fixed ending.

    The price is truncated to cents and rendered with two decimals; the
    last ``len(tail)`` characters are replaced by ``tail``.

    Examples:
        ending(500, .90) -> 500.90
        ending(512.34, 9.90) -> 519.90

    Raises:
        ExpressionSyntaxError: If the tail is malformed or longer than the price
    """
    ending = _format_tail(tail)
    cents = Decimal(repr(float(value))).quantize(Decimal("0.01"), rounding=ROUND_FLOOR)
    price = f"{cents:.2f}"
    keep = len(price) - len(ending)
    if keep <= 0:
        raise ExpressionSyntaxError(ending, f"Ending '{ending}' is longer than price {price}")
    return float(price[:keep] + ending)


def _register_pricing_functions() -> None:
    FunctionRegistry.register(
        FunctionDefinition(
            name="round",
            description="Round to nearest integer, halves up",
            category=FunctionCategory.ROUNDING,
            domain=Domain.PRICING,
            parameters=[FunctionParameter("price", "number", "The price")],
            implementation=_round_half_up,
            examples=["round($price * 1.1)"],
        )
    )

    FunctionRegistry.register(
        FunctionDefinition(
            name="ceil",
            description="Round up to the next integer",
            category=FunctionCategory.ROUNDING,
            domain=Domain.PRICING,
            parameters=[FunctionParameter("price", "number", "The price")],
            implementation=_ceil,
            examples=["ceil($price)"],
        )
    )

    FunctionRegistry.register(
        FunctionDefinition(
            name="floor",
            description="Round down to the previous integer",
            category=FunctionCategory.ROUNDING,
            domain=Domain.PRICING,
            parameters=[FunctionParameter("price", "number", "The price")],
            implementation=_floor,
            examples=["floor($price)"],
        )
    )

    FunctionRegistry.register(
        FunctionDefinition(
            name="ending",
            description="Replace the trailing digits of a price with a fixed ending",
            category=FunctionCategory.PRICING,
            domain=Domain.PRICING,
            parameters=[
                FunctionParameter("price", "number", "The price"),
                FunctionParameter("tail", "decimal tail", "Ending such as .90 or 9.90"),
            ],
            implementation=_ending,
            examples=[
                "ending($price, .90)",
                "if ($price < 200) { ending($price, .90) } else { ending($price, 9.90) }",
            ],
        )
    )
