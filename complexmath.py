"""
complexmath - Complex arithmetic kernel for the polynomial solvers

Values are immutable (re, im) pairs. Nothing in this module raises on bad
arithmetic: a zero denominator gives (nan, nan) and callers check for
non-finite results.

Examples:
    >>> from complexmath import Complex, complex_sqrt, format_complex
    >>> complex_sqrt(Complex(-4))
    Complex(re=0.0, im=2.0)
    >>> format_complex(Complex(3, 4))
    '3.0000 + 4.0000i'
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Union

from solver_config import DISPLAY_DECIMALS, EPSILON


Number = Union[int, float]


# =============================================================================
# Value type
# =============================================================================

@dataclass(frozen=True)
class Complex:
    """
    A complex number re + im*i.

    Arithmetic operators accept another Complex or a real scalar and always
    return a new value.
    """

    re: float
    im: float = 0.0

    @staticmethod
    def from_real(x: Number) -> 'Complex':
        return Complex(float(x), 0.0)

    @staticmethod
    def from_builtin(z: complex) -> 'Complex':
        return Complex(z.real, z.imag)

    def to_builtin(self) -> complex:
        return complex(self.re, self.im)

    def __add__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return complex_add(self, other)

    __radd__ = __add__

    def __sub__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return complex_sub(self, other)

    def __rsub__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return complex_sub(other, self)

    def __mul__(self, other):
        if isinstance(other, (int, float)):
            return complex_scale(self, other)
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return complex_mul(self, other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return complex_div(self, other)

    def __rtruediv__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return complex_div(other, self)

    def __neg__(self):
        return Complex(-self.re, -self.im)

    def __pow__(self, n):
        return complex_pow(self, n)

    def __abs__(self):
        return complex_abs(self)

    def conjugate(self) -> 'Complex':
        return complex_conjugate(self)

    def is_real(self, tolerance: float = EPSILON) -> bool:
        return is_essentially_real(self, tolerance)

    def is_zero(self, tolerance: float = EPSILON) -> bool:
        return is_essentially_zero(self, tolerance)

    def is_finite(self) -> bool:
        return math.isfinite(self.re) and math.isfinite(self.im)

    def __str__(self):
        return format_complex(self)


ZERO = Complex(0.0, 0.0)
ONE = Complex(1.0, 0.0)
NAN = Complex(math.nan, math.nan)


def _coerce(value) -> Complex:
    if isinstance(value, Complex):
        return value
    if isinstance(value, complex):
        return Complex.from_builtin(value)
    if isinstance(value, (int, float)):
        return Complex(float(value), 0.0)
    return NotImplemented


# =============================================================================
# Arithmetic
# =============================================================================

def complex_add(a: Complex, b: Complex) -> Complex:
    return Complex(a.re + b.re, a.im + b.im)


def complex_sub(a: Complex, b: Complex) -> Complex:
    return Complex(a.re - b.re, a.im - b.im)


def complex_mul(a: Complex, b: Complex) -> Complex:
    return Complex(
        a.re * b.re - a.im * b.im,
        a.re * b.im + a.im * b.re,
    )


def complex_div(a: Complex, b: Complex) -> Complex:
    """
    Divide a by b.

    Returns (nan, nan) when the denominator is exactly zero instead of
    raising, so the caller sees the failure in the result.
    """
    denom = b.re * b.re + b.im * b.im
    if denom == 0:
        return NAN
    return Complex(
        (a.re * b.re + a.im * b.im) / denom,
        (a.im * b.re - a.re * b.im) / denom,
    )


def complex_scale(z: Complex, scalar: Number) -> Complex:
    return Complex(z.re * scalar, z.im * scalar)


def complex_pow(z: Complex, n: Number) -> Complex:
    """
    Raise z to an integer power by repeated multiplication.

    n = 0 gives 1 (including 0**0). Negative n takes the reciprocal of the
    positive power. A fractional exponent is not supported and gives nan.
    """
    if not float(n).is_integer():
        return NAN
    n = int(n)
    if n < 0:
        return complex_div(ONE, complex_pow(z, -n))

    result = ONE
    for _ in range(n):
        result = complex_mul(result, z)
    return result


def complex_sqrt(z: Complex) -> Complex:
    """
    Principal square root: the branch with non-negative real part.

    Negative reals map onto the positive imaginary axis, so
    sqrt(-4) == 2i and sqrt(-1) == i exactly.

    Uses the half-angle identities on modulus and real part
    (re = sqrt((r + a)/2), im = ±sqrt((r - a)/2)), which avoids the rounding
    noise of going through atan2 / cos / sin.
    """
    r = complex_abs(z)
    re = math.sqrt(max((r + z.re) / 2.0, 0.0))
    im = math.sqrt(max((r - z.re) / 2.0, 0.0))
    if z.im < 0:
        im = -im
    return Complex(re, im)


def complex_cbrt(z: Complex) -> Complex:
    """
    Principal cube root: modulus**(1/3) at one third of the argument.

    Note that the principal cube root of a negative real is not real
    (cbrt(-8) == 1 + 1.732i); Cardano's method pairs the two cube roots
    itself instead of relying on the real branch.
    """
    r = complex_abs(z)
    if r == 0:
        return ZERO
    theta = math.atan2(z.im, z.re) / 3.0
    radius = r ** (1.0 / 3.0)
    return Complex(radius * math.cos(theta), radius * math.sin(theta))


def complex_abs(z: Complex) -> float:
    return math.hypot(z.re, z.im)


def complex_conjugate(z: Complex) -> Complex:
    return Complex(z.re, -z.im)


def complex_from_real(x: Number) -> Complex:
    return Complex(float(x), 0.0)


# =============================================================================
# Tolerance checks
# =============================================================================

def is_essentially_real(z: Complex, tolerance: float = EPSILON) -> bool:
    return abs(z.im) < tolerance


def is_essentially_zero(z: Complex, tolerance: float = EPSILON) -> bool:
    return abs(z.re) < tolerance and abs(z.im) < tolerance


def clean(z: Complex, tolerance: float = EPSILON) -> Complex:
    """Snap components smaller than tolerance to exactly 0.0."""
    re = 0.0 if abs(z.re) < tolerance else z.re
    im = 0.0 if abs(z.im) < tolerance else z.im
    return Complex(re, im)


# =============================================================================
# Polynomial evaluation
# =============================================================================

def eval_poly(coefficients: Sequence[Number], z: Complex) -> Complex:
    """
    Evaluate a polynomial at a complex point (Horner's scheme).

    Args:
        coefficients: Real coefficients, index 0 = highest power
        z: Point of evaluation

    Returns:
        p(z) as a Complex
    """
    result = ZERO
    for c in coefficients:
        result = complex_add(complex_mul(result, z), Complex(float(c), 0.0))
    return result


# =============================================================================
# Display
# =============================================================================

def format_complex(z: Complex, decimals: int = DISPLAY_DECIMALS) -> str:
    """
    Render a complex number for display.

    Components smaller than the display resolution (10**-decimals) are
    dropped, so nothing is ever printed as 0.0000.
    A nan in either component renders the whole number as "nan".

    Examples:
        >>> format_complex(Complex(3, 4))
        '3.0000 + 4.0000i'
        >>> format_complex(Complex(0, -1))
        '-i'
        >>> format_complex(Complex(0, 0))
        '0'
    """
    tolerance = 10.0 ** -decimals
    re, im = z.re, z.im

    if math.isnan(re) or math.isnan(im):
        return "nan"

    if abs(re) < tolerance and abs(im) < tolerance:
        return "0"

    if abs(im) < tolerance:
        return f"{re:.{decimals}f}"

    if abs(re) < tolerance:
        if abs(im - 1) < tolerance:
            return "i"
        if abs(im + 1) < tolerance:
            return "-i"
        return f"{im:.{decimals}f}i"

    sign = "+" if im >= 0 else "-"
    abs_im = abs(im)
    if abs(abs_im - 1) < tolerance:
        return f"{re:.{decimals}f} {sign} i"
    return f"{re:.{decimals}f} {sign} {abs_im:.{decimals}f}i"


def format_roots(roots: List[Complex], decimals: int = DISPLAY_DECIMALS) -> List[str]:
    return [format_complex(z, decimals) for z in roots]
