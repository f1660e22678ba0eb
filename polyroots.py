"""
polyroots - Complex roots of real polynomials

Closed-form solvers for degree <= 3, Durand-Kerner simultaneous iteration for
degree >= 4, real/complex root separation and polynomial long division.

Polynomials are sequences of real coefficients, index 0 = highest power:
    [1, -6, 11, -6]  ->  x^3 - 6x^2 + 11x - 6
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from complexmath import (
    Complex, ZERO, clean, complex_abs, complex_add, complex_cbrt,
    complex_div, complex_from_real, complex_mul, complex_scale,
    complex_sqrt, complex_sub, eval_poly,
)
from solver_config import (
    COEFFICIENT_TOLERANCE, DISCRIMINANT_TOLERANCE, DK_ANGLE_OFFSET,
    DK_MAX_ITERATIONS, DK_RADIUS_SPREAD, DK_TOLERANCE, EPSILON,
)

logger = logging.getLogger(__name__)


# Primitive cube roots of unity
OMEGA = Complex(-0.5, math.sqrt(3) / 2)
OMEGA_SQUARED = Complex(-0.5, -math.sqrt(3) / 2)


# =============================================================================
# Closed-form solvers
# =============================================================================

def solve_linear(a: float, b: float) -> List[Complex]:
    """
    Solve a*x + b = 0.

    Returns:
        [root] for a != 0, [] when there is no solution (0 = b, b != 0),
        [0] when every x is a solution (0 = 0).
    """
    if a == 0:
        return [ZERO] if b == 0 else []
    return [complex_from_real(-b / a)]


def solve_quadratic_complex(a: float, b: float, c: float) -> List[Complex]:
    """
    Solve a*x^2 + b*x + c = 0 over the complex numbers.

    The square root of the discriminant is taken with the complex kernel, so
    a negative discriminant yields the conjugate pair directly.

    Args:
        a, b, c: Real coefficients

    Returns:
        [(-b + sqrt(D)) / 2a, (-b - sqrt(D)) / 2a] - the "+" root first.
        With a == 0 the equation is solved as linear instead.

    Examples:
        >>> solve_quadratic_complex(1, -5, 6)
        [Complex(re=3.0, im=0.0), Complex(re=2.0, im=0.0)]
    """
    if a == 0:
        return solve_linear(b, c)

    discriminant = b * b - 4 * a * c
    sqrt_d = complex_sqrt(complex_from_real(discriminant))
    minus_b = complex_from_real(-b)
    two_a = 2 * a

    return [
        complex_scale(complex_add(minus_b, sqrt_d), 1.0 / two_a),
        complex_scale(complex_sub(minus_b, sqrt_d), 1.0 / two_a),
    ]


def solve_cubic_complex(a: float, b: float, c: float, d: float) -> List[Complex]:
    """
    Solve a*x^3 + b*x^2 + c*x + d = 0 with Cardano's formula.

    The cubic is depressed with x = t - b/3a into t^3 + p*t + q = 0 and every
    intermediate is complex, so one code path covers the one-real and the
    three-real cases alike:

        u = cbrt(-q/2 + sqrt(D)),  D = (q/2)^2 + (p/3)^3
        v = -p / (3u)
        t = u + v,  w*u + w^2*v,  w^2*u + w*v

    Deriving v from u keeps u*v = -p/3 on the principal branch. The sign in
    front of sqrt(D) is picked to make |u| as large as possible, which keeps
    the division by u well conditioned.

    A discriminant that is zero up to rounding is snapped to exactly zero,
    so a double root comes back as two equal real roots.

    Returns:
        Three roots, the "u + v" root first. With a == 0 the equation is
        solved as quadratic instead.
    """
    if a == 0:
        return solve_quadratic_complex(b, c, d)

    bn, cn, dn = b / a, c / a, d / a
    shift = -bn / 3

    p = cn - bn * bn / 3
    q = 2 * bn ** 3 / 27 - bn * cn / 3 + dn

    discriminant = (q / 2) ** 2 + (p / 3) ** 3
    # a double root leaves rounding noise in D that the cube root would
    # turn into a spurious conjugate pair
    if abs(discriminant) < DISCRIMINANT_TOLERANCE * ((q / 2) ** 2 + abs(p / 3) ** 3):
        discriminant = 0.0
    sqrt_d = complex_sqrt(complex_from_real(discriminant))
    half_q = complex_from_real(-q / 2)

    plus = complex_add(half_q, sqrt_d)
    minus = complex_sub(half_q, sqrt_d)
    radicand = plus if complex_abs(plus) >= complex_abs(minus) else minus

    u = complex_cbrt(radicand)
    if complex_abs(u) == 0:
        v = ZERO
    else:
        v = complex_div(complex_from_real(-p / 3), u)

    depressed = [
        complex_add(u, v),
        complex_add(complex_mul(OMEGA, u), complex_mul(OMEGA_SQUARED, v)),
        complex_add(complex_mul(OMEGA_SQUARED, u), complex_mul(OMEGA, v)),
    ]
    return [complex_add(t, complex_from_real(shift)) for t in depressed]


# =============================================================================
# Durand-Kerner iteration
# =============================================================================

@dataclass(frozen=True)
class DurandKernerConfig:
    """Iteration knobs for the Durand-Kerner root finder."""
    max_iterations: int = DK_MAX_ITERATIONS
    tolerance: float = DK_TOLERANCE
    angle_offset: float = DK_ANGLE_OFFSET
    radius_spread: float = DK_RADIUS_SPREAD


class DurandKerner:
    """
    Weierstrass / Durand-Kerner simultaneous iteration.

    All n roots of a monic polynomial are refined together:

        z_i <- z_i - p(z_i) / prod_{j != i} (z_i - z_j)

    Sweeps are Gauss-Seidel style: the product for z_i already uses the
    estimates updated earlier in the same sweep. Iteration stops when the
    largest correction in a sweep falls below the tolerance or after
    max_iterations sweeps, whichever comes first; in the latter case the
    current estimates are returned as they are.

    Coincident estimates make the product vanish and the correction
    non-finite. This is not special-cased: very close or repeated roots may
    not converge, and near-duplicate real roots may come back as a
    near-conjugate pair.
    """

    def __init__(self, coefficients: Sequence[float],
                 config: Optional[DurandKernerConfig] = None):
        if len(coefficients) < 2:
            raise ValueError("DurandKerner needs a polynomial of degree >= 1")
        if coefficients[0] == 0:
            raise ValueError("Leading coefficient must be non-zero")

        lead = coefficients[0]
        self.coefficients = [c / lead for c in coefficients]
        self.degree = len(coefficients) - 1
        self.config = config or DurandKernerConfig()
        self.iterations = 0
        self.converged = False

    def initial_guesses(self) -> List[Complex]:
        """Points on a rotated circle of slowly growing radius."""
        n = self.degree
        guesses = []
        for i in range(n):
            theta = 2 * math.pi * i / n + self.config.angle_offset
            radius = 1 + self.config.radius_spread * i / n
            guesses.append(Complex(radius * math.cos(theta), radius * math.sin(theta)))
        return guesses

    def sweep(self, roots: List[Complex]) -> float:
        """
        Refine every estimate once, in place.

        Returns: the largest correction magnitude of the sweep (inf when a
        correction was not finite)
        """
        max_change = 0.0
        for i in range(self.degree):
            z = roots[i]
            pz = eval_poly(self.coefficients, z)

            prod = Complex(1.0, 0.0)
            for j in range(self.degree):
                if i != j:
                    prod = complex_mul(prod, complex_sub(z, roots[j]))

            delta = complex_div(pz, prod)
            roots[i] = complex_sub(z, delta)

            change = complex_abs(delta)
            if not math.isfinite(change):
                logger.warning(f"Non-finite correction for root {i} "
                               f"(coincident estimates near {z})")
                change = math.inf
            max_change = max(max_change, change)
        return max_change

    def compute(self) -> List[Complex]:
        roots = self.initial_guesses()

        for iteration in range(1, self.config.max_iterations + 1):
            max_change = self.sweep(roots)
            self.iterations = iteration
            if max_change < self.config.tolerance:
                self.converged = True
                break

        if self.converged:
            logger.debug(f"Durand-Kerner converged after {self.iterations} sweeps "
                         f"(degree {self.degree})")
        else:
            logger.warning(f"Durand-Kerner stopped at the {self.config.max_iterations} "
                           f"sweep cap without reaching tolerance {self.config.tolerance}")

        return [clean(z) for z in roots]


def durand_kerner(coefficients: Sequence[float],
                  config: Optional[DurandKernerConfig] = None) -> List[Complex]:
    """
    Find all complex roots of a polynomial by Durand-Kerner iteration.

    Args:
        coefficients: Real coefficients, index 0 = highest power (non-zero)
        config: Iteration settings (default: DurandKernerConfig())

    Returns:
        degree roots in no particular order
    """
    return DurandKerner(coefficients, config).compute()


# =============================================================================
# Dispatch and classification
# =============================================================================

def strip_leading_zeros(coefficients: Sequence[float]) -> List[float]:
    """Drop exactly-zero leading coefficients, demoting the degree."""
    coeffs = [float(c) for c in coefficients]
    while coeffs and coeffs[0] == 0:
        coeffs.pop(0)
    return coeffs


def solution_method(coefficients: Sequence[float]) -> str:
    """Name of the strategy find_polynomial_roots_complex uses for this input."""
    degree = len(strip_leading_zeros(coefficients)) - 1
    if degree < 1:
        return "none"
    if degree <= 3:
        return "closed-form"
    return "durand-kerner"


def find_polynomial_roots_complex(coefficients: Sequence[float],
                                  config: Optional[DurandKernerConfig] = None) -> List[Complex]:
    """
    All complex roots of a polynomial.

    Degrees 1-3 use the closed-form solvers, higher degrees Durand-Kerner.
    Leading zeros are stripped first, so [0, 1, -3, 2] is solved as the
    quadratic x^2 - 3x + 2.

    Args:
        coefficients: Real coefficients, index 0 = highest power
        config: Durand-Kerner settings for degree >= 4

    Returns:
        List of degree roots ([] for constants)
    """
    coeffs = strip_leading_zeros(coefficients)
    degree = len(coeffs) - 1

    if degree < 1:
        return []

    logger.debug(f"Solving degree {degree} polynomial with {solution_method(coeffs)}")

    if degree == 1:
        return solve_linear(coeffs[0], coeffs[1])
    if degree == 2:
        return solve_quadratic_complex(*coeffs)
    if degree == 3:
        return solve_cubic_complex(*coeffs)

    return durand_kerner(coeffs, config)


def separate_roots(roots: Sequence[Complex],
                   tolerance: float = EPSILON) -> Dict[str, list]:
    """
    Split a root set into real roots and one representative per conjugate pair.

    Args:
        roots: Complex roots (e.g. from find_polynomial_roots_complex)
        tolerance: |im| below this counts as real

    Returns:
        dict with keys:
            - 'real_roots': real parts of the real roots, ascending
            - 'complex_roots': roots with im > 0 (the upper member of each pair)
    """
    real_roots = []
    complex_roots = []

    for root in roots:
        if abs(root.im) < tolerance:
            real_roots.append(root.re)
        elif root.im > 0:
            complex_roots.append(root)

    real_roots.sort()

    return {
        'real_roots': real_roots,
        'complex_roots': complex_roots,
    }


def find_real_roots(coefficients: Sequence[float],
                    tolerance: float = EPSILON) -> List[float]:
    """Real roots of a polynomial, ascending."""
    roots = find_polynomial_roots_complex(coefficients)
    return separate_roots(roots, tolerance)['real_roots']


def max_residual(coefficients: Sequence[float], roots: Sequence[Complex]) -> float:
    """Largest |p(z)| over the given roots (0.0 for no roots)."""
    if not roots:
        return 0.0
    return max(complex_abs(eval_poly(coefficients, z)) for z in roots)


# =============================================================================
# Polynomial long division
# =============================================================================

def _is_negligible(c: float) -> bool:
    return abs(c) < COEFFICIENT_TOLERANCE


def divide_polynomials(dividend: Sequence[float],
                       divisor: Sequence[float]) -> Optional[Dict[str, List[float]]]:
    """
    Long division of two polynomials.

    Args:
        dividend: Coefficients, index 0 = highest power
        divisor: Coefficients, index 0 = highest power

    Returns:
        dict with 'quotient' and 'remainder' coefficient lists, or None
        when either input is empty or the divisor is the zero polynomial.

    Examples:
        >>> divide_polynomials([1, -3, 2], [1, -1])
        {'quotient': [1.0, -2.0], 'remainder': [0]}
    """
    if not dividend or not divisor:
        return None
    if all(c == 0 for c in divisor):
        return None

    remainder = strip_leading_zeros(dividend) or [0.0]
    divisor = strip_leading_zeros(divisor)
    quotient = []

    while len(remainder) >= len(divisor):
        factor = remainder[0] / divisor[0]
        quotient.append(factor)
        for i in range(len(divisor)):
            remainder[i] -= factor * divisor[i]
        remainder.pop(0)

    if not quotient:
        quotient = [0.0]

    quotient = [0.0 if _is_negligible(c) else c for c in quotient]
    remainder = [0.0 if _is_negligible(c) else c for c in remainder]

    while len(remainder) > 1 and remainder[0] == 0:
        remainder.pop(0)

    if not remainder or all(c == 0 for c in remainder):
        remainder = [0]

    return {
        'quotient': quotient,
        'remainder': remainder,
    }
