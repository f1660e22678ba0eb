"""
calculus - Numerical calculus on top of the expression evaluator

Limits, derivatives, definite integrals, critical points and Taylor
partial sums. Everything here is numeric: expressions are compiled once with
expression.compile_expression and sampled.

Examples:
    >>> evaluate_limit("sin(x)/x", 0)
    1.0
    >>> round(definite_integral("x^2", 0, 3)['value'], 6)
    9.0
"""

import logging
import math
from typing import Callable, Dict, List, Sequence

import numpy as np
from scipy.integrate import simpson

from expression import compile_expression
from solver_config import (
    DERIVATIVE_STEP, DIVERGENCE_THRESHOLD, INTEGRATION_INTERVALS,
    LIMIT_INFINITY_POINTS, LIMIT_STEPS, LIMIT_TOLERANCE,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Limits
# =============================================================================

def _approach(f: Callable[[float], float], points: Sequence[float],
              tolerance: float) -> float:
    """
    Trend of f along a sequence of points.

    Returns the last value when the last two samples agree within tolerance,
    +-inf when the samples grow past DIVERGENCE_THRESHOLD, nan otherwise.
    """
    values = [y for y in (f(x) for x in points) if not math.isnan(y)]
    if not values:
        return math.nan

    last = values[-1]
    if math.isinf(last):
        return last
    if len(values) < 2:
        return last

    prev = values[-2]
    if abs(last) > DIVERGENCE_THRESHOLD and abs(last) > 2 * abs(prev):
        return math.copysign(math.inf, last)
    if abs(last - prev) < tolerance:
        return last
    return math.nan


def _one_sided(f: Callable[[float], float], point: float, side: int,
               tolerance: float) -> float:
    return _approach(f, [point + side * h for h in LIMIT_STEPS], tolerance)


def _round_limit(value: float, tolerance: float) -> float:
    """Snap a numerical limit to the nearest integer when it is that close."""
    if math.isfinite(value) and abs(value - round(value)) < tolerance:
        return float(round(value))
    return value


def evaluate_limit(expr: str, point: float, direction: str = 'both',
                   variable: str = 'x', tolerance: float = LIMIT_TOLERANCE) -> float:
    """
    Numerical limit of an expression.

    Args:
        expr: Expression text (e.g., "sin(x)/x")
        point: Point approached; math.inf / -math.inf for limits at infinity
        direction: 'both', 'left' or 'right'
        variable: Name of the free variable (default: 'x')
        tolerance: Agreement required between the two one-sided limits

    Returns:
        The limit; nan if the expression cannot be parsed, the one-sided
        limits disagree, or no finite/infinite trend is found

    Raises:
        ValueError: on an unknown direction
    """
    if direction not in ('both', 'left', 'right'):
        raise ValueError(f"direction must be 'both', 'left' or 'right', got '{direction}'")

    try:
        f = compile_expression(expr, variable)
    except ValueError as e:
        logger.debug(f"Could not parse '{expr}': {e}")
        return math.nan

    if math.isinf(point):
        sign = 1 if point > 0 else -1
        points = [sign * x for x in LIMIT_INFINITY_POINTS]
        return _round_limit(_approach(f, points, tolerance), tolerance)

    left = _one_sided(f, point, -1, tolerance)
    right = _one_sided(f, point, 1, tolerance)

    if direction == 'left':
        return _round_limit(left, tolerance)
    if direction == 'right':
        return _round_limit(right, tolerance)

    if math.isinf(left) and left == right:
        return left
    if math.isfinite(left) and math.isfinite(right) and abs(left - right) < tolerance:
        return _round_limit((left + right) / 2, tolerance)

    logger.debug(f"One-sided limits of '{expr}' at {point} disagree: {left} vs {right}")
    return math.nan


# =============================================================================
# Derivatives
# =============================================================================

def derivative_at(expr: str, x0: float, variable: str = 'x',
                  h: float = DERIVATIVE_STEP) -> Dict:
    """
    Central-difference derivative f'(x0) ~ (f(x0+h) - f(x0-h)) / 2h.

    Returns:
        dict with 'expression', 'point', 'value', 'step', 'method'
    """
    f = compile_expression(expr, variable)
    value = (f(x0 + h) - f(x0 - h)) / (2 * h)
    return {
        'expression': expr,
        'point': x0,
        'value': value,
        'step': h,
        'method': 'Central difference',
    }


def second_derivative_at(f: Callable[[float], float], x0: float,
                         h: float = DERIVATIVE_STEP) -> float:
    return (f(x0 + h) - 2 * f(x0) + f(x0 - h)) / (h * h)


def find_critical_points(expr: str, x_min: float = -10, x_max: float = 10,
                         step: float = 0.1, variable: str = 'x') -> List[Dict]:
    """
    Locate points where the derivative changes sign.

    The interval is scanned in steps of `step`; every sign change of the
    numerical derivative is refined by bisection and classified by the sign
    of the second difference.

    Returns:
        List of dicts with 'x', 'y' and 'type' ('local minimum',
        'local maximum' or 'inflection point')
    """
    f = compile_expression(expr, variable)
    h = DERIVATIVE_STEP

    def slope(x):
        return (f(x + h) - f(x - h)) / (2 * h)

    points = []
    n_steps = int(round((x_max - x_min) / step))
    prev_x = x_min
    prev_slope = slope(prev_x)

    for k in range(1, n_steps + 1):
        x = x_min + k * step
        current = slope(x)

        if prev_slope != 0 and prev_slope * current <= 0:
            a, b = prev_x, x
            slope_a = prev_slope
            for _ in range(50):
                mid = (a + b) / 2
                slope_mid = slope(mid)
                if abs(slope_mid) < 1e-10:
                    a = b = mid
                    break
                if slope_a * slope_mid < 0:
                    b = mid
                else:
                    a, slope_a = mid, slope_mid

            critical = (a + b) / 2
            curvature = second_derivative_at(f, critical)
            if curvature > 1e-3:
                kind = 'local minimum'
            elif curvature < -1e-3:
                kind = 'local maximum'
            else:
                kind = 'inflection point'

            points.append({'x': critical, 'y': f(critical), 'type': kind})

        prev_x, prev_slope = x, current

    return points


# =============================================================================
# Integration
# =============================================================================

def _sample(f: Callable[[float], float], a: float, b: float, n: int):
    """n + 1 evenly spaced nodes on [a, b] and f at each of them."""
    xs = np.linspace(a, b, n + 1)
    ys = np.array([f(float(x)) for x in xs], dtype=float)
    return xs, ys


def trapezoidal_rule(f: Callable[[float], float], a: float, b: float, n: int) -> float:
    xs, ys = _sample(f, a, b, n)
    return float(np.trapezoid(ys, xs))


def simpsons_rule(f: Callable[[float], float], a: float, b: float, n: int) -> float:
    """Simpson's 1/3 rule; an odd n is rounded up to the next even number."""
    if n % 2:
        n += 1
    xs, ys = _sample(f, a, b, n)
    return float(simpson(ys, x=xs))


def definite_integral(expr: str, a: float, b: float,
                      n: int = INTEGRATION_INTERVALS, variable: str = 'x') -> Dict:
    """
    Integrate an expression over [a, b] with Simpson's rule.

    Returns:
        dict with 'value', 'expression', 'lower_bound', 'upper_bound',
        'intervals' and 'method'
    """
    if n % 2:
        n += 1
    f = compile_expression(expr, variable)
    return {
        'value': simpsons_rule(f, a, b, n),
        'expression': expr,
        'lower_bound': a,
        'upper_bound': b,
        'intervals': n,
        'method': "Simpson's Rule",
    }


# =============================================================================
# Taylor series
# =============================================================================

def factorial(n: int) -> float:
    if n < 0:
        return math.nan
    return float(math.factorial(n))


def taylor_sin(x: float, a: float, n: int) -> float:
    """
    Sine expanded around a, up to the power 2n - 1 of (x - a).

    At a = 0 this is the familiar n-term series x - x^3/3! + x^5/5! - ...
    """
    return sum(math.sin(a + k * math.pi / 2) * (x - a) ** k / factorial(k)
               for k in range(2 * n))


def taylor_cos(x: float, a: float, n: int) -> float:
    """Cosine expanded around a, up to the power 2n - 1 of (x - a)."""
    return sum(math.cos(a + k * math.pi / 2) * (x - a) ** k / factorial(k)
               for k in range(2 * n))


def taylor_exp(x: float, a: float, n: int) -> float:
    """First n terms of e^x expanded around a."""
    ea = math.exp(a)
    return sum(ea * (x - a) ** k / factorial(k) for k in range(n))


def taylor_ln(x: float, n: int) -> float:
    """First n terms of ln(1 + x) at 0; converges for -1 < x <= 1."""
    return sum((-1) ** (k + 1) * x ** k / k for k in range(1, n + 1))


def taylor_atan(x: float, n: int) -> float:
    return sum((-1) ** k * x ** (2 * k + 1) / (2 * k + 1) for k in range(n))
