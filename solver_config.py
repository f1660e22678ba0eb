"""
polyroots configuration - tolerances and iteration limits shared by the solvers.

Values are read-only; functions take them as keyword defaults so a caller can
override one call without touching the module.
"""

from typing import Dict, Tuple


# =============================================================================
# Numeric tolerances
# =============================================================================

# "is real" / "is zero" threshold for complex values
EPSILON = 1e-9

# Polynomial coefficients smaller than this are treated as zero
COEFFICIENT_TOLERANCE = 1e-10

# Cubic discriminants this small relative to their terms are treated as 0
DISCRIMINANT_TOLERANCE = 1e-12

DISPLAY_DECIMALS = 4


# =============================================================================
# Durand-Kerner iteration
# =============================================================================

DK_MAX_ITERATIONS = 100
DK_TOLERANCE = 1e-6

# Initial guesses sit on a slightly rotated, slightly widening circle so that
# none of them starts on the real axis or on a conjugate of another guess.
DK_ANGLE_OFFSET = 0.1
DK_RADIUS_SPREAD = 0.1


# =============================================================================
# Calculus helpers
# =============================================================================

DERIVATIVE_STEP = 1e-4
INTEGRATION_INTERVALS = 1000

LIMIT_STEPS: Tuple[float, ...] = (1e-1, 1e-2, 1e-3, 1e-4, 1e-5, 1e-6, 1e-7)
LIMIT_INFINITY_POINTS: Tuple[float, ...] = (1e2, 1e3, 1e4, 1e5, 1e6, 1e7, 1e8)
LIMIT_TOLERANCE = 1e-4

# Samples growing past this (and still growing) are read as a divergent limit
DIVERGENCE_THRESHOLD = 1e6


# =============================================================================
# Naming
# =============================================================================

POLYNOMIAL_TYPES: Dict[int, str] = {
    0: "constant",
    1: "linear",
    2: "quadratic",
    3: "cubic",
    4: "quartic",
    5: "quintic",
}


def polynomial_type(degree: int) -> str:
    """Human name of a polynomial degree ('quadratic', 'quartic', ...)."""
    return POLYNOMIAL_TYPES.get(degree, "polynomial")


# =============================================================================
# Expression evaluator
# =============================================================================

# Deepest nesting of parentheses / unary signs the parser accepts
EXPRESSION_MAX_DEPTH = 100
