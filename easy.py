"""
polyroots.easy - User-friendly interface for polynomial equations

No coefficient bookkeeping required. Just use strings.

Examples:
    >>> from easy import solve_equation, Equation
    >>> solve_equation("x^2 - 5x + 6 = 0")['real_roots']
    [2.0, 3.0]
    >>> [round(r, 6) for r in Equation("x^4 - 5x^2 + 4 = 0").real_roots()]
    [-2.0, -1.0, 1.0, 2.0]
"""

import logging
import math
from typing import Any, Dict, List, Sequence

from sympy import Float, Integer, Poly, Symbol, E, pi, latex
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations,
    implicit_multiplication_application, convert_xor
)

from complexmath import Complex, format_complex
from expression import evaluate_expression
from latexparse import InvalidEquationFormat, normalize_latex, parse_latex_equation
from polyroots import (
    find_polynomial_roots_complex, max_residual, separate_roots,
    solution_method, strip_leading_zeros,
)
from solver_config import COEFFICIENT_TOLERANCE, polynomial_type

logger = logging.getLogger(__name__)


# =============================================================================
# String Parsing Engine
# =============================================================================

class EquationParser:
    """
    Parse human-readable polynomial equations into coefficient lists.

    Supports:
        - Expanded form: 3x^2 - 2x + 1 = 0, x^{3} \\cdot 2 - 1 = 0
        - Terms on both sides: x^2 = 5x - 6
        - Products and powers: (x - 1)(x + 2) = 0, (x + 1)^3 = 8
        - Missing '= 0': "x^2 - 1" is read as "x^2 - 1 = 0"

    Expanded equations with a zero right-hand side go through the linear
    term scanner; everything else is expanded with SymPy first.
    """

    # Standard transformations for parsing
    TRANSFORMATIONS = standard_transformations + (
        implicit_multiplication_application,
        convert_xor,
    )

    def parse(self, equation: str, var_name: str = 'x') -> dict:
        """
        Parse an equation string like "x^2 - 5x + 6 = 0".

        Args:
            equation: Equation as string
            var_name: Name of the unknown (default: 'x')

        Returns:
            dict with 'coefficients', 'degree', 'type', 'expr', 'var', 'original'

        Raises:
            ValueError: if the equation is not a polynomial in var_name
        """
        var = Symbol(var_name)
        normalized = normalize_latex(equation)

        if normalized.count('=') > 1:
            raise ValueError(f"Could not parse '{equation}': more than one '='")
        if '=' not in normalized:
            normalized += '=0'

        lhs, rhs = normalized.split('=')
        coefficients = None

        if rhs.strip('+-0.') == '':
            try:
                coefficients = parse_latex_equation(normalized, var_name)['coefficients']
            except InvalidEquationFormat as e:
                logger.debug(f"Term scanner rejected '{equation}' ({e}), expanding with SymPy")

        if coefficients is None:
            coefficients = self._expand(lhs, rhs, var, equation)

        coefficients = strip_leading_zeros(coefficients) or [0.0]
        degree = len(coefficients) - 1

        return {
            'coefficients': coefficients,
            'degree': degree,
            'type': polynomial_type(degree),
            'expr': to_sympy(coefficients, var_name),
            'var': var,
            'original': equation,
        }

    def _expand(self, lhs: str, rhs: str, var: Symbol, original: str) -> List[float]:
        """Move everything to the left, expand, and read off the coefficients."""
        local_dict = {str(var): var, 'pi': pi, 'e': E}

        try:
            left = parse_expr(lhs or '0', local_dict=local_dict,
                              transformations=self.TRANSFORMATIONS)
            right = parse_expr(rhs or '0', local_dict=local_dict,
                               transformations=self.TRANSFORMATIONS)
            poly = Poly((left - right).expand(), var)
            return [float(c) for c in poly.all_coeffs()]
        except Exception as e:
            raise ValueError(f"Could not parse '{original}': {e}")


# Global parser instance
_parser = EquationParser()


# =============================================================================
# SymPy interop
# =============================================================================

def _sympy_number(c: float):
    if float(c).is_integer():
        return Integer(int(c))
    return Float(c)


def to_sympy(coefficients: Sequence[float], var_name: str = 'x'):
    """Coefficients (highest power first) as a SymPy expression."""
    var = Symbol(var_name)
    return Poly([_sympy_number(c) for c in coefficients], var).as_expr()


# =============================================================================
# One-Liner Convenience Functions
# =============================================================================

def solve_coefficients(coefficients: Sequence[float], var: str = 'x') -> Dict[str, Any]:
    """
    Find every root of a polynomial given by its coefficients.

    Args:
        coefficients: Real coefficients, index 0 = highest power
        var: Variable name used in the rendered polynomial (default: 'x')

    Returns:
        dict with keys:
            - 'degree', 'type': effective degree after dropping leading zeros
            - 'coefficients': the coefficients actually solved
            - 'method': 'closed-form', 'durand-kerner' or 'none'
            - 'roots': all complex roots (Complex)
            - 'real_roots': real roots, ascending
            - 'complex_roots': one root of each conjugate pair (im > 0)
            - 'formatted': display strings of the roots
            - 'poly', 'poly_expr', 'latex': the polynomial as text / SymPy / LaTeX
            - 'residual': largest |p(root)|
            - 'verified': whether the residual is within tolerance

    Examples:
        >>> solve_coefficients([1, 0, 1])['formatted']
        ['i', '-i']
    """
    coeffs = strip_leading_zeros(coefficients)
    if not coeffs:
        raise ValueError("The zero polynomial has no finite set of roots")

    degree = len(coeffs) - 1
    roots = find_polynomial_roots_complex(coeffs)
    separated = separate_roots(roots)
    residual = max_residual(coeffs, roots)
    scale = max(1.0, max(abs(c) for c in coeffs))

    poly_expr = to_sympy(coeffs, var)

    return {
        'degree': degree,
        'type': polynomial_type(degree),
        'coefficients': coeffs,
        'method': solution_method(coeffs),
        'roots': roots,
        'real_roots': separated['real_roots'],
        'complex_roots': separated['complex_roots'],
        'formatted': [format_complex(z) for z in roots],
        'poly': str(poly_expr),
        'poly_expr': poly_expr,
        'latex': f"{latex(poly_expr)} = 0",
        'residual': residual,
        'verified': math.isfinite(residual) and residual <= 1e-6 * scale,
    }


def solve_equation(equation: str, var: str = 'x') -> Dict[str, Any]:
    """
    Solve a polynomial equation written as a string.

    Args:
        equation: Equation (e.g., "x^2 - 5x + 6 = 0", "x^{3} = 8", "(x-1)(x+2) = 0")
        var: Unknown (default: 'x')

    Returns:
        The solve_coefficients dict plus 'equation'

    Examples:
        >>> solve_equation("x^2 - 5x + 6 = 0")['real_roots']
        [2.0, 3.0]
        >>> solve_equation("x^2 + 1 = 0")['formatted']
        ['i', '-i']
    """
    parsed = _parser.parse(equation, var)
    result = solve_coefficients(parsed['coefficients'], var)
    result['equation'] = equation
    return result


def evaluate(expr: str, value: float, var: str = 'x') -> float:
    """Evaluate an expression at a point (nan if it cannot be evaluated)."""
    return evaluate_expression(expr, var, value)


# =============================================================================
# Equation Class (Object-Oriented Interface)
# =============================================================================

class Equation:
    """
    User-friendly polynomial equation class.

    Examples:
        >>> eq = Equation("x^3 - 6x^2 + 11x - 6 = 0")
        >>> eq.degree()
        3
        >>> [round(r, 6) for r in eq.real_roots()]
        [1.0, 2.0, 3.0]
    """

    def __init__(self, equation: str, var: str = 'x'):
        """
        Create an equation from a string.

        Args:
            equation: Polynomial equation (e.g., "x^2 + 1 = 0")
            var: Unknown (default: 'x')
        """
        self.equation = equation
        self.var = var
        self._result = None

    def _ensure_solved(self):
        if self._result is None:
            self._result = solve_equation(self.equation, self.var)

    def solve(self) -> List[Complex]:
        """Return all complex roots."""
        self._ensure_solved()
        return self._result['roots']

    def roots(self) -> List[str]:
        """Return the roots as display strings."""
        self._ensure_solved()
        return self._result['formatted']

    def real_roots(self) -> List[float]:
        self._ensure_solved()
        return [0.0 if abs(r) < COEFFICIENT_TOLERANCE else r
                for r in self._result['real_roots']]

    def complex_roots(self) -> List[Complex]:
        self._ensure_solved()
        return self._result['complex_roots']

    def degree(self) -> int:
        self._ensure_solved()
        return self._result['degree']

    def type(self) -> str:
        self._ensure_solved()
        return self._result['type']

    def coefficients(self) -> List[float]:
        self._ensure_solved()
        return self._result['coefficients']

    def latex(self) -> str:
        self._ensure_solved()
        return self._result['latex']

    def explain(self) -> str:
        """Return human-readable explanation."""
        self._ensure_solved()
        r = self._result

        real = ', '.join(f"{x:.4f}" for x in r['real_roots']) or 'none'
        pairs = ', '.join(f"{format_complex(z)} (and conjugate)"
                          for z in r['complex_roots']) or 'none'

        lines = [
            "╔══════════════════════════════════════════════════════════╗",
            f"║  Equation: {self.equation:<47} ║",
            "╠══════════════════════════════════════════════════════════╣",
            f"║  Type: {r['type']:<51} ║",
            f"║  Degree: {r['degree']:<49} ║",
            f"║  Polynomial: {r['poly']:<45} ║",
            f"║  Method: {r['method']:<49} ║",
            "╠══════════════════════════════════════════════════════════╣",
            "║  Roots:                                                  ║",
        ]

        for root in r['formatted']:
            lines.append(f"║    • {root:<52} ║")

        lines.extend([
            "╠══════════════════════════════════════════════════════════╣",
            f"║  Real roots: {real:<45} ║",
            f"║  Complex roots: {pairs:<42} ║",
            "╠══════════════════════════════════════════════════════════╣",
            f"║  Verified: {'✓ Yes' if r['verified'] else '✗ No':<47} ║",
            "╚══════════════════════════════════════════════════════════╝",
        ])

        return '\n'.join(lines)

    def __repr__(self):
        return f"Equation('{self.equation}')"


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    print("=" * 60)
    print("polyroots - Polynomial Root Finder")
    print("=" * 60)

    for text in ["x^2 - 5x + 6 = 0",
                 "x^2 + 1 = 0",
                 "x^3 - 6x^2 + 11x - 6 = 0",
                 "x^4 - 5x^2 + 4 = 0",
                 "x^5 - 1 = 0"]:
        print()
        print(Equation(text).explain())

    print("\nsin(x)/x at x = 0.001:", evaluate("sin(x)/x", 0.001))
