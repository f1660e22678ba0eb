"""
latexparse - Read polynomial equations written in plain or LaTeX notation

    >>> parse_latex_equation(r"x^{2} - 5x + 6 = 0")
    {'degree': 2, 'coefficients': [1.0, -5.0, 6.0], 'type': 'quadratic'}
    >>> parse_polynomial("2x^3 - x + 4")
    [2.0, 0.0, -1.0, 4.0]
    >>> format_polynomial([1, -3, 2])
    'x^2 - 3x + 2'

Only the left-hand side of an equation is read; the right-hand side is taken
to be 0 (move every term to the left before calling).
"""

import logging
import re
from typing import Dict, List, Optional, Sequence

import numpy as np

from solver_config import COEFFICIENT_TOLERANCE, polynomial_type

logger = logging.getLogger(__name__)


class InvalidEquationFormat(ValueError):
    """Raised when an equation string cannot be read as a polynomial equation."""


# =============================================================================
# Normalization
# =============================================================================

_LATEX_REPLACEMENTS = [
    (re.compile(r'\\cdot'), '*'),
    (re.compile(r'\\times'), '*'),
    (re.compile(r'\\left|\\right'), ''),
    (re.compile(r'\\[,;:! ]'), ''),
    (re.compile(r'\^\{(\d+)\}'), r'^\1'),
    (re.compile(r'[{}]'), ''),
]


def normalize_latex(latex: str) -> str:
    """
    Reduce LaTeX markup to the plain term syntax.

    Whitespace is dropped, \\cdot and \\times become '*', x^{n} becomes x^n
    and \\left / \\right / spacing commands / stray braces are removed.
    """
    text = re.sub(r'\s+', '', latex).replace('−', '-')
    for pattern, replacement in _LATEX_REPLACEMENTS:
        text = pattern.sub(replacement, text)
    return text


# =============================================================================
# Term scanning
# =============================================================================

_TERM_SPLIT = re.compile(r'([+-]*)([^+-]+)')


def _term_pattern(variable: str):
    var = re.escape(variable)
    return re.compile(
        r'(?P<coef>\d+(?:\.\d*)?|\.\d+)?'
        r'(?P<star>\*)?'
        rf'(?:(?P<var>{var})(?:\^(?P<power>\d+))?)?'
    )


def collect_terms(text: str, variable: str = 'x') -> Dict[int, float]:
    """
    Read a sum of terms in one pass into a sparse {power: coefficient} map.

    Each term is one of coef*x^n, coef x^n, x^n, coef*x, x or a bare
    constant, with an optional sign run in front ('--3' is +3). Repeated
    powers are added together.

    Raises:
        InvalidEquationFormat: if a term is not of that shape
    """
    pattern = _term_pattern(variable)
    terms: Dict[int, float] = {}
    pos = 0

    for match in _TERM_SPLIT.finditer(text):
        if match.start() != pos:
            break
        pos = match.end()

        signs, body = match.group(1), match.group(2)
        sign = -1.0 if signs.count('-') % 2 else 1.0

        term = pattern.fullmatch(body)
        if term is None or not (term.group('coef') or term.group('var')):
            raise InvalidEquationFormat(f"Could not read term '{signs}{body}'")
        if term.group('star') and not (term.group('coef') and term.group('var')):
            raise InvalidEquationFormat(f"Could not read term '{signs}{body}'")

        coef = float(term.group('coef')) if term.group('coef') else 1.0
        if term.group('var'):
            power = int(term.group('power')) if term.group('power') else 1
        else:
            power = 0

        terms[power] = terms.get(power, 0.0) + sign * coef

    if pos != len(text):
        raise InvalidEquationFormat(f"Could not read '{text[pos:]}'")
    if not terms:
        raise InvalidEquationFormat("No terms found")

    return terms


def to_dense(terms: Dict[int, float]) -> List[float]:
    """Sparse {power: coefficient} map to a dense list, highest power first."""
    degree = max(terms)
    coefficients = [0.0] * (degree + 1)
    for power, coef in terms.items():
        coefficients[degree - power] = coef
    return coefficients


# =============================================================================
# Public parsers
# =============================================================================

def parse_latex_equation(latex: str, variable: str = 'x') -> Dict:
    """
    Parse a polynomial equation such as "3x^{2} + 2x \\cdot 1 - 5 = 0".

    Args:
        latex: Equation in LaTeX or plain notation, with exactly one '='
        variable: Name of the unknown (default: 'x')

    Returns:
        dict with keys:
            - 'degree': highest power of the variable that appears
            - 'coefficients': dense list, index 0 = highest power
            - 'type': 'linear', 'quadratic', ... 'quintic' or 'polynomial'

    Raises:
        InvalidEquationFormat: if there is not exactly one '=' or a term
            cannot be read
    """
    equation = normalize_latex(latex)

    parts = equation.split('=')
    if len(parts) != 2:
        raise InvalidEquationFormat("Equation must contain exactly one = sign")

    lhs, rhs = parts
    if not lhs:
        raise InvalidEquationFormat("Left-hand side of the equation is empty")
    if rhs and rhs.strip('+-0.') != '':
        logger.warning(f"Ignoring right-hand side '{rhs}'; the equation is read as lhs = 0")

    coefficients = to_dense(collect_terms(lhs, variable))
    degree = len(coefficients) - 1

    return {
        'degree': degree,
        'coefficients': coefficients,
        'type': polynomial_type(degree),
    }


def parse_polynomial(text: Optional[str], variable: str = 'x') -> Optional[List[float]]:
    """
    Parse a polynomial like "x^3 - 2x + 1" into dense coefficients.

    Args:
        text: Polynomial text (case-insensitive, spaces ignored)
        variable: Name of the variable (default: 'x')

    Returns:
        Coefficients with index 0 = highest power and leading zeros trimmed,
        or None for empty or unreadable input
    """
    if not text or not text.strip():
        return None

    text = re.sub(r'\s+', '', text.lower()).replace('−', '-')
    variable = variable.lower()

    if variable not in text:
        try:
            return [float(text)]
        except ValueError:
            return None

    try:
        coefficients = to_dense(collect_terms(text, variable))
    except InvalidEquationFormat as e:
        logger.debug(f"Could not parse polynomial '{text}': {e}")
        return None

    while len(coefficients) > 1 and coefficients[0] == 0:
        coefficients.pop(0)
    return coefficients


# =============================================================================
# Formatting
# =============================================================================

def _format_number(value: float) -> str:
    # shortest digits that read back to the same float, never in exponent form
    return np.format_float_positional(float(value), trim='-')


def format_polynomial(coefficients: Sequence[float], variable: str = 'x') -> str:
    """
    Render coefficients as text that parse_polynomial reads back.

    Coefficients below COEFFICIENT_TOLERANCE are skipped and unit
    coefficients are implied, so [1, 0, -2.5, 1] becomes 'x^3 - 2.5x + 1'.
    """
    if not coefficients:
        return '0'

    degree = len(coefficients) - 1
    terms = []

    for i, coef in enumerate(coefficients):
        power = degree - i
        if abs(coef) < COEFFICIENT_TOLERANCE:
            continue

        magnitude = abs(coef)
        if power > 0 and abs(magnitude - 1) < COEFFICIENT_TOLERANCE:
            term = ''
        else:
            term = _format_number(magnitude)

        if power == 1:
            term += variable
        elif power > 1:
            term += f'{variable}^{power}'

        sign = '-' if coef < 0 else '+'
        if not terms:
            terms.append(term if sign == '+' else f'-{term}')
        else:
            terms.append(f'{sign} {term}')

    if not terms:
        return '0'
    return ' '.join(terms)
