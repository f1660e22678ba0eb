"""
expression - Tokenizer and recursive-descent evaluator for one-variable formulas

Supports:
    - Numbers: 2, 3.5, .25, 1e3, 2.5E-4 (a bare "2e" is 2 times e)
    - The free variable (any name: x, t, theta, ...)
    - Operators: + - * / ^ ** and unary minus, parentheses
    - Implicit multiplication: 2x, 2(x+1), (x+1)(x-1), 2pi, x sin(x)
    - Functions: sin cos tan asin acos atan sqrt exp log ln log10 abs pow
    - Constants: pi, e

Examples:
    >>> evaluate_expression("2x", "x", 3)
    6.0
    >>> f = compile_expression("x^2 + 1")
    >>> f(2)
    5.0

Names are recognised on the token stream, never by text substitution, so a
variable called 's' or 'e' cannot leak into 'sin' or 'exp'.
"""

import logging
import math
import re
from typing import Callable, Dict, List, NamedTuple, Tuple

from solver_config import EXPRESSION_MAX_DEPTH

logger = logging.getLogger(__name__)


class ExpressionError(ValueError):
    """Raised when an expression cannot be tokenized or parsed."""


# =============================================================================
# IEEE-754 style numerics
# =============================================================================
# Python raises where float arithmetic would return inf/nan; these wrappers
# give back the IEEE result instead.

def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _power(a: float, b: float) -> float:
    if a == 0 and b < 0:
        return math.inf
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0 and float(b).is_integer() and int(b) % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        return math.nan


def _sqrt(x: float) -> float:
    return math.nan if x < 0 else math.sqrt(x)


def _log(x: float) -> float:
    if x == 0:
        return -math.inf
    return math.nan if x < 0 else math.log(x)


def _log10(x: float) -> float:
    if x == 0:
        return -math.inf
    return math.nan if x < 0 else math.log10(x)


def _safe(fn: Callable[..., float]) -> Callable[..., float]:
    def wrapped(*args):
        try:
            return fn(*args)
        except OverflowError:
            return math.inf
        except ValueError:
            return math.nan
    wrapped.__name__ = fn.__name__
    return wrapped


# name -> (callable, arity)
FUNCTIONS: Dict[str, Tuple[Callable[..., float], int]] = {
    'sin': (_safe(math.sin), 1),
    'cos': (_safe(math.cos), 1),
    'tan': (_safe(math.tan), 1),
    'asin': (_safe(math.asin), 1),
    'acos': (_safe(math.acos), 1),
    'atan': (_safe(math.atan), 1),
    'sqrt': (_sqrt, 1),
    'exp': (_safe(math.exp), 1),
    'log': (_log, 1),
    'ln': (_log, 1),
    'log10': (_log10, 1),
    'abs': (abs, 1),
    'pow': (_power, 2),
}

CONSTANTS: Dict[str, float] = {
    'pi': math.pi,
    'e': math.e,
}


# =============================================================================
# Tokenizer
# =============================================================================

NUMBER = 'number'
IDENTIFIER = 'identifier'
OPERATOR = 'operator'
LPAREN = 'lparen'
RPAREN = 'rparen'
COMMA = 'comma'


class Token(NamedTuple):
    kind: str
    value: str
    position: int


_NUMBER_RE = re.compile(r'(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?', re.ASCII)
_NAME_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
_VARIABLE_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

_UNICODE_OPERATORS = {'−': '-', '×': '*', '·': '*', '÷': '/'}


def _known_names(variable: str) -> List[str]:
    """All recognised names, longest first; the variable wins ties."""
    names = set(FUNCTIONS) | set(CONSTANTS) | {variable}
    return sorted(names, key=lambda n: (-len(n), n != variable, n))


def _split_name(run: str, start: int, names: List[str]) -> List[Token]:
    """
    Split an alphanumeric run like '2pix' or 'xsin' into known names and
    numbers, longest match first.
    """
    tokens = []
    pos = 0
    while pos < len(run):
        for name in names:
            if run.startswith(name, pos):
                tokens.append(Token(IDENTIFIER, name, start + pos))
                pos += len(name)
                break
        else:
            number = _NUMBER_RE.match(run, pos)
            if number is None:
                raise ExpressionError(f"Unknown name in '{run}' at position {start + pos}")
            tokens.append(Token(NUMBER, number.group(), start + pos))
            pos = number.end()
    return tokens


def _ends_value(token: Token) -> bool:
    if token.kind in (NUMBER, RPAREN):
        return True
    return token.kind == IDENTIFIER and token.value not in FUNCTIONS


def _starts_value(token: Token) -> bool:
    return token.kind in (NUMBER, IDENTIFIER, LPAREN)


def insert_implicit_multiplication(tokens: List[Token]) -> List[Token]:
    """
    Make juxtaposition explicit: 2x -> 2*x, 2(x) -> 2*(x), )( -> )*(.

    A function name followed by '(' is a call and is left alone. Two numbers
    in a row ("2 3", "1.2.3") are not a product and raise ExpressionError.
    """
    result = []
    for token in tokens:
        if result and result[-1].kind == NUMBER and token.kind == NUMBER:
            raise ExpressionError(f"Unexpected number '{token.value}' at position {token.position}")
        if result and _ends_value(result[-1]) and _starts_value(token):
            result.append(Token(OPERATOR, '*', token.position))
        result.append(token)
    return result


def tokenize(text: str, variable: str = 'x') -> List[Token]:
    """
    Turn an expression into a typed token stream.

    Args:
        text: Expression text (e.g., "2x^2 + sin(x)")
        variable: Name of the free variable

    Returns:
        List of Token(kind, value, position) with implicit multiplication
        already made explicit

    Raises:
        ExpressionError: on characters or names that are not part of the grammar
    """
    if not _VARIABLE_RE.match(variable or ''):
        raise ExpressionError(f"Invalid variable name '{variable}'")

    names = _known_names(variable)
    tokens = []
    pos = 0

    while pos < len(text):
        ch = text[pos]
        ch = _UNICODE_OPERATORS.get(ch, ch)

        number = _NUMBER_RE.match(text, pos)
        name = _NAME_RE.match(text, pos)

        if ch.isspace():
            pos += 1
        elif number:
            tokens.append(Token(NUMBER, number.group(), pos))
            pos = number.end()
        elif name:
            run = name.group()
            tokens.extend(_split_name(run, pos, names))
            pos += len(run)
        elif text.startswith('**', pos):
            tokens.append(Token(OPERATOR, '^', pos))
            pos += 2
        elif ch in '+-*/^':
            tokens.append(Token(OPERATOR, ch, pos))
            pos += 1
        elif ch == '(':
            tokens.append(Token(LPAREN, ch, pos))
            pos += 1
        elif ch == ')':
            tokens.append(Token(RPAREN, ch, pos))
            pos += 1
        elif ch == ',':
            tokens.append(Token(COMMA, ch, pos))
            pos += 1
        else:
            raise ExpressionError(f"Unexpected character '{text[pos]}' at position {pos}")

    return insert_implicit_multiplication(tokens)


# =============================================================================
# Syntax tree
# =============================================================================

class Node:
    def evaluate(self, value: float) -> float:
        raise NotImplementedError


class NumberNode(Node):
    def __init__(self, number: float):
        self.number = number

    def evaluate(self, value):
        return self.number

    def __repr__(self):
        return f"Number({self.number})"


class VariableNode(Node):
    def __init__(self, name: str):
        self.name = name

    def evaluate(self, value):
        return value

    def __repr__(self):
        return f"Variable('{self.name}')"


class UnaryNode(Node):
    def __init__(self, operator: str, operand: Node):
        self.operator = operator
        self.operand = operand

    def evaluate(self, value):
        result = self.operand.evaluate(value)
        return -result if self.operator == '-' else result

    def __repr__(self):
        return f"Unary({self.operator!r}, {self.operand})"


class BinaryNode(Node):
    def __init__(self, operator: str, left: Node, right: Node):
        self.operator = operator
        self.left = left
        self.right = right

    def evaluate(self, value):
        a = self.left.evaluate(value)
        b = self.right.evaluate(value)

        if self.operator == '+':
            return a + b
        if self.operator == '-':
            return a - b
        if self.operator == '*':
            return a * b
        if self.operator == '/':
            return _divide(a, b)
        return _power(a, b)

    def __repr__(self):
        return f"Binary({self.operator!r}, {self.left}, {self.right})"


class CallNode(Node):
    def __init__(self, name: str, args: List[Node]):
        self.name = name
        self.args = args
        self.function = FUNCTIONS[name][0]

    def evaluate(self, value):
        return self.function(*(arg.evaluate(value) for arg in self.args))

    def __repr__(self):
        return f"Call({self.name!r}, {self.args})"


# =============================================================================
# Recursive-descent parser
# =============================================================================

class ExpressionParser:
    """
    Grammar (lowest precedence first):

        expr    := term (('+' | '-') term)*
        term    := unary (('*' | '/') unary)*
        unary   := ('+' | '-') unary | power
        power   := primary ('^' unary)?          right associative
        primary := NUMBER | variable | constant
                 | function '(' expr (',' expr)* ')'
                 | '(' expr ')'

    so -x^2 is -(x^2) and 2^-1 is 0.5.
    Nesting deeper than EXPRESSION_MAX_DEPTH raises ExpressionError.
    """

    def __init__(self, tokens: List[Token], variable: str):
        self.tokens = tokens
        self.variable = variable
        self.pos = 0
        self.depth = 0

    def parse(self) -> Node:
        if not self.tokens:
            raise ExpressionError("Empty expression")
        node = self._expr()
        if self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            raise ExpressionError(f"Unexpected '{token.value}' at position {token.position}")
        return node

    def _peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise ExpressionError("Unexpected end of expression")
        self.pos += 1
        return token

    def _expect(self, kind: str) -> Token:
        token = self._advance()
        if token.kind != kind:
            raise ExpressionError(f"Expected {kind}, got '{token.value}' at position {token.position}")
        return token

    def _at_operator(self, *operators: str) -> bool:
        token = self._peek()
        return token is not None and token.kind == OPERATOR and token.value in operators

    def _expr(self) -> Node:
        node = self._term()
        while self._at_operator('+', '-'):
            op = self._advance().value
            node = BinaryNode(op, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while self._at_operator('*', '/'):
            op = self._advance().value
            node = BinaryNode(op, node, self._unary())
        return node

    def _unary(self) -> Node:
        self.depth += 1
        if self.depth > EXPRESSION_MAX_DEPTH:
            raise ExpressionError(f"Expression nested deeper than {EXPRESSION_MAX_DEPTH} levels")
        try:
            if self._at_operator('+', '-'):
                op = self._advance().value
                return UnaryNode(op, self._unary())
            return self._power()
        finally:
            self.depth -= 1

    def _power(self) -> Node:
        base = self._primary()
        if self._at_operator('^'):
            self._advance()
            return BinaryNode('^', base, self._unary())
        return base

    def _primary(self) -> Node:
        token = self._advance()

        if token.kind == NUMBER:
            return NumberNode(float(token.value))

        if token.kind == LPAREN:
            node = self._expr()
            self._expect(RPAREN)
            return node

        if token.kind == IDENTIFIER:
            if token.value == self.variable:
                return VariableNode(token.value)
            if token.value in FUNCTIONS:
                return self._call(token)
            if token.value in CONSTANTS:
                return NumberNode(CONSTANTS[token.value])

        raise ExpressionError(f"Unexpected '{token.value}' at position {token.position}")

    def _call(self, name: Token) -> Node:
        if not (self._peek() and self._peek().kind == LPAREN):
            raise ExpressionError(f"Function '{name.value}' needs parentheses")
        self._advance()

        args = [self._expr()]
        while self._peek() and self._peek().kind == COMMA:
            self._advance()
            args.append(self._expr())
        self._expect(RPAREN)

        arity = FUNCTIONS[name.value][1]
        if len(args) != arity:
            raise ExpressionError(f"Function '{name.value}' takes {arity} argument(s), got {len(args)}")
        return CallNode(name.value, args)


# =============================================================================
# Public interface
# =============================================================================

class CompiledExpression:
    """
    A parsed expression that can be evaluated repeatedly.

    Calling it never raises: arithmetic problems come back as nan or +-inf.
    """

    def __init__(self, text: str, variable: str, tree: Node):
        self.text = text
        self.variable = variable
        self.tree = tree

    def __call__(self, value: float) -> float:
        try:
            return float(self.tree.evaluate(float(value)))
        except (ArithmeticError, ValueError, TypeError, RecursionError) as e:
            logger.debug(f"Evaluation of '{self.text}' at {value} failed: {e}")
            return math.nan

    def __repr__(self):
        return f"CompiledExpression('{self.text}', variable='{self.variable}')"


def compile_expression(text: str, variable: str = 'x') -> CompiledExpression:
    """
    Parse an expression once for repeated evaluation.

    Raises:
        ExpressionError: if the text is not a valid expression
    """
    tokens = tokenize(text, variable)
    tree = ExpressionParser(tokens, variable).parse()
    return CompiledExpression(text, variable, tree)


def evaluate_expression(expr: str, var_name: str, value: float) -> float:
    """
    Evaluate an expression at a point.

    Args:
        expr: Expression text (e.g., "sin(x) / x")
        var_name: Name of the free variable
        value: Value substituted for the variable

    Returns:
        The result as a float; nan when the expression cannot be parsed

    Examples:
        >>> evaluate_expression("2x", "x", 3)
        6.0
        >>> evaluate_expression("exp(e)", "e", 0)
        1.0
    """
    try:
        compiled = compile_expression(expr, var_name)
    except ExpressionError as e:
        logger.debug(f"Could not parse '{expr}': {e}")
        return math.nan
    return compiled(value)
