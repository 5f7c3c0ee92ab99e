"""Quantity expressions over the trip length.

Supported forms (``d`` is the number of trip days):
  d, 2d, d+1, d-1, 2d+1, d*2, d/2 (rounded up), (d+1)/2

Grammar, lowest precedence first:
  expression := term (('+' | '-') term)*
  term       := factor (('*' | '/') factor)*
  factor     := '(' expression ')' | NUMBER 'd' | 'd' | NUMBER
"""
from __future__ import annotations
import re
from typing import Dict, List, Any

from packy.utilities.constants import EXPRESSION_DESCRIPTIONS

__all__ = ['ExpressionError', 'ExpressionParser', 'EXPRESSION_PARSER',
           'evaluate_expression', 'validate_expression']

_TOKEN_RE = re.compile(r'\d+d|\d+|d|[+\-*/()]')
_WHITESPACE_RE = re.compile(r'\s+')
_NUMBER_RE = re.compile(r'^\d+$')


class ExpressionError(ValueError):
    """Raised when a quantity expression cannot be parsed or evaluated."""


def _ceil_div(left: int, right: int) -> int:
    if right == 0:
        raise ExpressionError('Division by zero')
    return -(-left // right)


class _Evaluation:
    """Recursive descent over one token list; lives for a single evaluate() call."""

    def __init__(self, tokens: List[str], days: int):
        self.tokens = tokens
        self.days = days
        self.pos = 0

    def _peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def run(self) -> int:
        result = self.expression()
        if self.pos != len(self.tokens):
            raise ExpressionError(f'Unexpected token at position {self.pos}')
        return result

    def expression(self) -> int:
        left = self.term()
        while self._peek() in ('+', '-'):
            op = self.tokens[self.pos]
            self.pos += 1
            right = self.term()
            left = left + right if op == '+' else left - right
        return left

    def term(self) -> int:
        left = self.factor()
        while self._peek() in ('*', '/'):
            op = self.tokens[self.pos]
            self.pos += 1
            right = self.factor()
            left = left * right if op == '*' else _ceil_div(left, right)
        return left

    def factor(self) -> int:
        token = self._peek()
        if token is None:
            raise ExpressionError('Unexpected end of expression')
        self.pos += 1

        if token == '(':
            result = self.expression()
            if self._peek() != ')':
                raise ExpressionError('Missing closing parenthesis')
            self.pos += 1
            return result
        if token == 'd':
            return self.days
        if token.endswith('d'):
            # coefficient form, e.g. "2d"
            return int(token[:-1]) * self.days
        if token.isdigit():
            return int(token)
        raise ExpressionError(f"Unexpected token '{token}' at position {self.pos - 1}")


class ExpressionParser:
    """Stateless evaluator for day-count expressions."""

    def tokenize(self, expr: str) -> List[str]:
        '''Splits an expression into tokens; the tokens must rebuild the normalized input exactly.'''
        normalized = _WHITESPACE_RE.sub('', expr).lower()
        tokens = _TOKEN_RE.findall(normalized)
        if not tokens or ''.join(tokens) != normalized:
            raise ExpressionError(f'Invalid expression: {expr}')
        return tokens

    def evaluate(self, expr: Any, days: int) -> int:
        '''Evaluates expr for the given number of days; the result is at least 1.'''
        if not expr or not isinstance(expr, str):
            return 1

        trimmed = expr.strip()
        if _NUMBER_RE.match(trimmed):
            return int(trimmed)

        tokens = self.tokenize(trimmed)
        result = _Evaluation(tokens, days).run()
        return max(1, round(result))

    def validate(self, expr: Any) -> Dict[str, Any]:
        '''Checks syntax by evaluating with a placeholder day count; never raises.'''
        try:
            self.evaluate(expr, 1)
            return {'valid': True}
        except ExpressionError as e:
            return {'valid': False, 'error': str(e)}

    def describe(self, expr: Any) -> str:
        if not expr:
            return 'single item'
        normalized = _WHITESPACE_RE.sub('', str(expr)).lower()
        return EXPRESSION_DESCRIPTIONS.get(normalized, f'calculated ({expr})')

    def get_example(self, expr: str, days: int) -> str:
        """Example line for display, e.g. '2d+1 = 11 (for 5 days)'."""
        try:
            result = self.evaluate(expr, days)
        except ExpressionError:
            return f'{expr} = invalid'
        return f'{expr} = {result} (for {days} days)'


EXPRESSION_PARSER = ExpressionParser()


def evaluate_expression(expr: Any, days: int) -> int:
    return EXPRESSION_PARSER.evaluate(expr, days)


def validate_expression(expr: Any) -> Dict[str, Any]:
    return EXPRESSION_PARSER.validate(expr)
