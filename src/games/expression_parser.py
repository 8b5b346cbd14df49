"""
Reader for fully parenthesized Numbers Game expressions.

Reads text in the form `render()` produces, e.g. `( ( 1 + 5 ) * ( 1 + 3 ) )`,
back into an Expression tree. Every operation must carry its own parentheses;
there is no operator precedence.
"""

import re
from collections import Counter
from typing import Dict, List, Optional, Tuple

from .expression import OPS, PLACEHOLDER, Expression, InvariantViolation


class ExpressionError(ValueError):
    """Raised when expression text cannot be read."""
    pass


_TOKEN = re.compile(r'\s*(\d+|\[Anything\]|[()+\-*/])')


class ExpressionParser:
    """
    Parses and checks expressions submitted as answers.

    Grammar:
        expr := ['-'] NUMBER | '[Anything]' | '(' expr OP expr ')'
    """

    def tokenize(self, text: str) -> List[str]:
        tokens = []
        pos = 0
        text = text.rstrip()
        while pos < len(text):
            match = _TOKEN.match(text, pos)
            if not match:
                raise ExpressionError(f"Unexpected character: {text[pos:].lstrip()[:1]!r}")
            tokens.append(match.group(1))
            pos = match.end()
        return tokens

    def parse(self, text: str) -> Expression:
        """
        Read `text` into an Expression.

        Raises:
            ExpressionError: On empty or malformed text.
        """
        if not text or not text.strip():
            raise ExpressionError("Empty expression")

        tokens = self.tokenize(text)
        expr, pos = self._parse_expr(tokens, 0)
        if pos != len(tokens):
            raise ExpressionError(f"Unexpected token after end of expression: {tokens[pos]!r}")
        return expr

    def _parse_expr(self, tokens: List[str], pos: int) -> Tuple[Expression, int]:
        if pos >= len(tokens):
            raise ExpressionError("Unexpected end of expression")

        token = tokens[pos]
        if token.isdigit():
            return Expression.literal(int(token)), pos + 1
        # Negative literal; '-' in operand position is never an operator
        if token == '-' and pos + 1 < len(tokens) and tokens[pos + 1].isdigit():
            return Expression.literal(-int(tokens[pos + 1])), pos + 2
        if token == PLACEHOLDER:
            return Expression.empty(), pos + 1
        if token != '(':
            raise ExpressionError(f"Unexpected token: {token!r}")

        left, pos = self._parse_expr(tokens, pos + 1)
        if pos >= len(tokens) or tokens[pos] not in OPS:
            raise ExpressionError("Expected an operator inside parentheses")
        op = tokens[pos]
        right, pos = self._parse_expr(tokens, pos + 1)
        if pos >= len(tokens) or tokens[pos] != ')':
            raise ExpressionError("Unmatched opening parenthesis")
        return Expression.operation(left, op, right), pos + 1

    def validate_numbers(self, expr: Expression, available: List[int]) -> Tuple[bool, Optional[str]]:
        """
        Check that `expr` only uses available numbers, each at most as often
        as it is available.

        Returns:
            Tuple of (is_valid, error_message or None)
        """
        available_counter = Counter(available)
        used_counter = Counter(expr.literals())

        for num, count in used_counter.items():
            if num not in available_counter:
                return False, f"Number **{num}** is not available"
            if count > available_counter[num]:
                return False, f"Number **{num}** used more times than available"

        return True, None

    def check(self, text: str, available_numbers: List[int], target: int) -> Dict:
        """
        Read, validate and evaluate an answer.

        Returns:
            Dictionary with:
            - valid: bool
            - result: int or None
            - error: str or None
            - numbers_used: list of numbers used
            - exact: whether result equals target
        """
        result = {
            'valid': False,
            'result': None,
            'error': None,
            'numbers_used': [],
            'exact': False,
        }

        try:
            expr = self.parse(text)
        except ExpressionError as e:
            result['error'] = str(e)
            return result

        result['numbers_used'] = expr.literals()

        is_valid, error = self.validate_numbers(expr, available_numbers)
        if not is_valid:
            result['error'] = error
            return result

        try:
            value = expr.evaluate(strict=True)
        except InvariantViolation as e:
            result['error'] = str(e)
            return result

        result['valid'] = True
        result['result'] = value
        result['exact'] = value == target
        return result
