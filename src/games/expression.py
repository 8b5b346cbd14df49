"""
Expression trees for the Numbers Game.

A tree is one of three shapes: an empty placeholder, an integer literal, or a
binary operation owning two subtrees. Trees are immutable once built.
"""

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional


class InvariantViolation(AssertionError):
    """Raised when a tree breaks the rules the search builds it under."""
    pass


class ExpressionKind(Enum):
    """Shape of an expression node."""
    EMPTY = "empty"
    LITERAL = "literal"
    OPERATION = "operation"


OPS = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': operator.floordiv,  # only ever applied to exact divisions
}

PLACEHOLDER = "[Anything]"


@dataclass(frozen=True)
class Expression:
    """
    A node of an arithmetic expression tree.

    Build nodes with `empty()`, `literal()` and `operation()` rather than the
    constructor.
    """
    kind: ExpressionKind
    value: Optional[int] = None
    op: Optional[str] = None
    left: Optional['Expression'] = None
    right: Optional['Expression'] = None

    @classmethod
    def empty(cls) -> 'Expression':
        """Placeholder standing for any value; evaluates to 0."""
        return cls(ExpressionKind.EMPTY)

    @classmethod
    def literal(cls, value: int) -> 'Expression':
        return cls(ExpressionKind.LITERAL, value=value)

    @classmethod
    def operation(cls, left: 'Expression', op: str, right: 'Expression') -> 'Expression':
        if op not in OPS:
            raise ValueError(f"Operator not allowed: {op!r}")
        return cls(ExpressionKind.OPERATION, op=op, left=left, right=right)

    @property
    def is_empty(self) -> bool:
        return self.kind is ExpressionKind.EMPTY

    @property
    def is_literal(self) -> bool:
        return self.kind is ExpressionKind.LITERAL

    @property
    def is_operation(self) -> bool:
        return self.kind is ExpressionKind.OPERATION

    def evaluate(self, strict: bool = False) -> int:
        """
        Compute the integer value of the tree.

        Args:
            strict: If True, an empty placeholder is an error instead of 0.

        Raises:
            InvariantViolation: On a zero or inexact divisor, or on a
                placeholder when strict is set.
        """
        if self.kind is ExpressionKind.LITERAL:
            return self.value
        if self.kind is ExpressionKind.EMPTY:
            if strict:
                raise InvariantViolation("Placeholder has no concrete value")
            return 0

        left = self.left.evaluate(strict)
        right = self.right.evaluate(strict)
        if self.op == '/':
            if right == 0:
                raise InvariantViolation(f"Division by zero in {self.render()}")
            if left % right != 0:
                raise InvariantViolation(f"Inexact division in {self.render()}")
        return OPS[self.op](left, right)

    def render(self) -> str:
        """Fully parenthesized infix text, e.g. `( ( 1 + 5 ) * 4 )`."""
        if self.kind is ExpressionKind.LITERAL:
            return str(self.value)
        if self.kind is ExpressionKind.EMPTY:
            return PLACEHOLDER
        return f"( {self.left.render()} {self.op} {self.right.render()} )"

    def nodes(self) -> Iterator['Expression']:
        """Yield every node of the tree, parents before children."""
        yield self
        if self.kind is ExpressionKind.OPERATION:
            yield from self.left.nodes()
            yield from self.right.nodes()

    def literals(self) -> List[int]:
        """Literal values in left-to-right order."""
        return [node.value for node in self.nodes() if node.is_literal]

    def has_placeholder(self) -> bool:
        return any(node.is_empty for node in self.nodes())

    def __str__(self) -> str:
        return self.render()
