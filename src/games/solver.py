import logging
from typing import List, Optional, Sequence

from .expression import Expression

logger = logging.getLogger(__name__)


class CountdownSolver:
    """
    Solver for the Numbers Game.

    Finds an expression using every given number exactly once that evaluates
    to the target, with exact integer results at every step. The search order
    is fixed, so the same input always yields the same expression.
    """

    def solve(self, numbers: Sequence[int], target: int) -> Optional[Expression]:
        """
        Find an expression over `numbers` equal to `target`.

        Args:
            numbers: Available numbers; not modified.
            target: The value to reach.

        Returns:
            The first expression found, or None if there is none.

        Raises:
            ValueError: If numbers is empty.
        """
        if not numbers:
            raise ValueError("At least one number is required")

        logger.debug("Solving for %d with %s", target, list(numbers))
        expr = self._solve(list(numbers), target)
        if expr is None:
            logger.debug("No solution for %d with %s", target, list(numbers))
        else:
            logger.debug("Solved %d: %s", target, expr.render())
        return expr

    def _solve(self, numbers: List[int], target: int) -> Optional[Expression]:
        if len(numbers) == 1:
            if numbers[0] == target:
                return Expression.literal(numbers[0])
            return None

        # Single operand: fix one number, complete it from the rest
        for i in range(len(numbers)):
            others = numbers[:i] + numbers[i + 1:]
            expr = self._complete(Expression.literal(numbers[i]), others, target)
            if expr is not None:
                return expr

        # Pair first: needs two numbers left over for the completion
        if len(numbers) >= 4:
            for i in range(len(numbers) - 1):
                for j in range(i + 1, len(numbers)):
                    others = [numbers[k] for k in range(len(numbers)) if k != i and k != j]
                    for candidate in self._pair_candidates(numbers[i], numbers[j]):
                        expr = self._complete(candidate, others, target)
                        if expr is not None:
                            return expr

        return None

    def _pair_candidates(self, left: int, right: int) -> List[Expression]:
        """Every distinct operation on two numbers, in trial order."""
        lit = Expression.literal
        candidates = [
            Expression.operation(lit(left), '+', lit(right)),
            Expression.operation(lit(left), '-', lit(right)),
            Expression.operation(lit(right), '-', lit(left)),
            Expression.operation(lit(left), '*', lit(right)),
        ]
        if right != 0 and left % right == 0:
            candidates.append(Expression.operation(lit(left), '/', lit(right)))
        if left != 0 and right % left == 0:
            candidates.append(Expression.operation(lit(right), '/', lit(left)))
        return candidates

    def _sum(self, numbers: List[int]) -> Expression:
        """Left-to-right sum of `numbers` as an expression."""
        expr = Expression.literal(numbers[0])
        for n in numbers[1:]:
            expr = Expression.operation(expr, '+', Expression.literal(n))
        return expr

    def _complete(self, candidate: Expression, others: List[int],
                  target: int) -> Optional[Expression]:
        """
        Combine `candidate` with an expression over `others` to reach `target`.

        Each operator is inverted to get the value the rest must reach, which
        is then solved for recursively.
        """
        value = candidate.evaluate()

        # candidate + rest
        expr = self._solve(others, target - value)
        if expr is not None:
            return Expression.operation(candidate, '+', expr)
        # candidate - rest
        expr = self._solve(others, value - target)
        if expr is not None:
            return Expression.operation(candidate, '-', expr)
        # rest - candidate
        expr = self._solve(others, value + target)
        if expr is not None:
            return Expression.operation(expr, '-', candidate)

        if target == 0:
            if value == 0:
                # 0 * anything: the rest is summed so every number is still used
                return Expression.operation(candidate, '*', self._sum(others))
            expr = self._solve(others, 0)
            if expr is not None:
                return Expression.operation(candidate, '*', expr)
        elif value != 0:
            # candidate * rest
            if target % value == 0:
                expr = self._solve(others, target // value)
                if expr is not None:
                    return Expression.operation(candidate, '*', expr)
            # candidate / rest
            if value % target == 0:
                expr = self._solve(others, value // target)
                if expr is not None:
                    return Expression.operation(candidate, '/', expr)
            # rest / candidate
            expr = self._solve(others, value * target)
            if expr is not None:
                return Expression.operation(expr, '/', candidate)

        return None


def solve(numbers: Sequence[int], target: int) -> Optional[Expression]:
    """Module-level shortcut for `CountdownSolver().solve`."""
    return CountdownSolver().solve(numbers, target)
