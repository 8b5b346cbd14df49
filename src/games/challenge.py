"""
Timed solve of a single Numbers Game challenge and its text report.
"""

import json
import time
from dataclasses import dataclass, asdict, field
from typing import List, Optional, Sequence

from .expression import Expression
from .expression_parser import ExpressionParser
from .solver import CountdownSolver


@dataclass
class ChallengeResult:
    """Outcome of one solve call."""
    numbers: List[int]
    target: int
    expression: Optional[str]
    value: Optional[int]
    elapsed_us: int
    solved_at: float = field(default_factory=time.time)

    @property
    def solved(self) -> bool:
        return self.expression is not None

    def tree(self) -> Optional[Expression]:
        """Rebuild the expression tree from its rendered text."""
        if self.expression is None:
            return None
        return ExpressionParser().parse(self.expression)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, data: str) -> 'ChallengeResult':
        """Deserialize from JSON string."""
        parsed = json.loads(data)
        return cls(**parsed)


def run_challenge(numbers: Sequence[int], target: int,
                  solver: Optional[CountdownSolver] = None) -> ChallengeResult:
    """
    Solve one challenge and time it.

    The timing is wall-clock around the solve call only.
    """
    solver = solver or CountdownSolver()
    numbers = list(numbers)

    start = time.perf_counter_ns()
    expr = solver.solve(numbers, target)
    elapsed_us = (time.perf_counter_ns() - start) // 1000

    return ChallengeResult(
        numbers=numbers,
        target=target,
        expression=expr.render() if expr is not None else None,
        value=expr.evaluate() if expr is not None else None,
        elapsed_us=elapsed_us,
    )


def format_header(numbers: Sequence[int], target: int) -> str:
    return f"Target: {target},  Numbers: " + "".join(f"{n} " for n in numbers)


def format_challenge(result: ChallengeResult) -> str:
    """
    Text report of a challenge:

        Target: 24,  Numbers: 1 3 1 5
        Solving...42 us
        Solved: ( ( 1 + 3 ) * ( 1 + 5 ) ) = 24
    """
    lines = [
        format_header(result.numbers, result.target),
        f"Solving...{result.elapsed_us} us",
    ]
    if result.solved:
        lines.append(f"Solved: {result.expression} = {result.value}")
    else:
        lines.append("No solution found")
    return "\n".join(lines)
