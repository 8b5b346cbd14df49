# Numbers Game package
from .expression import Expression, ExpressionKind, InvariantViolation
from .solver import CountdownSolver, solve
from .expression_parser import ExpressionError, ExpressionParser
from .challenge import ChallengeResult, format_challenge, run_challenge
from .countdown import CountdownPuzzles, Puzzle

__all__ = [
    'Expression',
    'ExpressionKind',
    'InvariantViolation',
    'CountdownSolver',
    'solve',
    'ExpressionError',
    'ExpressionParser',
    'ChallengeResult',
    'format_challenge',
    'run_challenge',
    'CountdownPuzzles',
    'Puzzle',
]
