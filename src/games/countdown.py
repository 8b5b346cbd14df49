"""
Countdown Numbers Game - random puzzle generation.

Numbers are drawn the way the TV show draws them: a few large numbers from
{25, 50, 75, 100} without repeats, the rest small numbers from 1-10 which may
repeat. The target is a random three digit number.
"""

import random
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Puzzle:
    """A set of numbers and the target to reach with them."""
    numbers: List[int]
    target: int
    name: Optional[str] = None
    description: str = ''
    large_numbers: List[int] = field(default_factory=list)
    small_numbers: List[int] = field(default_factory=list)


class CountdownPuzzles:
    """Generates Countdown-style puzzles."""

    LARGE_NUMBERS = [25, 50, 75, 100]
    SMALL_NUMBERS = list(range(1, 11))  # 1-10
    NUM_LARGE = 2
    NUM_SMALL = 3
    TARGET_MIN = 100
    TARGET_MAX = 999

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Random source; pass a seeded instance for repeatable puzzles.
        """
        self.rng = rng or random.Random()

    def generate_numbers(self, num_large: Optional[int] = None,
                         num_small: Optional[int] = None) -> tuple:
        """
        Generate the numbers for a puzzle.

        Returns:
            Tuple of (all_numbers, large_numbers, small_numbers)

        Raises:
            ValueError: If more large numbers are asked for than exist
        """
        num_large = self.NUM_LARGE if num_large is None else num_large
        num_small = self.NUM_SMALL if num_small is None else num_small

        if not 0 <= num_large <= len(self.LARGE_NUMBERS):
            raise ValueError(f"Number of large numbers must be between 0 and {len(self.LARGE_NUMBERS)}")
        if num_small < 0:
            raise ValueError("Number of small numbers cannot be negative")
        if num_large + num_small == 0:
            raise ValueError("A puzzle needs at least one number")

        large = self.rng.sample(self.LARGE_NUMBERS, num_large)
        small = self.rng.choices(self.SMALL_NUMBERS, k=num_small)  # Can repeat
        return large + small, large, small

    def generate_target(self) -> int:
        """Generate a random target number."""
        return self.rng.randint(self.TARGET_MIN, self.TARGET_MAX)

    def new_puzzle(self, num_large: Optional[int] = None,
                   num_small: Optional[int] = None) -> Puzzle:
        numbers, large, small = self.generate_numbers(num_large, num_small)
        return Puzzle(
            numbers=numbers,
            target=self.generate_target(),
            large_numbers=large,
            small_numbers=small,
        )
