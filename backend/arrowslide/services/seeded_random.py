"""
Arrow Slide - Seeded Random

Deterministic PRNG so a level can be regenerated from its seed.
"""

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


def new_seed() -> int:
    """Fresh 31-bit seed for callers that do not pass one."""
    return random.randrange(1, 0x7FFFFFFF)


class SeededRandom:
    """Linear congruential generator, reproducible across platforms."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = new_seed() if seed is None else int(seed)
        self._state = self.seed & 0x7FFFFFFF

    def next(self) -> float:
        """Float in [0, 1)."""
        self._state = (self._state * 1103515245 + 12345) & 0x7FFFFFFF
        return self._state / 0x80000000

    def next_int(self, min_val: int, max_val: int) -> int:
        """Integer in [min_val, max_val]."""
        if min_val > max_val:
            return min_val
        return min_val + int(self.next() * (max_val - min_val + 1))

    def coin(self) -> bool:
        return self.next() < 0.5

    def shuffle(self, arr: Sequence[T]) -> list:
        """Fisher-Yates shuffle, returns a new list."""
        result = list(arr)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(0, i)
            result[i], result[j] = result[j], result[i]
        return result

    def choice(self, arr: Sequence[T]) -> Optional[T]:
        if not arr:
            return None
        return arr[self.next_int(0, len(arr) - 1)]
