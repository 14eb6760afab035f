"""Candidate ID generation."""

import random
from typing import Optional


class RandomIdGenerator:
    """
    Produces zero-padded decimal IDs drawn uniformly at random.

    Candidates are not guaranteed unique; the forest checks each one against
    its record store and asks again on collision.

    Usage:
        generator = RandomIdGenerator(digits=6)
        candidate = generator()  # e.g. "004217"
    """

    def __init__(self, digits: int = 6, rng: Optional[random.Random] = None):
        if digits < 1:
            raise ValueError(f"digits must be positive, got {digits}")
        self._digits = digits
        self._limit = 10 ** digits
        self._rng = rng or random.Random()

    @property
    def digits(self) -> int:
        return self._digits

    def __call__(self) -> str:
        return str(self._rng.randrange(self._limit)).zfill(self._digits)
