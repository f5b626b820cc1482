"""
Deterministic Pseudo-Randomness

Park-Miller minimal standard linear congruential generator. Callers
reseed a fresh generator for every decision instead of carrying state,
so identical inputs always replay identical draws.
"""

import math
from typing import Optional

MODULUS = 2147483647  # 2**31 - 1
MULTIPLIER = 16807
DEFAULT_SEED = 12345

# Hash multiplier for shot index
INDEX_PRIME = 7919


class SeededRNG:
    """Lehmer LCG producing floats in [0, 1)."""

    def __init__(self, seed: int):
        state = int(seed) % MODULUS
        if state <= 0:
            state += MODULUS - 1
        self.state = state

    def next(self) -> float:
        self.state = (self.state * MULTIPLIER) % MODULUS
        return (self.state - 1) / (MODULUS - 1)

    def next_int(self, maximum: int) -> int:
        """Integer in [0, maximum)."""
        return int(math.floor(self.next() * maximum))

    def next_float(self, minimum: float, maximum: float) -> float:
        return minimum + self.next() * (maximum - minimum)


def generate_seed(position: float, index: int, global_seed: Optional[int] = None) -> int:
    """
    Derive a per-shot seed from the job seed and the shot's place in the sequence.

    Args:
        position: Shot position in sequence (0.0-1.0)
        index: Shot index (0-based)
        global_seed: Job seed (DEFAULT_SEED if None)

    Returns:
        Integer seed for SeededRNG
    """
    base = DEFAULT_SEED if global_seed is None else int(global_seed)
    position_hash = int(math.floor(position * 10000))
    index_hash = index * INDEX_PRIME
    return base + position_hash + index_hash
