"""
Identifiers - Random Source.

============================================================
PURPOSE
============================================================
Supplies random bytes and bounded integers to the generator.

Two policies are available:
- fast: `random.Random`, optionally seeded for reproducible runs
- strong: `random.SystemRandom`, backed by the OS CSPRNG

Neither policy is a security guarantee for identifiers; the
strong policy only makes them unpredictable to outsiders.

============================================================
"""

import random
from typing import Optional


class RandomSource:
    """Random bytes and integers drawn from one underlying generator."""
    
    def __init__(self, seed: Optional[int] = None, strong: bool = False):
        """
        Initialize the source.
        
        Args:
            seed: Seed for the fast PRNG (ignored when strong)
            strong: Use the OS CSPRNG
        """
        if strong:
            self._rng: random.Random = random.SystemRandom()
        else:
            self._rng = random.Random(seed)
        self._strong = strong
    
    @property
    def strong(self) -> bool:
        return self._strong
    
    def hex_bytes(self, count: int) -> str:
        """Return `count` random bytes as 2*count lowercase hex chars."""
        return self._rng.getrandbits(count * 8).to_bytes(count, "big").hex()
    
    def randint(self, low: int, high: int) -> int:
        """Return a random integer in [low, high]."""
        return self._rng.randint(low, high)
