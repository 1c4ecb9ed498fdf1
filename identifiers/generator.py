"""
Identifiers - UUID Generator.

============================================================
RESPONSIBILITY
============================================================
Produces opaque, printable 128-bit identifiers (32 hex chars)
suitable as document keys.

ALGORITHMS:
- random:     16 random bytes
- utc_random: 14 hex chars of UTC microseconds + 9 random bytes
- sequential: 26 hex char random prefix + 6 hex char counter that
              grows by random increments; on overflow the prefix is
              redrawn and the counter reseeded

============================================================
CONCURRENCY
============================================================
Sequential generation runs under one lock per generator
instance. Random and utc_random touch no shared state.

============================================================
"""

import logging
import threading
from enum import Enum
from typing import List, Optional, Union

from core.clock import ClockProtocol, get_clock
from core.exceptions import InvalidArgument, UnknownAlgorithm

from .random_source import RandomSource


logger = logging.getLogger(__name__)


# ============================================================
# CONSTANTS
# ============================================================

PREFIX_BYTES = 13
"""Random bytes in a sequential prefix (26 hex chars)."""

COUNTER_CEILING = 0xFFF000
"""Counter value at which a new prefix epoch starts."""

MAX_INCREMENT = 0xFFF
"""Largest counter increment; the smallest is 1."""

TIME_HEX_WIDTH = 14
RANDOM_TAIL_BYTES = 9


class UUIDAlgorithm(str, Enum):
    """Identifier generation algorithms."""
    
    RANDOM = "random"
    UTC_RANDOM = "utc_random"
    SEQUENTIAL = "sequential"


def resolve_algorithm(algorithm: Union[str, UUIDAlgorithm]) -> UUIDAlgorithm:
    """Normalize an algorithm name, raising UnknownAlgorithm for bad input."""
    if isinstance(algorithm, UUIDAlgorithm):
        return algorithm
    if isinstance(algorithm, str):
        try:
            return UUIDAlgorithm(algorithm)
        except ValueError:
            pass
    raise UnknownAlgorithm(algorithm, [a.value for a in UUIDAlgorithm])


# ============================================================
# GENERATOR
# ============================================================

class UUIDGenerator:
    """
    Thread-safe identifier generator.
    
    ============================================================
    USAGE
    ============================================================
    ```python
    generator = UUIDGenerator()
    key = generator.next()                       # one sequential id
    keys = generator.next(10, "utc_random")      # list of ten ids
    ```
    
    ============================================================
    """
    
    def __init__(
        self,
        seed: Optional[int] = None,
        strong: bool = False,
        clock: Optional[ClockProtocol] = None,
    ):
        """
        Initialize the generator.
        
        Args:
            seed: Seed for the fast random source
            strong: Use the OS CSPRNG
            clock: Time source for utc_random (process clock by default)
        """
        self._random = RandomSource(seed=seed, strong=strong)
        self._clock = clock
        self._lock = threading.Lock()
        self._prefix = self._random.hex_bytes(PREFIX_BYTES)
        self._counter = self._random.randint(1, MAX_INCREMENT)
    
    @property
    def prefix(self) -> str:
        """Current sequential epoch prefix."""
        with self._lock:
            return self._prefix
    
    @property
    def counter(self) -> int:
        """Current sequential counter."""
        with self._lock:
            return self._counter
    
    # =========================================================
    # PUBLIC API
    # =========================================================
    
    def next(
        self,
        count: int = 1,
        algorithm: Union[str, UUIDAlgorithm] = UUIDAlgorithm.SEQUENTIAL,
    ) -> Union[str, List[str]]:
        """
        Generate identifiers.
        
        Args:
            count: Number of identifiers, must be positive
            algorithm: random, utc_random or sequential
            
        Returns:
            A single string when count == 1, otherwise a list in
            generation order
            
        Raises:
            InvalidArgument: count is not a positive integer
            UnknownAlgorithm: algorithm is not recognized
        """
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise InvalidArgument("count", count, "should be a positive number")
        algorithm = resolve_algorithm(algorithm)
        
        if algorithm is UUIDAlgorithm.RANDOM:
            uuids = [self._random.hex_bytes(16) for _ in range(count)]
        elif algorithm is UUIDAlgorithm.UTC_RANDOM:
            clock = self._clock or get_clock()
            prefix = "%0*x" % (TIME_HEX_WIDTH, clock.micros())
            uuids = [prefix + self._random.hex_bytes(RANDOM_TAIL_BYTES) for _ in range(count)]
        else:
            uuids = [self._next_sequential() for _ in range(count)]
        
        return uuids[0] if count == 1 else uuids
    
    # =========================================================
    # PRIVATE
    # =========================================================
    
    def _next_sequential(self) -> str:
        with self._lock:
            if self._counter >= COUNTER_CEILING:
                self._prefix = self._random.hex_bytes(PREFIX_BYTES)
                self._counter = self._random.randint(1, MAX_INCREMENT)
                logger.debug(f"Sequential prefix rolled over to {self._prefix}")
            else:
                self._counter += self._random.randint(1, MAX_INCREMENT)
            return "%s%06x" % (self._prefix, self._counter)


# ============================================================
# DEFAULT GENERATOR
# ============================================================

_generator: Optional[UUIDGenerator] = None
_generator_lock = threading.Lock()


def get_generator() -> UUIDGenerator:
    """Get the process-wide generator, creating it on first use."""
    global _generator
    if _generator is None:
        with _generator_lock:
            if _generator is None:
                _generator = UUIDGenerator()
    return _generator


def reset_generator() -> None:
    """Drop the process-wide generator (tests only)."""
    global _generator
    with _generator_lock:
        _generator = None
