"""
Core Module - System Clock.

============================================================
RESPONSIBILITY
============================================================
Provides a testable clock abstraction.

- Time-ordered identifiers read time through this clock
- Enables deterministic tests by pinning or advancing time

============================================================
DESIGN PRINCIPLES
============================================================
- UTC only
- Microsecond resolution, integer arithmetic
- Thread-safe

============================================================
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional
import threading
import time


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MICROSECOND = timedelta(microseconds=1)


# ============================================================
# CLOCK PROTOCOL
# ============================================================

class ClockProtocol(ABC):
    """Abstract interface for system clock."""
    
    @abstractmethod
    def now(self) -> datetime:
        """Get current UTC datetime."""
        pass
    
    def micros(self) -> int:
        """Get microseconds since the Unix epoch."""
        return (self.now() - EPOCH) // ONE_MICROSECOND


# ============================================================
# SYSTEM CLOCK (PRODUCTION)
# ============================================================

class SystemClock(ClockProtocol):
    """Production clock using actual system time."""
    
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
    
    def micros(self) -> int:
        return time.time_ns() // 1_000


# ============================================================
# MOCK CLOCK (TESTING)
# ============================================================

class MockClock(ClockProtocol):
    """
    Mock clock for testing.
    
    Allows time manipulation for deterministic tests.
    """
    
    def __init__(self, initial_time: Optional[datetime] = None):
        """
        Initialize mock clock.
        
        Args:
            initial_time: Starting time (defaults to current UTC)
        """
        initial_time = initial_time or datetime.now(timezone.utc)
        if initial_time.tzinfo is None:
            initial_time = initial_time.replace(tzinfo=timezone.utc)
        self._time = initial_time
        self._lock = threading.Lock()
    
    def now(self) -> datetime:
        """Get current (mocked) datetime."""
        with self._lock:
            return self._time
    
    def advance(self, seconds: float = 0, **kwargs) -> None:
        """
        Advance time by the specified amount.
        
        Args:
            seconds: Number of seconds to advance
            **kwargs: Passed to timedelta (microseconds, minutes, ...)
        """
        with self._lock:
            self._time = self._time + timedelta(seconds=seconds, **kwargs)


# ============================================================
# GLOBAL CLOCK INSTANCE
# ============================================================

_clock: ClockProtocol = SystemClock()
_clock_lock = threading.Lock()


def get_clock() -> ClockProtocol:
    """Get the process-wide clock."""
    return _clock


def set_clock(clock: ClockProtocol) -> None:
    """Replace the process-wide clock (tests only)."""
    global _clock
    with _clock_lock:
        _clock = clock


def reset_clock() -> None:
    """Restore the system clock."""
    set_clock(SystemClock())
