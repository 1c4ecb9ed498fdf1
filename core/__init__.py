"""
Core Module Package.

Infrastructure shared by every other package.

Components:
- clock: Unified time abstraction
- config: Environment-driven configuration
- exceptions: Custom exception hierarchy
"""

from .clock import ClockProtocol, MockClock, SystemClock, get_clock, reset_clock, set_clock
from .exceptions import (
    DocModelException,
    InvalidArgument,
    Misconfigured,
    MissingId,
    UnknownAlgorithm,
    UnknownAttribute,
    http_status_for,
)

__all__ = [
    "ClockProtocol",
    "MockClock",
    "SystemClock",
    "get_clock",
    "set_clock",
    "reset_clock",
    "DocModelException",
    "InvalidArgument",
    "Misconfigured",
    "MissingId",
    "UnknownAlgorithm",
    "UnknownAttribute",
    "http_status_for",
]
