"""
Identifiers Package.

Key generation for new documents.
"""

from .generator import (
    UUIDAlgorithm,
    UUIDGenerator,
    get_generator,
    reset_generator,
    resolve_algorithm,
)
from .random_source import RandomSource

__all__ = [
    "UUIDAlgorithm",
    "UUIDGenerator",
    "RandomSource",
    "get_generator",
    "reset_generator",
    "resolve_algorithm",
]
