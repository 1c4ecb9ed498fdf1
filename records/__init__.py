"""
Records Package.

Declarative record types persisted in a DocumentStore.
"""

from .base import Model, registered_models
from .configuration import ModelConfiguration
from .schema import Attribute, Schema

__all__ = [
    "Attribute",
    "Model",
    "ModelConfiguration",
    "Schema",
    "registered_models",
]
