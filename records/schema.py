"""
Records - Schema.

Explicit attribute registration for record types. A schema is a
named, ordered set of attributes, each with an optional default
that is either a value or a zero-argument callable evaluated once
per new record.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional


@dataclass(frozen=True)
class Attribute:
    """A declared record attribute."""
    
    name: str
    default: Any = None
    
    def default_value(self) -> Any:
        if callable(self.default):
            return self.default()
        return self.default


class Schema:
    """Ordered attribute declarations of one record type."""
    
    def __init__(self, *attributes: Attribute):
        self._attributes: Dict[str, Attribute] = {}
        for attribute in attributes:
            self._attributes[attribute.name] = attribute
    
    def attribute(self, *names: str, default: Any = None) -> "Schema":
        """Declare attributes sharing one default; returns self for chaining."""
        for name in names:
            if not name.isidentifier() or name == "id":
                raise ValueError(f"Invalid attribute name: {name!r}")
            self._attributes[name] = Attribute(name, default)
        return self
    
    def extend(self, other: Optional["Schema"]) -> "Schema":
        """New schema holding other's attributes followed by ours."""
        merged = Schema(*(other or Schema()))
        for attribute in self:
            merged._attributes[attribute.name] = attribute
        return merged
    
    def defaults(self) -> Dict[str, Any]:
        return {a.name: a.default_value() for a in self}
    
    @property
    def names(self) -> list:
        return list(self._attributes)
    
    def __contains__(self, name: object) -> bool:
        return name in self._attributes
    
    def __iter__(self) -> Iterator[Attribute]:
        return iter(self._attributes.values())
    
    def __len__(self) -> int:
        return len(self._attributes)
    
    def __repr__(self) -> str:
        return f"Schema({', '.join(self._attributes)})"
