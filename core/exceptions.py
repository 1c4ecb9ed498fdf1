"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines the logical errors raised by the document model layer.

- Provides clear exception hierarchy
- Carries context for debugging
- Fails fast before any state is mutated

Store and transport failures are NOT defined here; they live in
storage.exceptions and are surfaced unchanged by the core.

============================================================
EXCEPTION HIERARCHY
============================================================
DocModelException (base)
├── InvalidArgument
├── UnknownAlgorithm
├── Misconfigured
├── MissingId
└── UnknownAttribute

============================================================
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels."""
    
    LOW = "low"
    """Minor issue, informational."""
    
    MEDIUM = "medium"
    """Caller error, request rejected."""
    
    HIGH = "high"
    """Deployment or configuration problem."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class DocModelException(Exception):
    """
    Base exception for all document model errors.
    
    All exceptions carry:
    - severity: for alerting
    - context: for debugging
    - timestamp: when the error occurred
    """
    
    default_severity: Severity = Severity.MEDIUM
    
    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        
        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)
        
        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)
    
    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging/storage."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }


# ============================================================
# ARGUMENT ERRORS
# ============================================================

class InvalidArgument(DocModelException):
    """A caller supplied an argument outside its valid domain."""
    
    def __init__(self, argument: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid value for {argument}: {reason}",
            context={"argument": argument, "value": repr(value)[:100]},
        )
        self.argument = argument
        self.value = value


class UnknownAlgorithm(DocModelException):
    """Identifier algorithm name is not recognized."""
    
    def __init__(self, algorithm: Any, known: Iterable[str]):
        known = sorted(known)
        super().__init__(
            message=(
                f"Unknown algorithm {algorithm!r}. "
                f"Should be one of: {', '.join(known)}"
            ),
            context={"algorithm": repr(algorithm)[:100], "known": known},
        )
        self.algorithm = algorithm


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class Misconfigured(DocModelException):
    """Component invoked without the configuration it requires."""
    
    default_severity = Severity.HIGH
    
    def __init__(self, message: str, config_key: Optional[str] = None):
        context = {}
        if config_key:
            context["config_key"] = config_key
        super().__init__(message, context=context)
        self.config_key = config_key


# ============================================================
# RECORD ERRORS
# ============================================================

class MissingId(DocModelException):
    """Operation requires a persisted record identifier."""
    
    def __init__(self, model: str, operation: str):
        super().__init__(
            message=f"{model}.{operation}: missing id attribute",
            context={"model": model, "operation": operation},
        )


class UnknownAttribute(DocModelException):
    """Attribute name is not declared in the model schema."""
    
    def __init__(self, model: str, attribute: str):
        super().__init__(
            message=f"{model} has no attribute {attribute!r}",
            context={"model": model, "attribute": attribute},
        )
        self.attribute = attribute


# ============================================================
# HTTP MAPPING
# ============================================================

# Status codes for web integrations, keyed by exception class name so that
# this module does not import the storage layer.
HTTP_STATUS_BY_ERROR: Dict[str, int] = {
    "RecordNotFoundError": 404,
    "DuplicateRecordError": 422,
    "UnknownAttribute": 422,
    "InvalidArgument": 400,
}


def http_status_for(error: BaseException, default: int = 500) -> int:
    """Map an exception to an HTTP status code, walking its MRO."""
    for cls in type(error).__mro__:
        status = HTTP_STATUS_BY_ERROR.get(cls.__name__)
        if status is not None:
            return status
    return default
