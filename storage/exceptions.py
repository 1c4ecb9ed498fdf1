"""
Storage Layer Exceptions.

============================================================
PURPOSE
============================================================
Defines store-specific exceptions. Backend errors (SQLAlchemy,
driver, network) are caught inside the store and re-raised as
one of these, with context.

The core layers never wrap or retry these; they reach the
caller unchanged so that transient infrastructure failure can
be told apart from logical errors.

============================================================
"""

from typing import Any, Optional


class StoreException(Exception):
    """
    Base exception for all store operations.
    
    Callers can catch this for generic error handling.
    """
    
    def __init__(
        self,
        message: str,
        store_name: str,
        operation: str,
        details: Optional[dict] = None
    ) -> None:
        self.message = message
        self.store_name = store_name
        self.operation = operation
        self.details = details or {}
        super().__init__(self._format_message())
    
    def _format_message(self) -> str:
        return f"[{self.store_name}] {self.operation}: {self.message}"


class RecordNotFoundError(StoreException):
    """Raised when a requested key does not exist."""
    
    def __init__(
        self,
        store_name: str,
        key: Any,
        operation: str = "get"
    ) -> None:
        super().__init__(
            message=f"Key {key!r} not found",
            store_name=store_name,
            operation=operation,
            details={"key": str(key)}
        )
        self.key = key


class DuplicateRecordError(StoreException):
    """Raised when an insert-only write hits an existing key."""
    
    def __init__(
        self,
        store_name: str,
        key: Any,
        operation: str = "add"
    ) -> None:
        super().__init__(
            message=f"Key {key!r} already exists",
            store_name=store_name,
            operation=operation,
            details={"key": str(key)}
        )
        self.key = key


class StoreUnavailable(StoreException):
    """
    Raised when the backing store cannot be reached.
    
    Use for connection failures and timeouts.
    """
    
    def __init__(
        self,
        store_name: str,
        operation: str,
        original_error: str
    ) -> None:
        super().__init__(
            message=f"Store unavailable: {original_error}",
            store_name=store_name,
            operation=operation,
            details={"original_error": original_error}
        )


class QueryError(StoreException):
    """Raised when a backend operation fails for another reason."""
    
    def __init__(
        self,
        store_name: str,
        operation: str,
        original_error: str
    ) -> None:
        super().__init__(
            message=f"Operation failed: {original_error}",
            store_name=store_name,
            operation=operation,
            details={"original_error": original_error}
        )


class SerializationError(StoreException):
    """Raised when a stored value cannot be decoded."""
    
    def __init__(
        self,
        store_name: str,
        key: Any,
        reason: str
    ) -> None:
        super().__init__(
            message=f"Cannot decode value of {key!r}: {reason}",
            store_name=store_name,
            operation="decode",
            details={"key": str(key), "reason": reason}
        )
        self.key = key
