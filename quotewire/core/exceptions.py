"""
Domain exceptions for the QuoteWire client.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class QuoteWireError(Exception):
    """Base exception for all QuoteWire errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for UI alerts and logs."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(QuoteWireError):
    """Local validation rejected the input before any network call."""

    def __init__(self, errors: list[str], entity: str | None = None):
        super().__init__(
            "; ".join(errors) if errors else "Invalid input",
            code="VALIDATION_ERROR",
            details={"entity": entity, "errors": list(errors)},
        )
        self.errors = list(errors)


# Auth Exceptions
class AuthError(QuoteWireError):
    """Base exception for authentication problems."""

    pass


class NotAuthenticatedError(AuthError):
    """No session token is stored."""

    def __init__(self):
        super().__init__("User is not authenticated", code="NOT_AUTHENTICATED")


class SessionExpiredError(AuthError):
    """The backend rejected the stored token."""

    def __init__(self):
        super().__init__(
            "Session expired. Please sign in again.",
            code="SESSION_EXPIRED",
        )


# Remote Exceptions
class RemoteError(QuoteWireError):
    """A backend call failed (non-2xx response or transport failure)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        merged = {"status_code": status_code}
        merged.update(details or {})
        super().__init__(message, code=code or "REMOTE_ERROR", details=merged)
        self.status_code = status_code

    def with_prefix(self, prefix: str) -> "RemoteError":
        """Wrap this error with an operation-specific prefix, keeping its type."""
        # Subclass constructors take different arguments
        wrapped = RemoteError.__new__(type(self))
        RemoteError.__init__(
            wrapped,
            f"{prefix}: {self.message}",
            status_code=self.status_code,
            code=self.code,
            details=self.details,
        )
        return wrapped


class NetworkError(RemoteError):
    """The request never produced an HTTP response."""

    def __init__(self, method: str, path: str, reason: str):
        super().__init__(
            f"Network error on {method} {path}: {reason}",
            code="NETWORK_ERROR",
            details={"method": method, "path": path, "reason": reason},
        )


# Storage Exceptions
class StorageError(QuoteWireError):
    """Local key-value store operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Storage error during {operation}: {error}",
            code="STORAGE_ERROR",
            details={"operation": operation, "error": error},
        )
