"""
Custom Exceptions - Application-specific error classes.

This module defines a hierarchy of exceptions for clean error handling:
- Each exception has a status code and error code
- Used by the API layer for consistent error responses
- Provider and memory errors are absorbed inside the engine; only
  persistence failures on primary message writes reach the caller
"""
from typing import Optional


class AssistantException(Exception):
    """
    Base exception for all assistant errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(AssistantException):
    """Raised when input validation fails."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class ProviderError(AssistantException):
    """
    Raised when a single text-generation provider call fails.

    Covers network failures, timeouts, non-2xx responses and malformed
    bodies. Recoverable: the orchestrator falls through to the next
    provider or to the offline responder.
    """
    status_code = 502
    error_code = "provider_error"

    def __init__(self, provider: str, message: str, upstream_status: Optional[int] = None):
        details = f"provider={provider}"
        if upstream_status is not None:
            details += f", status={upstream_status}"
        super().__init__(message, details=details)
        self.provider = provider
        self.upstream_status = upstream_status


class PersistenceError(AssistantException):
    """Raised when the session store or message log fails."""
    status_code = 503
    error_code = "persistence_error"

    def __init__(self, message: str = "Persistence operation failed"):
        super().__init__(message)


class MalformedMemoryError(AssistantException):
    """Raised when a session's stored memory blob cannot be parsed."""
    status_code = 500
    error_code = "malformed_memory"

    def __init__(self, message: str = "Stored conversation memory is malformed"):
        super().__init__(message)


class SessionNotFoundError(AssistantException):
    """Raised when a session is not found for the requesting owner."""
    status_code = 404
    error_code = "session_not_found"

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session not found: {session_id[:8]}...",
            details=f"session_id={session_id}"
        )
        self.session_id = session_id
