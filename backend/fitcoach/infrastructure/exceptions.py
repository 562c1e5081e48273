"""
Custom Exceptions for FitCoach

Hierarchical exception classes for proper error handling across layers.
"""

from typing import Optional, Dict, Any


class FitCoachError(Exception):
    """Base exception for all FitCoach errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ValidationError(FitCoachError):
    """Raised when input validation fails."""
    pass


class AuthError(FitCoachError):
    """Raised when the caller is not authenticated."""
    pass


class ForbiddenError(AuthError):
    """Raised when the caller does not own the requested resource."""
    pass


class PersistenceError(FitCoachError):
    """Raised when database operations fail."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table
        super().__init__(message, details, original_error)


class NotFoundError(PersistenceError):
    """Raised when a requested resource is not found."""
    pass


class DuplicateError(PersistenceError):
    """Raised when attempting to create a duplicate resource."""
    pass


class UpstreamError(FitCoachError):
    """Raised when the language model provider fails or disconnects."""

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if model:
            details["model"] = model
        if operation:
            details["operation"] = operation
        super().__init__(message, details, original_error)


class RateLimitError(UpstreamError):
    """Raised when API rate limits are exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message, original_error=original_error)
        if retry_after:
            self.details["retry_after_seconds"] = retry_after


class StreamTimeoutError(UpstreamError):
    """Raised when a completion stream exceeds its maximum duration."""
    pass


class ConfigurationError(FitCoachError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(message, details, original_error)
