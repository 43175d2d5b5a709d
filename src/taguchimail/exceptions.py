"""
Custom exceptions for the TaguchiMail API library.

This module defines a hierarchy of exceptions used throughout the library
to provide clear, actionable error messages for request and record failures.
"""


class TaguchiMailError(Exception):
    """Base exception for all TaguchiMail errors."""

    pass


class CredentialError(TaguchiMailError):
    """Raised when credentials are missing or invalid."""

    pass


class ConnectionError(TaguchiMailError):
    """Raised when a request cannot be delivered by the HTTP transport."""

    pass


class ConfigurationError(TaguchiMailError):
    """Raised when configuration is invalid or missing."""

    pass


class QueryError(TaguchiMailError):
    """Raised when a query predicate cannot be built."""

    pass


class ResponseError(TaguchiMailError):
    """Raised when a response body is not a JSON array of records."""

    def __init__(self, message: str, body: str = None) -> None:
        """
        Initialize ResponseError.

        Args:
            message: Error message
            body: Raw response body, kept for callers that want to inspect it
        """
        super().__init__(message)
        self.body = body


class InvalidFieldError(TaguchiMailError):
    """Raised when writing to an unknown or read-only record field."""

    def __init__(self, message: str, field: str = None) -> None:
        """
        Initialize InvalidFieldError.

        Args:
            message: Error message
            field: Logical field name that was rejected
        """
        super().__init__(message)
        self.field = field
