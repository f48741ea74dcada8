"""Catalog failure taxonomy.

Every failure the fetch client, gateway or state container can surface is a
``CatalogError``. The fetch client never retries a ``CatalogError`` and the
gateway re-raises it unchanged, so once a failure has been classified it keeps
its kind all the way up to the state container.
"""

from typing import Optional


class CatalogError(Exception):
    """Base exception for classified catalog failures.

    Attributes:
        message: Human-readable description, safe to show to users
    """

    default_message = "An unknown error occurred. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class TimeoutFailure(CatalogError):
    """Raised when a request exceeded its deadline on every attempt.

    Recoverable by a user-initiated retry.
    """

    default_message = "Request timeout. Please try again."

    def __init__(
        self,
        message: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.timeout_seconds = timeout_seconds
        super().__init__(message)


class NetworkFailure(CatalogError):
    """Raised when the transport failed on every attempt.

    Recoverable by retrying once connectivity returns.
    """

    default_message = "Network error. Please check your connection."

    def __init__(
        self,
        message: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        super().__init__(message)


class ApiFailure(CatalogError):
    """Raised when the backend answered with an error status.

    Attributes:
        status_code: HTTP status returned by the server, if any.
            401 means the API key is wrong and retrying will not help.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ParsingFailure(CatalogError):
    """Raised when a response body does not have the expected shape."""

    default_message = "Error parsing data. Please try again."


class UnknownFailure(CatalogError):
    """Catch-all for failures that fit no other kind."""

    def __init__(
        self,
        message: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        super().__init__(message)


class ConfigurationError(ValueError):
    """Raised at construction time when required settings are missing."""
