"""
Custom exceptions for storefront API operations.

This module provides a hierarchy of exceptions describing every way a request
against the shop can fail. Transport operations never raise these out of a
request task: they are delivered as the ``error`` member of the result so the
caller can branch on ``kind`` (retry network errors, do not retry client errors).
"""

from enum import Enum
from typing import Any, Optional, Sequence


class ErrorKind(str, Enum):
    """Coarse classification of a failed request."""

    NETWORK = "network"
    MALFORMED_RESPONSE = "malformedResponse"
    CLIENT_ERROR = "clientError"
    SERVER_ERROR = "serverError"
    CANCELLED = "cancelled"
    TOKEN_DERIVATION_FAILED = "tokenDerivationFailed"
    UNEXPECTED = "unexpected"


class BuyClientError(Exception):
    """
    Base exception for all storefront client errors.

    Catch this to handle any request failure generically.
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[BaseException] = None,
        json: Optional[Any] = None,
        kind: Optional[ErrorKind] = None
    ):
        """
        Initialize storefront client error.

        Args:
            message: Human-readable error description
            url: The URL that was being accessed (optional)
            status_code: HTTP status code if a response was received (optional)
            original_error: The underlying exception that caused this error (optional)
            json: Parsed response payload that accompanied the error (optional)
            kind: Overrides the class-level error kind (optional)
        """
        self.message = message
        self.url = url
        self.status_code = status_code
        self.original_error = original_error
        self.json = json
        if kind is not None:
            self.kind = kind

        super().__init__(self.message)

    @property
    def is_retryable(self) -> bool:
        """Whether repeating the same request could plausibly succeed."""
        return self.kind in (ErrorKind.NETWORK, ErrorKind.SERVER_ERROR)

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message]
        if self.url:
            parts.append(f"URL: {self.url}")
        if self.status_code:
            parts.append(f"Status: {self.status_code}")
        return " | ".join(parts)


class HTTPConnectionError(BuyClientError):
    """
    Raised when no response reached the client.

    This includes DNS resolution failures, refused connections, TLS errors, etc.
    """

    kind = ErrorKind.NETWORK


class HTTPTimeoutError(BuyClientError):
    """
    Raised when the server doesn't respond within the configured timeout.
    """

    kind = ErrorKind.NETWORK


class HTTPStatusError(BuyClientError):
    """
    Raised when the server returns an error status code.

    ``kind`` is ``CLIENT_ERROR`` for 4xx and ``SERVER_ERROR`` for 5xx responses.
    """

    kind = ErrorKind.CLIENT_ERROR


class MalformedResponseError(BuyClientError):
    """Raised when a successful response body is not the expected JSON."""

    kind = ErrorKind.MALFORMED_RESPONSE


class RequestCancelledError(BuyClientError):
    """Delivered when the caller cancels a request before it completes."""

    kind = ErrorKind.CANCELLED


class TokenDerivationError(BuyClientError):
    """
    The customer record was written but no access token could be obtained.

    The created (or activated) customer is kept on ``customer`` and the failure
    of the login step on ``original_error``.
    """

    kind = ErrorKind.TOKEN_DERIVATION_FAILED

    def __init__(self, message: str, customer: Any = None, **kwargs):
        self.customer = customer
        super().__init__(message, **kwargs)


class CredentialsError(ValueError):
    """Raised synchronously when required credential items are missing."""

    def __init__(self, missing_keys: Sequence[str]):
        self.missing_keys = list(missing_keys)
        super().__init__(
            f"Missing required credential items: {', '.join(self.missing_keys)}"
        )
