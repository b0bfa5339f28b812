"""
HTTP transport layer.

This module provides the async transport, its task handle, the response
classifier and the exception hierarchy shared by every service.
"""

from buy_client.core.http.exceptions import (
    BuyClientError,
    CredentialsError,
    ErrorKind,
    HTTPConnectionError,
    HTTPStatusError,
    HTTPTimeoutError,
    MalformedResponseError,
    RequestCancelledError,
    TokenDerivationError,
)
from buy_client.core.http.status import Status, error_from_json, status_for_status_code
from buy_client.core.http.task import RequestTask
from buy_client.core.http.client import CUSTOMER_ACCESS_TOKEN_HEADER, HTTPClient

__all__ = [
    "CUSTOMER_ACCESS_TOKEN_HEADER",
    "HTTPClient",
    "RequestTask",
    "Status",
    "error_from_json",
    "status_for_status_code",
    "BuyClientError",
    "CredentialsError",
    "ErrorKind",
    "HTTPConnectionError",
    "HTTPStatusError",
    "HTTPTimeoutError",
    "MalformedResponseError",
    "RequestCancelledError",
    "TokenDerivationError",
]
