"""
Response classification.

Pure functions turning an HTTP status code and an optional JSON payload into a
domain ``Status`` and, for failures, a ``HTTPStatusError``. No I/O happens here.
"""

from enum import Enum
from http import HTTPStatus
from typing import Any, Optional

from buy_client.core.http.exceptions import BuyClientError, ErrorKind, HTTPStatusError


class Status(str, Enum):
    """Outcome of a request at a coarser grain than the HTTP status code."""

    SUCCESS = "success"
    CLIENT_ERROR = "clientError"
    SERVER_ERROR = "serverError"
    NETWORK_FAILURE = "networkFailure"
    UNKNOWN = "unknown"


_NO_RESPONSE_KINDS = (ErrorKind.NETWORK, ErrorKind.CANCELLED)


def status_for_status_code(
    status_code: Optional[int],
    error: Optional[BaseException] = None
) -> Status:
    """
    Map a status code to a domain ``Status``.

    Args:
        status_code: HTTP status code, or None when no response was received
        error: The error delivered with the response, if any

    Returns:
        The matching Status
    """
    if status_code is None:
        return Status.NETWORK_FAILURE
    if isinstance(error, BuyClientError) and error.kind in _NO_RESPONSE_KINDS:
        return Status.NETWORK_FAILURE

    if 200 <= status_code < 300:
        return Status.SUCCESS
    if 400 <= status_code < 500:
        return Status.CLIENT_ERROR
    if status_code >= 500:
        return Status.SERVER_ERROR
    return Status.UNKNOWN


def _flatten_errors(errors: Any, prefix: Optional[str] = None) -> list[str]:
    if isinstance(errors, str):
        return [f"{prefix} {errors}" if prefix else errors]
    if isinstance(errors, list):
        messages = []
        for item in errors:
            messages.extend(_flatten_errors(item, prefix))
        return messages
    if isinstance(errors, dict):
        messages = []
        for field, value in errors.items():
            # "customer" and "base" wrap field errors, they are not field names
            if field in ("customer", "base"):
                messages.extend(_flatten_errors(value, prefix))
            else:
                messages.extend(_flatten_errors(value, str(field)))
        return messages
    return []


def extract_error_message(json: Any) -> Optional[str]:
    """
    Pull a human-readable message out of an error payload.

    Recognises ``{"errors": ...}`` as a string, a list, or a mapping of field to
    messages, as well as top-level ``error`` and ``message`` strings.

    Returns:
        The message, or None when the payload has no recognisable error fields
    """
    if not isinstance(json, dict):
        return None

    if "errors" in json:
        messages = _flatten_errors(json["errors"])
        if messages:
            return "; ".join(messages)

    for key in ("error", "message"):
        value = json.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    return None


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown Status"


def error_from_json(
    json: Any,
    status_code: int,
    url: Optional[str] = None
) -> Optional[HTTPStatusError]:
    """
    Build the domain error for a response.

    Args:
        json: Parsed response body (may be None)
        status_code: HTTP status code of the response
        url: The URL that was requested (optional)

    Returns:
        HTTPStatusError for any non-2xx code, None for a 2xx code
    """
    status = status_for_status_code(status_code)
    if status is Status.SUCCESS:
        return None

    kind = {
        Status.CLIENT_ERROR: ErrorKind.CLIENT_ERROR,
        Status.SERVER_ERROR: ErrorKind.SERVER_ERROR,
    }.get(status, ErrorKind.UNEXPECTED)

    message = extract_error_message(json)
    if message is None:
        message = f"HTTP {status_code} {_reason_phrase(status_code)}"

    return HTTPStatusError(
        message=message,
        url=url,
        status_code=status_code,
        json=json,
        kind=kind
    )
