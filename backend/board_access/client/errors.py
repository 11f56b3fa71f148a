"""Client-side error taxonomy.

Server failures are classified by the ErrorCode in the response envelope,
matched exactly. Message text is carried for display only and is never
inspected.
"""

from enum import StrEnum
from typing import Any

import httpx

from board_access.core.errors import ErrorCode


class ErrorCategory(StrEnum):
    """User-facing category of a client failure."""

    ALREADY_USED = "already used"
    INVALID = "invalid"
    EXPIRED = "expired"
    MALFORMED = "malformed"
    SERVER_ERROR = "server error"
    NETWORK_ERROR = "network error"
    RATE_LIMITED = "rate limited"
    CANCELLED = "cancelled"


class ClientError(Exception):
    """Base class for client errors.

    Attributes:
        message: Human-readable description.
        category: User-facing category.
        status_code: HTTP status of the failed response, if any.
    """

    default_category = ErrorCategory.SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.category = category or self.default_category
        self.status_code = status_code
        super().__init__(message)


class MalformedRequest(ClientError):
    """The request was rejected as malformed (400), or failed the local format check."""

    default_category = ErrorCategory.MALFORMED


class CodeRejected(ClientError):
    """The code is unknown or has already been claimed (401)."""

    default_category = ErrorCategory.ALREADY_USED


class ActivationServerError(ClientError):
    """Activation failed on the server (5xx or an unrecognised response)."""

    default_category = ErrorCategory.SERVER_ERROR


class ActivationNetworkError(ClientError):
    """The activation endpoint could not be reached."""

    default_category = ErrorCategory.NETWORK_ERROR


class RateLimited(ClientError):
    """Too many activation attempts from this address (429)."""

    default_category = ErrorCategory.RATE_LIMITED


class AuthenticationCancelled(ClientError):
    """The user dismissed the access code prompt."""

    default_category = ErrorCategory.CANCELLED

    def __init__(self, message: str = "Authentication was cancelled") -> None:
        super().__init__(message)


class SessionRejected(ClientError):
    """A protected call was refused again after re-authentication.

    Fatal: the caller must not retry automatically.
    """

    default_category = ErrorCategory.EXPIRED

    def __init__(
        self, message: str = "Session was rejected after re-authentication"
    ) -> None:
        super().__init__(message, status_code=401)


class GuidanceTransportError(ClientError):
    """A guidance call failed with a non-401 status or a network error.

    Attributes:
        text: Response body as returned by the server.
    """

    def __init__(self, status_code: int, text: str) -> None:
        category = (
            ErrorCategory.NETWORK_ERROR if status_code == 0 else ErrorCategory.SERVER_ERROR
        )
        super().__init__(
            f"Guidance request failed: {status_code} {text}",
            category=category,
            status_code=status_code,
        )
        self.text = text


_ERRORS_BY_CODE: dict[ErrorCode, type[ClientError]] = {
    ErrorCode.MALFORMED_REQUEST: MalformedRequest,
    ErrorCode.CODE_REJECTED: CodeRejected,
    ErrorCode.RATE_LIMITED: RateLimited,
    ErrorCode.CONFIGURATION_ERROR: ActivationServerError,
    ErrorCode.INTERNAL_ERROR: ActivationServerError,
}


def _error_envelope(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    if not isinstance(body, dict) or not isinstance(body.get("error"), dict):
        return {}
    return body["error"]


def classify_activation_error(response: httpx.Response) -> ClientError:
    """Map a non-success activation response to a typed error.

    Args:
        response: The failed HTTP response.

    Returns:
        The ClientError to raise. Responses without a recognised error code
        become ActivationServerError (RateLimited for a bare 429).
    """
    error = _error_envelope(response)
    message = str(error.get("message") or response.reason_phrase or "Activation failed")
    try:
        code = ErrorCode(error.get("code"))
    except ValueError:
        code = None

    if code is not None and code in _ERRORS_BY_CODE:
        return _ERRORS_BY_CODE[code](message, status_code=response.status_code)
    if response.status_code == 429:
        return RateLimited(message, status_code=429)
    return ActivationServerError(message, status_code=response.status_code)
