"""API error classes and the structured error-code vocabulary.

Every error response carries one ErrorCode value. The client matches on the
code exactly and never inspects the human-readable message.
"""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable error codes shared by the server and the client."""

    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    CODE_REJECTED = "CODE_REJECTED"
    SESSION_REJECTED = "SESSION_REJECTED"
    RATE_LIMITED = "RATE_LIMITED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class APIError(Exception):
    """Base class for API errors.

    All API errors have a code, message, and HTTP status.
    Subclasses set default status_code.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional list of additional error details.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class MalformedRequestError(APIError):
    """Missing fields or a code failing the 6-digit format check (400).

    Not retried by the client.
    """

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_REQUEST,
            message=message,
            status_code=400,
            details=details,
        )


class CodeRejectedError(APIError):
    """Conditional claim failed (401).

    Raised when the code is already CLAIMED (by this or another client), lost
    a concurrent claim race, or is unknown to the store. The three cases are
    indistinguishable to the caller.
    """

    def __init__(self, message: str = "Invalid or already used access code") -> None:
        super().__init__(
            code=ErrorCode.CODE_REJECTED,
            message=message,
            status_code=401,
        )


class SessionRejectedError(APIError):
    """Bearer credential missing, malformed, expired or forged (401).

    Security: the message never says which check failed.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            code=ErrorCode.SESSION_REJECTED,
            message=message,
            status_code=401,
        )


class ConfigurationError(APIError):
    """Signing secret retrieval or token signing failed (500).

    Fatal for the invocation. The cause is logged server-side; the client
    only ever sees the generic message.
    """

    def __init__(
        self, message: str = "Internal error processing your request"
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=message,
            status_code=500,
        )
