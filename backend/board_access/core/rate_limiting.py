"""Rate limiting configuration using slowapi.

Security: A six-digit code space is small enough to enumerate, so redemption
attempts are throttled per client IP. Keyed on the remote address because
callers of /activate are unauthenticated by definition.

Usage in routers:
    from board_access.core.rate_limiting import limiter

    @router.post("/activate")
    @limiter.limit(lambda: settings.rate_limit_activate)
    async def activate(request: Request, ...):
        ...
"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from board_access.core.config import settings
from board_access.core.errors import ErrorCode
from board_access.core.responses import ErrorDetail, ErrorResponse

# Global limiter instance
# Configured with in-memory storage (suitable for single-instance deployment)
# For multi-instance, configure Redis storage via RATELIMIT_STORAGE_URL
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Handle rate limit exceeded errors.

    Security: Returns 429 Too Many Requests with standard error envelope.

    Args:
        request: The incoming request.
        exc: The rate limit exception.

    Returns:
        JSONResponse with 429 status and retry-after header.
    """
    # Parse retry-after from exception detail (e.g., "10 per 1 minute")
    # Fallback to 60 seconds if parsing fails
    try:
        retry_after = str(exc.detail.split()[-1])
        int(retry_after.rstrip("s"))
    except (ValueError, AttributeError, IndexError):
        retry_after = "60"

    return JSONResponse(
        status_code=429,
        content=ErrorResponse(
            error=ErrorDetail(
                code=ErrorCode.RATE_LIMITED,
                message=f"Rate limit exceeded: {exc.detail}",
            )
        ).model_dump(exclude_none=True),
        headers={"Retry-After": retry_after},
    )
