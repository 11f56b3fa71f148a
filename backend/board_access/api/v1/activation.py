"""Access code activation endpoint.

Endpoints:
- POST /activate: redeem a six-digit access code for a session token

The body is read by hand rather than through a Pydantic model so that
base64-encoded bodies (declared with X-Body-Encoding) are decoded before
parsing, and so that missing fields and bad formats share one 400 response.
"""

from fastapi import APIRouter, Request

from board_access.api.deps import DbSession
from board_access.core.config import settings
from board_access.core.rate_limiting import limiter
from board_access.core.request_body import read_json_body
from board_access.schemas.activation import ActivateResponse
from board_access.services.activation_service import activate_code

router = APIRouter()


@router.post("/activate")
@limiter.limit(lambda: settings.rate_limit_activate)
async def activate(request: Request, db: DbSession) -> ActivateResponse:
    """Redeem an access code.

    Request body: {"code": "123456", "clientId": "<device id>"}

    Responses:
    - 200 {"token", "expiresAt", "expiresIn"}
    - 400 MALFORMED_REQUEST: missing fields or not six digits
    - 401 CODE_REJECTED: unknown, already claimed, or race lost
    - 429 RATE_LIMITED
    - 500 CONFIGURATION_ERROR: signing secret unavailable
    """
    body = await read_json_body(request)
    result = await activate_code(
        db,
        code=body.get("code"),
        client_id=body.get("clientId"),
    )
    return ActivateResponse(
        token=result.token,
        expires_at=result.expires_at,
        expires_in=result.expires_in,
    )
