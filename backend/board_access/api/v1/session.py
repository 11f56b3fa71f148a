"""Session inspection endpoint.

Endpoints:
- GET /session: return the verified claims of the caller's bearer token
"""

from fastapi import APIRouter

from board_access.api.deps import CurrentSession
from board_access.core.responses import DataResponse
from board_access.schemas.activation import SessionInfo

router = APIRouter()


@router.get("/session")
async def get_session(claims: CurrentSession) -> DataResponse[SessionInfo]:
    """Confirm that a session token is still accepted.

    Returns:
        DataResponse with clientId, code, issuedAt and expiresAt.
    """
    return DataResponse(
        data=SessionInfo(
            client_id=claims.client_id,
            code=claims.code,
            issued_at=claims.issued_at,
            expires_at=claims.expires_at,
        )
    )
