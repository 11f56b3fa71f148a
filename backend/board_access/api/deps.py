"""Shared dependencies for API endpoints.

Protected endpoints depend on ``CurrentSession``: the bearer token is verified
with the same memoized signing secret the activation endpoint signs with.
"""

import logging
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from board_access.core.auth import SessionClaims, TokenError, decode_session_token
from board_access.core.database import get_db
from board_access.core.errors import ConfigurationError, SessionRejectedError
from board_access.core.secrets import SecretProviderError, get_signing_secret_cache

logger = logging.getLogger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_session_claims(
    authorization: Annotated[str | None, Header()] = None,
) -> SessionClaims:
    """Verify the bearer session token on a protected request.

    Validation steps:
    1. Read "Authorization: Bearer <token>"
    2. Verify HS256 signature with the cached signing secret
    3. Verify exp and presence of sub/jti/iat
    4. Verify the app claim matches this application

    Args:
        authorization: Authorization header (injected by FastAPI).

    Returns:
        Claims of a valid session token.

    Raises:
        SessionRejectedError: 401 for any credential failure. The response
            never says which check failed.
        ConfigurationError: 500 if the signing secret is unavailable.
    """
    if not authorization:
        raise SessionRejectedError()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise SessionRejectedError()

    try:
        secret = await get_signing_secret_cache().get()
    except SecretProviderError as exc:
        logger.error("Signing secret unavailable for token verification", exc_info=True)
        raise ConfigurationError() from exc

    try:
        return decode_session_token(token.strip(), secret)
    except TokenError as exc:
        logger.info("Session token rejected: %s", exc)
        raise SessionRejectedError() from exc


CurrentSession = Annotated[SessionClaims, Depends(get_session_claims)]
