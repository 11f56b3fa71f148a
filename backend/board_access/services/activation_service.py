"""Access code activation: validate, claim, mint.

Flow for one request:
1. Validate presence of code and clientId, then the 6-digit format
2. Conditional UPDATE to CLAIMED (uncommitted)
3. Fetch the memoized signing secret and mint the session token
4. Commit

Any failure after step 2 rolls the claim back, so a failed call never
mutates the store. The service never retries.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Any

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from board_access.core.auth import mint_session_token
from board_access.core.config import settings
from board_access.core.errors import (
    CodeRejectedError,
    ConfigurationError,
    MalformedRequestError,
)
from board_access.core.secrets import (
    SecretProviderError,
    SigningSecretCache,
    get_signing_secret_cache,
)
from board_access.repositories.access_code_repository import AccessCodeRepository

logger = logging.getLogger(__name__)

# ASCII digits only; \d would also accept other Unicode digit characters
_CODE_PATTERN = re.compile(r"[0-9]{6}")
_MAX_CLIENT_ID_LENGTH = 255

MISSING_FIELDS_MSG = "Access code and client ID are required"
INVALID_FORMAT_MSG = "Invalid code format. Please enter a 6-digit code."


@dataclass(frozen=True)
class ActivationResult:
    """Successful activation.

    Attributes:
        token: Signed session token.
        expires_at: Absolute expiry, epoch seconds.
        expires_in: Seconds remaining at issue time.
    """

    token: str
    expires_at: int
    expires_in: int


def validate_claim_request(code: Any, client_id: Any) -> tuple[str, str]:
    """Check request fields before touching the store.

    Args:
        code: Raw "code" value from the request body.
        client_id: Raw "clientId" value from the request body.

    Returns:
        Tuple of (code, client_id) as strings.

    Raises:
        MalformedRequestError: Missing/empty fields or bad code format.
    """
    if not code or not client_id:
        raise MalformedRequestError(MISSING_FIELDS_MSG)
    if not isinstance(client_id, str):
        raise MalformedRequestError("Client ID must be a string")
    # PostgreSQL rejects NUL in text columns; the column holds 255 chars
    if len(client_id) > _MAX_CLIENT_ID_LENGTH or "\x00" in client_id:
        raise MalformedRequestError("Client ID is invalid")
    if not isinstance(code, str) or not _CODE_PATTERN.fullmatch(code):
        raise MalformedRequestError(INVALID_FORMAT_MSG)
    return code, client_id


async def activate_code(
    db: AsyncSession,
    *,
    code: Any,
    client_id: Any,
    now: int | None = None,
    secret_cache: SigningSecretCache | None = None,
) -> ActivationResult:
    """Redeem an access code into a session token.

    Args:
        db: Async database session (committed or rolled back here).
        code: Raw code from the request.
        client_id: Raw clientId from the request.
        now: Claim time in epoch seconds. Defaults to the current time.
        secret_cache: Signing secret cache. Defaults to the process singleton.

    Returns:
        ActivationResult with the token and its expiry.

    Raises:
        MalformedRequestError: Request failed validation (no store access).
        CodeRejectedError: Code unknown, already claimed, or race lost.
        ConfigurationError: Secret retrieval or signing failed.
    """
    code, client_id = validate_claim_request(code, client_id)

    claimed_at = int(time.time()) if now is None else now
    ttl_seconds = settings.session_ttl_seconds
    expires_at = claimed_at + ttl_seconds
    record_ttl = expires_at + settings.record_grace_seconds

    claimed = await AccessCodeRepository.claim(
        db,
        code=code,
        client_id=client_id,
        claimed_at=claimed_at,
        expires_at=expires_at,
        ttl=record_ttl,
    )
    if not claimed:
        await db.rollback()
        logger.info("Access code claim rejected for client %s", client_id)
        raise CodeRejectedError()

    cache = secret_cache or get_signing_secret_cache()
    try:
        secret = await cache.get()
        token, _ = mint_session_token(
            client_id=client_id,
            code=code,
            issued_at=claimed_at,
            secret=secret,
            ttl_seconds=ttl_seconds,
        )
    except (SecretProviderError, jwt.PyJWTError) as exc:
        await db.rollback()
        logger.error("Session token could not be issued", exc_info=True)
        raise ConfigurationError() from exc

    await db.commit()
    logger.info("Access code claimed by client %s", client_id)
    return ActivationResult(
        token=token,
        expires_at=expires_at,
        expires_in=ttl_seconds,
    )
