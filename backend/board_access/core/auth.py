"""Session token issuance and verification.

Tokens are HS256 JWTs with claims:
- sub: client identity that redeemed the code
- jti: the redeemed access code
- iat / exp: epoch seconds, exp = iat + session lifetime
- app: fixed application tag
"""

from dataclasses import dataclass

import jwt

from board_access.core.config import settings

JWT_ALGORITHM = "HS256"

_REQUIRED_CLAIMS = ["sub", "jti", "iat", "exp"]


class TokenError(ValueError):
    """Token failed signature, expiry or claim validation."""


@dataclass(frozen=True)
class SessionClaims:
    """Verified contents of a session token.

    Attributes:
        client_id: The sub claim.
        code: The jti claim (redeemed access code).
        issued_at: The iat claim, epoch seconds.
        expires_at: The exp claim, epoch seconds.
    """

    client_id: str
    code: str
    issued_at: int
    expires_at: int


def mint_session_token(
    *,
    client_id: str,
    code: str,
    issued_at: int,
    secret: str,
    ttl_seconds: int | None = None,
    app_tag: str | None = None,
) -> tuple[str, int]:
    """Create a signed session token.

    Args:
        client_id: Redeeming client identity (sub).
        code: Redeemed access code (jti).
        issued_at: Claim time in epoch seconds (iat).
        secret: HMAC signing secret.
        ttl_seconds: Session lifetime. Defaults to settings.session_ttl_seconds.
        app_tag: Application tag. Defaults to settings.token_app_tag.

    Returns:
        Tuple of (encoded token, expires_at epoch seconds).
    """
    lifetime = settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds
    expires_at = issued_at + lifetime
    payload = {
        "sub": client_id,
        "jti": code,
        "iat": issued_at,
        "exp": expires_at,
        "app": app_tag or settings.token_app_tag,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM), expires_at


def decode_session_token(
    token: str,
    secret: str,
    *,
    app_tag: str | None = None,
) -> SessionClaims:
    """Verify a session token and extract its claims.

    Args:
        token: Encoded JWT from the Authorization header.
        secret: HMAC signing secret.
        app_tag: Expected app claim. Defaults to settings.token_app_tag.

    Returns:
        SessionClaims for a valid, unexpired token.

    Raises:
        TokenError: For any signature, expiry, or claim failure.
    """
    if not token:
        raise TokenError("Token is missing")
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError("Invalid token") from exc

    if payload.get("app") != (app_tag or settings.token_app_tag):
        raise TokenError("Token was issued for another application")
    try:
        return SessionClaims(
            client_id=str(payload["sub"]),
            code=str(payload["jti"]),
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
        )
    except (TypeError, ValueError) as exc:
        raise TokenError("Invalid token claims") from exc
