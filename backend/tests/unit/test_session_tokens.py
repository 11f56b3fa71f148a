"""Tests for session token minting and verification."""

import jwt
import pytest

from board_access.core.auth import (
    JWT_ALGORITHM,
    TokenError,
    decode_session_token,
    mint_session_token,
)
from tests.conftest import TEST_CLIENT_ID, TEST_SIGNING_SECRET, create_test_token

_ISSUED_AT = 1_700_000_000


def _mint(**overrides):
    kwargs = {
        "client_id": TEST_CLIENT_ID,
        "code": "123456",
        "issued_at": _ISSUED_AT,
        "secret": TEST_SIGNING_SECRET,
    }
    kwargs.update(overrides)
    return mint_session_token(**kwargs)


class TestMintSessionToken:
    """Token claims and signing."""

    def test_claims(self):
        """Token carries sub, jti, iat, exp and app."""
        token, expires_at = _mint()
        payload = jwt.decode(
            token,
            TEST_SIGNING_SECRET,
            algorithms=[JWT_ALGORITHM],
            options={"verify_exp": False},
        )
        assert payload == {
            "sub": TEST_CLIENT_ID,
            "jti": "123456",
            "iat": _ISSUED_AT,
            "exp": _ISSUED_AT + 604800,
            "app": "personal-board",
        }
        assert expires_at == _ISSUED_AT + 604800

    def test_signed_with_hs256(self):
        """Header names the HS256 algorithm."""
        token, _ = _mint()
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_custom_lifetime(self):
        """An explicit lifetime overrides the configured one."""
        _, expires_at = _mint(ttl_seconds=60)
        assert expires_at == _ISSUED_AT + 60


class TestDecodeSessionToken:
    """Verification of bearer tokens."""

    def test_valid_token(self):
        """A fresh token decodes to its claims."""
        token = create_test_token()
        claims = decode_session_token(token, TEST_SIGNING_SECRET)
        assert claims.client_id == TEST_CLIENT_ID
        assert claims.code == "123456"
        assert claims.expires_at - claims.issued_at == 604800

    def test_expired_token(self):
        """exp in the past is rejected."""
        token = create_test_token(issued_at=_ISSUED_AT)
        with pytest.raises(TokenError, match="expired"):
            decode_session_token(token, TEST_SIGNING_SECRET)

    def test_wrong_secret(self):
        """A forged signature is rejected."""
        token = create_test_token(secret="another-secret-of-sufficient-length-000")
        with pytest.raises(TokenError, match="Invalid token"):
            decode_session_token(token, TEST_SIGNING_SECRET)

    def test_wrong_app(self):
        """Tokens for another application are rejected."""
        token = create_test_token(app="other-app")
        with pytest.raises(TokenError, match="another application"):
            decode_session_token(token, TEST_SIGNING_SECRET)

    def test_missing_app(self):
        """The app claim is mandatory."""
        token = create_test_token(app=None)
        with pytest.raises(TokenError):
            decode_session_token(token, TEST_SIGNING_SECRET)

    def test_missing_jti(self):
        """Tokens without jti are rejected."""
        token = jwt.encode(
            {"sub": TEST_CLIENT_ID, "iat": 1, "exp": 4_000_000_000, "app": "personal-board"},
            TEST_SIGNING_SECRET,
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(TokenError):
            decode_session_token(token, TEST_SIGNING_SECRET)

    def test_garbage(self):
        """Non-JWT input is rejected, not crashed on."""
        with pytest.raises(TokenError):
            decode_session_token("not-a-token", TEST_SIGNING_SECRET)

    def test_empty(self):
        """An empty token is rejected."""
        with pytest.raises(TokenError):
            decode_session_token("", TEST_SIGNING_SECRET)

    def test_none_algorithm_rejected(self):
        """Unsigned tokens are never accepted."""
        token = jwt.encode(
            {
                "sub": TEST_CLIENT_ID,
                "jti": "123456",
                "iat": 1,
                "exp": 4_000_000_000,
                "app": "personal-board",
            },
            key=None,
            algorithm="none",
        )
        with pytest.raises(TokenError):
            decode_session_token(token, TEST_SIGNING_SECRET)
