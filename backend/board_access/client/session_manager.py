"""Client session manager.

Holds the durable client identity and the current session token, and runs
the interactive activation flow when no valid token is cached.

State machine:

    UNAUTHENTICATED --ensure--> AUTHENTICATING --ok--> AUTHENTICATED
                                      |
                                      +--error/cancel--> FAILED

A new ensure_authenticated() call from FAILED or UNAUTHENTICATED starts a
fresh attempt. Concurrent callers share one in-flight attempt, so at most
one prompt is open at a time.
"""

import asyncio
import logging
import math
import re
import time
import uuid
from collections.abc import Callable
from enum import StrEnum

import jwt

from board_access.client.activation_client import ActivationClient
from board_access.client.errors import AuthenticationCancelled, ErrorCategory, MalformedRequest
from board_access.client.prompt import CodePrompt
from board_access.client.storage import (
    CLIENT_ID_SLOT,
    SESSION_TOKEN_SLOT,
    CredentialStore,
)

logger = logging.getLogger(__name__)

_CODE_PATTERN = re.compile(r"[0-9]{6}")


class SessionState(StrEnum):
    """Authentication state of the client."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


def token_expiry(token: str) -> int | None:
    """Read the exp claim without verifying the signature.

    The client cannot verify tokens (it never holds the secret); the server
    does that on every protected call.

    Returns:
        exp in epoch seconds, or None if the token cannot be parsed.
    """
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, int | float):
        return None
    # json.loads accepts NaN and Infinity
    if not math.isfinite(exp):
        return None
    return int(exp)


def _is_well_formed_client_id(value: str | None) -> bool:
    if not value:
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


class ClientSessionManager:
    """Owns the session token and client identity for one process.

    Args:
        store: Durable credential storage.
        prompt: Asks the user for an access code.
        activation_client: Submits codes to the activation endpoint.
        clock: Returns the current time in epoch seconds.
    """

    def __init__(
        self,
        store: CredentialStore,
        prompt: CodePrompt,
        activation_client: ActivationClient | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._prompt = prompt
        self._activation_client = activation_client or ActivationClient()
        self._clock = clock
        self._state = SessionState.UNAUTHENTICATED
        self._inflight: asyncio.Task[str] | None = None

    @property
    def state(self) -> SessionState:
        """Current state of the session."""
        return self._state

    def is_authenticated(self, now: float | None = None) -> bool:
        """Whether a stored token exists, parses, and has not expired.

        Never raises: an unparseable token counts as not authenticated.
        """
        token = self._store.get(SESSION_TOKEN_SLOT)
        if not token:
            return False
        exp = token_expiry(token)
        if exp is None:
            return False
        current = self._clock() if now is None else now
        return exp > current

    def get_or_create_client_id(self) -> str:
        """Return the stored client identity, creating one if needed.

        A missing or malformed identity is replaced with a new UUID4 and
        persisted. The identity is independent of the token: an expired or
        corrupt token leaves it in place.
        """
        client_id = self._store.get(CLIENT_ID_SLOT)
        if _is_well_formed_client_id(client_id):
            return client_id  # type: ignore[return-value]
        client_id = str(uuid.uuid4())
        self._store.set(CLIENT_ID_SLOT, client_id)
        logger.info("Created new client identity")
        return client_id

    def clear_credentials(self, *, include_identity: bool = False) -> None:
        """Forget the session token, and optionally the client identity.

        Args:
            include_identity: Also drop the client identity (explicit reset,
                or a protected call rejecting the session).
        """
        self._store.delete(SESSION_TOKEN_SLOT)
        if include_identity:
            self._store.delete(CLIENT_ID_SLOT)
        self._state = SessionState.UNAUTHENTICATED

    def mark_failed(self) -> None:
        """Record that the server refused the session after re-authentication."""
        self._state = SessionState.FAILED

    async def ensure_authenticated(self) -> str:
        """Return a valid session token, prompting for a code if needed.

        Returns:
            The session token.

        Raises:
            AuthenticationCancelled: The user dismissed the prompt.
            ClientError: Activation failed; nothing was stored.
        """
        if self.is_authenticated():
            self._state = SessionState.AUTHENTICATED
            return self._store.get(SESSION_TOKEN_SLOT)  # type: ignore[return-value]

        if self._inflight is None:
            self._state = SessionState.AUTHENTICATING
            self._inflight = asyncio.ensure_future(self._authenticate())
            self._inflight.add_done_callback(self._finish_attempt)
        return await asyncio.shield(self._inflight)

    def _finish_attempt(self, task: "asyncio.Task[str]") -> None:
        self._inflight = None
        if task.cancelled() or task.exception() is not None:
            self._state = SessionState.FAILED
        else:
            self._state = SessionState.AUTHENTICATED

    async def _authenticate(self) -> str:
        client_id = self.get_or_create_client_id()

        code = await self._prompt()
        if code is None:
            logger.info("Access code prompt cancelled")
            raise AuthenticationCancelled()
        code = code.strip()
        if not _CODE_PATTERN.fullmatch(code):
            raise MalformedRequest(
                "Invalid code format. Please enter a 6-digit code.",
                category=ErrorCategory.INVALID,
            )

        grant = await self._activation_client.activate(code, client_id)
        self._store.set(SESSION_TOKEN_SLOT, grant.token)
        logger.info("Session activated, expires at %d", grant.expires_at)
        return grant.token
