"""HTTP client for the activation endpoint."""

import logging
from dataclasses import dataclass

import httpx

from board_access.client.config import client_settings
from board_access.client.errors import (
    ActivationNetworkError,
    ActivationServerError,
    classify_activation_error,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivationGrant:
    """Token returned by a successful activation.

    Attributes:
        token: Session token.
        expires_at: Absolute expiry, epoch seconds.
        expires_in: Lifetime in seconds at issue time.
    """

    token: str
    expires_at: int
    expires_in: int


class ActivationClient:
    """Submits {code, clientId} to POST /activate.

    Args:
        base_url: API root. Defaults to client settings.
        timeout: Request timeout in seconds. Defaults to client settings.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url or client_settings.api_base_url
        self._timeout = (
            client_settings.request_timeout_seconds if timeout is None else timeout
        )
        self._transport = transport

    async def activate(self, code: str, client_id: str) -> ActivationGrant:
        """Redeem a code for a session token.

        Args:
            code: Six-digit access code.
            client_id: Durable client identity.

        Returns:
            ActivationGrant with the new token.

        Raises:
            ActivationNetworkError: The endpoint could not be reached.
            ClientError: Typed error classified from the response envelope.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(
                    client_settings.activate_path,
                    json={"code": code, "clientId": client_id},
                )
        except httpx.RequestError as exc:
            logger.warning("Activation request failed: %s", exc)
            raise ActivationNetworkError(
                "Could not reach the activation service"
            ) from exc

        if resp.is_error:
            raise classify_activation_error(resp)
        return _parse_grant(resp)


def _parse_grant(resp: httpx.Response) -> ActivationGrant:
    try:
        body = resp.json()
        token = body["token"]
        grant = ActivationGrant(
            token=token,
            expires_at=int(body["expiresAt"]),
            expires_in=int(body["expiresIn"]),
        )
    except (ValueError, KeyError, TypeError) as exc:
        raise ActivationServerError(
            "Activation response was not understood", status_code=resp.status_code
        ) from exc
    if not isinstance(token, str) or not token:
        raise ActivationServerError(
            "Activation response did not include a token",
            status_code=resp.status_code,
        )
    return grant
