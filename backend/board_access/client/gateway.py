"""Guidance gateway: bearer-authenticated calls with one re-authentication.

Every call carries the current session token. A 401 means the server no
longer accepts the session: the token and client identity are cleared, the
user is prompted for a fresh code, and the call is repeated once. A second
401 is fatal. Persistent 401s (clock skew, revoked secret) must surface to
the caller rather than re-prompt forever.
"""

import logging
from enum import StrEnum
from typing import Any

import httpx

from board_access.client.config import client_settings
from board_access.client.errors import GuidanceTransportError, SessionRejected
from board_access.client.session_manager import ClientSessionManager

logger = logging.getLogger(__name__)

# Re-authentications allowed per call
MAX_REAUTHENTICATIONS = 1


class GuidanceType(StrEnum):
    """Kinds of AI guidance the service can produce."""

    FORM_COMPLETION = "form_completion"
    GOAL_ALIGNMENT = "goal_alignment"
    CONNECTION_SUGGESTIONS = "connection_suggestions"
    BOARD_ANALYSIS = "board_analysis"
    MENTOR_ADVISOR = "mentor_advisor"
    BOARD_MEMBER_ADVISOR = "board_member_advisor"
    GOALS_ADVISOR = "goals_advisor"
    BOARD_ANALYSIS_ADVISOR = "board_analysis_advisor"


class GuidanceGateway:
    """Sends authenticated requests to protected endpoints.

    Args:
        session: Session manager supplying tokens.
        base_url: API root. Defaults to client settings.
        timeout: Request timeout in seconds. Defaults to client settings.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(
        self,
        session: ClientSessionManager,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._base_url = base_url or client_settings.api_base_url
        self._timeout = (
            client_settings.request_timeout_seconds if timeout is None else timeout
        )
        self._transport = transport

    async def call(self, endpoint: str, payload: dict[str, Any]) -> httpx.Response:
        """POST a JSON payload to a protected endpoint.

        Args:
            endpoint: Path relative to the API root.
            payload: JSON body.

        Returns:
            The successful response.

        Raises:
            SessionRejected: 401 again after re-authenticating.
            GuidanceTransportError: Any other non-success status, or the
                server could not be reached (status_code 0).
            ClientError: Re-authentication itself failed or was cancelled.
        """
        reauthentications = 0
        while True:
            token = await self._session.ensure_authenticated()
            resp = await self._post(endpoint, payload, token)
            if resp.status_code != 401:
                break
            if reauthentications >= MAX_REAUTHENTICATIONS:
                logger.warning("Session rejected again after re-authentication")
                self._session.clear_credentials()
                self._session.mark_failed()
                raise SessionRejected()
            logger.info("Session rejected by %s; re-authenticating", endpoint)
            self._session.clear_credentials(include_identity=True)
            reauthentications += 1

        if resp.is_error:
            raise GuidanceTransportError(resp.status_code, resp.text)
        return resp

    async def request_guidance(
        self,
        guidance_type: GuidanceType | str,
        data: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> Any:
        """Request AI guidance and return the decoded JSON response.

        Args:
            guidance_type: Kind of guidance.
            data: User data the guidance is about.
            context: Optional extra context for the prompt.
        """
        resp = await self.call(
            client_settings.guidance_path,
            {
                "type": str(guidance_type),
                "data": data,
                "context": context or {},
            },
        )
        return resp.json()

    async def form_completion(
        self, data: dict[str, Any], context: dict[str, Any] | None = None
    ) -> Any:
        return await self.request_guidance(GuidanceType.FORM_COMPLETION, data, context)

    async def goal_alignment(
        self, data: dict[str, Any], context: dict[str, Any] | None = None
    ) -> Any:
        return await self.request_guidance(GuidanceType.GOAL_ALIGNMENT, data, context)

    async def connection_suggestions(
        self, data: dict[str, Any], context: dict[str, Any] | None = None
    ) -> Any:
        return await self.request_guidance(
            GuidanceType.CONNECTION_SUGGESTIONS, data, context
        )

    async def board_analysis(
        self, data: dict[str, Any], context: dict[str, Any] | None = None
    ) -> Any:
        return await self.request_guidance(GuidanceType.BOARD_ANALYSIS, data, context)

    async def mentor_advisor(
        self, data: dict[str, Any], context: dict[str, Any] | None = None
    ) -> Any:
        return await self.request_guidance(GuidanceType.MENTOR_ADVISOR, data, context)

    async def board_member_advisor(
        self, data: dict[str, Any], context: dict[str, Any] | None = None
    ) -> Any:
        return await self.request_guidance(
            GuidanceType.BOARD_MEMBER_ADVISOR, data, context
        )

    async def goals_advisor(
        self, data: dict[str, Any], context: dict[str, Any] | None = None
    ) -> Any:
        return await self.request_guidance(GuidanceType.GOALS_ADVISOR, data, context)

    async def board_analysis_advisor(
        self, data: dict[str, Any], context: dict[str, Any] | None = None
    ) -> Any:
        return await self.request_guidance(
            GuidanceType.BOARD_ANALYSIS_ADVISOR, data, context
        )

    async def _post(
        self, endpoint: str, payload: dict[str, Any], token: str
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                return await client.post(
                    endpoint,
                    json=payload,
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.RequestError as exc:
            logger.warning("Guidance request to %s failed: %s", endpoint, exc)
            raise GuidanceTransportError(0, str(exc)) from exc
