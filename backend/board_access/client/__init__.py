"""Client side of the access code protocol.

Usage:
    from board_access.client import build_gateway

    gateway = build_gateway()
    advice = await gateway.goal_alignment({"goals": [...]})
"""

from board_access.client.activation_client import ActivationClient, ActivationGrant
from board_access.client.config import ClientSettings, client_settings
from board_access.client.errors import (
    ActivationNetworkError,
    ActivationServerError,
    AuthenticationCancelled,
    ClientError,
    CodeRejected,
    ErrorCategory,
    GuidanceTransportError,
    MalformedRequest,
    RateLimited,
    SessionRejected,
    classify_activation_error,
)
from board_access.client.gateway import GuidanceGateway, GuidanceType
from board_access.client.prompt import CodePrompt, ConsolePrompt
from board_access.client.session_manager import (
    ClientSessionManager,
    SessionState,
    token_expiry,
)
from board_access.client.storage import (
    CredentialStore,
    FileCredentialStore,
    MemoryCredentialStore,
)


def build_gateway(prompt: CodePrompt | None = None) -> GuidanceGateway:
    """Wire a gateway with file-backed credentials and a console prompt."""
    session = ClientSessionManager(
        FileCredentialStore(client_settings.credentials_dir),
        prompt or ConsolePrompt(),
    )
    return GuidanceGateway(session)


__all__ = [
    "ActivationClient",
    "ActivationGrant",
    "ActivationNetworkError",
    "ActivationServerError",
    "AuthenticationCancelled",
    "ClientError",
    "ClientSessionManager",
    "ClientSettings",
    "CodePrompt",
    "CodeRejected",
    "ConsolePrompt",
    "CredentialStore",
    "ErrorCategory",
    "FileCredentialStore",
    "GuidanceGateway",
    "GuidanceTransportError",
    "GuidanceType",
    "MalformedRequest",
    "MemoryCredentialStore",
    "RateLimited",
    "SessionRejected",
    "SessionState",
    "build_gateway",
    "classify_activation_error",
    "client_settings",
    "token_expiry",
]
