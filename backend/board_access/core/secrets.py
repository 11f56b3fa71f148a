"""Signing-secret retrieval and process-wide memoization.

The HS256 key for session tokens lives in a secure parameter store. It is
fetched on first use and held for the life of the process. Two cold callers
racing may both fetch; the value is immutable, so the duplicate fetch is
harmless and no lock is taken.

Usage:
    secret = await get_signing_secret_cache().get()
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from board_access.core.config import settings

logger = logging.getLogger(__name__)


class SecretProviderError(Exception):
    """The signing secret could not be retrieved."""


class SecretProvider(ABC):
    """Source of the token signing secret."""

    @abstractmethod
    async def fetch(self) -> str:
        """Retrieve the current secret value.

        Returns:
            Non-empty secret string.

        Raises:
            SecretProviderError: If the secret is missing or unreachable.
        """


class SSMSecretProvider(SecretProvider):
    """Reads a SecureString parameter from AWS SSM Parameter Store.

    Args:
        parameter_name: Full parameter path, e.g. "/personal-board/jwt-secret".
        region_name: AWS region. Empty uses the boto3 default chain.
        client: Optional pre-built SSM client (tests inject a stub).
    """

    def __init__(
        self,
        parameter_name: str,
        region_name: str = "",
        client: Any | None = None,
    ) -> None:
        self._parameter_name = parameter_name
        self._region_name = region_name or None
        self._client = client

    async def fetch(self) -> str:
        """Fetch and decrypt the parameter on a worker thread."""
        return await asyncio.to_thread(self._fetch_sync)

    def _fetch_sync(self) -> str:
        client = self._client or boto3.client("ssm", region_name=self._region_name)
        try:
            response = client.get_parameter(
                Name=self._parameter_name,
                WithDecryption=True,
            )
            value: str = response["Parameter"]["Value"]
        except (BotoCoreError, ClientError, KeyError) as exc:
            raise SecretProviderError(
                f"Failed to read SSM parameter {self._parameter_name}"
            ) from exc
        if not value:
            raise SecretProviderError(f"SSM parameter {self._parameter_name} is empty")
        return value


class StaticSecretProvider(SecretProvider):
    """Serves a secret supplied directly (JWT_SECRET env var, tests)."""

    def __init__(self, value: str) -> None:
        self._value = value

    async def fetch(self) -> str:
        """Return the configured value."""
        if not self._value:
            raise SecretProviderError("JWT_SECRET is not configured")
        return self._value


class SigningSecretCache:
    """Lazily fetched, memoized signing secret.

    Note: Safe for concurrent coroutines without locking. A failed fetch is
    not cached, so the next request tries again.
    """

    def __init__(self, provider: SecretProvider) -> None:
        self._provider = provider
        self._secret: str | None = None

    @property
    def is_loaded(self) -> bool:
        """Whether the secret has been fetched in this process."""
        return self._secret is not None

    async def get(self) -> str:
        """Return the cached secret, fetching it on first use.

        Raises:
            SecretProviderError: Propagated from the provider.
        """
        if self._secret is None:
            value = await self._provider.fetch()
            logger.info("Signing secret loaded from %s", type(self._provider).__name__)
            self._secret = value
        return self._secret


def build_secret_provider() -> SecretProvider:
    """Build the provider selected by SECRET_PROVIDER."""
    if settings.secret_provider == "ssm":
        return SSMSecretProvider(
            settings.jwt_secret_parameter,
            region_name=settings.aws_region,
        )
    return StaticSecretProvider(settings.jwt_secret.get_secret_value())


# Singleton instance for the process
_secret_cache: SigningSecretCache | None = None


def get_signing_secret_cache() -> SigningSecretCache:
    """Get the process-wide signing secret cache.

    Returns:
        The SigningSecretCache singleton.
    """
    global _secret_cache
    if _secret_cache is None:
        _secret_cache = SigningSecretCache(build_secret_provider())
    return _secret_cache


def set_secret_provider(provider: SecretProvider) -> None:
    """Replace the singleton with a cache around the given provider (for testing)."""
    global _secret_cache
    _secret_cache = SigningSecretCache(provider)


def reset_signing_secret_cache() -> None:
    """Drop the cached secret so the next request fetches again (for testing)."""
    global _secret_cache
    _secret_cache = None
