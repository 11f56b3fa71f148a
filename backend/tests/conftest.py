"""Shared fixtures.

The code store runs on SQLite (aiosqlite) in a per-test temp file, so
concurrent claims use real separate connections and real write locking.
"""

import time
from collections.abc import AsyncGenerator, Iterator

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from board_access.core.config import settings
from board_access.core.rate_limiting import limiter
from board_access.core.secrets import (
    StaticSecretProvider,
    reset_signing_secret_cache,
    set_secret_provider,
)
from board_access.models import AccessCode, AccessCodeStatus, Base

# Security: This is a test-only secret. Production reads it from SSM.
TEST_SIGNING_SECRET = "test-signing-secret-that-is-at-least-32-chars"  # nosec B105  # gitleaks:allow

TEST_CLIENT_ID = "3f2c1a9e-5b7d-4e21-9c55-0d8a6f4b2e17"


def create_test_token(
    *,
    client_id: str = TEST_CLIENT_ID,
    code: str = "123456",
    issued_at: int | None = None,
    expires_at: int | None = None,
    secret: str = TEST_SIGNING_SECRET,
    app: str | None = "personal-board",
) -> str:
    """Create a signed session token for tests.

    Args:
        client_id: sub claim.
        code: jti claim.
        issued_at: iat claim. Defaults to now.
        expires_at: exp claim. Defaults to iat + session lifetime.
        secret: Signing secret.
        app: app claim. None omits it.

    Returns:
        Encoded JWT string.
    """
    iat = int(time.time()) if issued_at is None else issued_at
    payload: dict[str, object] = {
        "sub": client_id,
        "jti": code,
        "iat": iat,
        "exp": iat + settings.session_ttl_seconds if expires_at is None else expires_at,
    }
    if app is not None:
        payload["app"] = app
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def signing_secret() -> Iterator[str]:
    """Serve a static signing secret instead of SSM and reset after test."""
    set_secret_provider(StaticSecretProvider(TEST_SIGNING_SECRET))
    yield TEST_SIGNING_SECRET
    reset_signing_secret_cache()


@pytest.fixture(autouse=True)
def _disable_rate_limit() -> Iterator[None]:
    """Turn the shared limiter off; rate limit tests re-enable it explicitly."""
    original = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = original


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a SQLite code store in a temp file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'access_codes.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


async def seed_code(
    session_factory: async_sessionmaker[AsyncSession],
    code: str,
    status: AccessCodeStatus | None = AccessCodeStatus.AVAILABLE,
    **columns: object,
) -> None:
    """Insert one access code record and commit it."""
    async with session_factory() as session:
        session.add(
            AccessCode(
                code=code,
                status=status.value if status is not None else None,
                **columns,
            )
        )
        await session.commit()


async def load_code(
    session_factory: async_sessionmaker[AsyncSession], code: str
) -> AccessCode | None:
    """Read an access code record in a fresh session."""
    async with session_factory() as session:
        return await session.get(AccessCode, code)


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the application, backed by the test store.

    Sets up:
    - Test database connection via dependency override
    - httpx.AsyncClient with ASGI transport
    """
    from board_access.core.database import get_db
    from board_access.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
