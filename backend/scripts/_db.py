"""Shared session plumbing for operator scripts."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from board_access.core.config import settings


def configure_logging() -> None:
    """Send logs at LOG_LEVEL to stderr in the format all scripts share."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def script_session() -> AsyncIterator[AsyncSession]:
    """Open a session against the configured database, disposing the engine after."""
    engine = create_async_engine(settings.database_url, echo=False)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as session:
            yield session
    finally:
        await engine.dispose()
