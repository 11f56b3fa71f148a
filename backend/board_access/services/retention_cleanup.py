"""Retention cleanup for claimed access codes.

Relational stores have no native row TTL, so records whose ``ttl`` has passed
are deleted here. Intended to run on a schedule (cron, systemd timer) via
``python -m scripts.purge_expired_codes``.
"""

import logging
import time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from board_access.core.errors import APIError, ErrorCode
from board_access.repositories.access_code_repository import AccessCodeRepository

logger = logging.getLogger(__name__)


class CleanupError(APIError):
    """Raised when a cleanup operation fails at the database level."""

    def __init__(self, message: str) -> None:
        super().__init__(
            code=ErrorCode.INTERNAL_ERROR,
            message=message,
            status_code=500,
        )


async def cleanup_expired_codes(db: AsyncSession, *, now: int | None = None) -> int:
    """Delete access code records past their ttl and commit.

    Args:
        db: Database session.
        now: Current epoch seconds. Defaults to the current time.

    Returns:
        Number of records deleted.

    Raises:
        CleanupError: If the database operation fails.
    """
    current = int(time.time()) if now is None else now
    try:
        deleted = await AccessCodeRepository.delete_expired(db, now=current)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Expired access code cleanup failed: %s", exc)
        raise CleanupError("Expired access code cleanup failed") from exc

    logger.info("Deleted %d expired access code records", deleted)
    return deleted
