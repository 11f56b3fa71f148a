"""Access code issuance and hand-out.

Codes are six digits in 100000-999999 (no leading zero, so they survive
spreadsheets and SMS unchanged), drawn from a CSPRNG. A draw that collides
with an existing code is discarded and redrawn.
"""

import logging
import secrets
import time
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from board_access.repositories.access_code_repository import AccessCodeRepository

logger = logging.getLogger(__name__)

_CODE_MIN = 100_000
_CODE_SPAN = 900_000

DEFAULT_NOTES = "Personal Board Access"

# Upper bound on consecutive collisions before giving up on a nearly full space
_MAX_COLLISIONS = 1_000


class CodeSpaceExhaustedError(RuntimeError):
    """Too many consecutive collisions while drawing new codes."""


@dataclass
class GenerationResult:
    """Outcome of a generation run.

    Attributes:
        codes: Newly created codes, in creation order.
        collisions: Draws discarded because the code already existed.
        notes: Batch label stored on every created code.
    """

    notes: str
    codes: list[str] = field(default_factory=list)
    collisions: int = 0

    @property
    def created(self) -> int:
        """Number of codes created."""
        return len(self.codes)


def make_code() -> str:
    """Draw one six-digit code."""
    return str(_CODE_MIN + secrets.randbelow(_CODE_SPAN))


async def generate_codes(
    db: AsyncSession,
    *,
    count: int = 100,
    notes: str = DEFAULT_NOTES,
    now: int | None = None,
) -> GenerationResult:
    """Create ``count`` new AVAILABLE codes and commit them.

    Args:
        db: Async database session.
        count: Number of codes to create.
        notes: Batch label stored with each code.
        now: Creation time in epoch seconds. Defaults to the current time.

    Returns:
        GenerationResult listing the created codes.

    Raises:
        ValueError: If count is negative.
        CodeSpaceExhaustedError: If the code space is effectively full.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    created_at = int(time.time()) if now is None else now
    result = GenerationResult(notes=notes)
    consecutive_collisions = 0

    while result.created < count:
        code = make_code()
        added = await AccessCodeRepository.create(
            db, code=code, notes=notes, created_at=created_at
        )
        if added:
            result.codes.append(code)
            consecutive_collisions = 0
            continue

        result.collisions += 1
        consecutive_collisions += 1
        if consecutive_collisions >= _MAX_COLLISIONS:
            raise CodeSpaceExhaustedError(
                f"Gave up after {consecutive_collisions} consecutive collisions"
            )

    await db.commit()
    logger.info(
        "Generated %d access codes (%d collisions) notes=%r",
        result.created,
        result.collisions,
        notes,
    )
    return result


async def assign_code(db: AsyncSession, code: str) -> bool:
    """Mark a code as handed out to a person and commit.

    Args:
        db: Async database session.
        code: Six-digit access code.

    Returns:
        True if the code moved from AVAILABLE to ASSIGNED. False leaves the
        record unchanged (unknown, already assigned, or claimed).
    """
    assigned = await AccessCodeRepository.assign(db, code)
    if not assigned:
        await db.rollback()
        logger.warning("Access code %s is not AVAILABLE; not assigned", code)
        return False
    await db.commit()
    logger.info("Access code %s assigned", code)
    return True
