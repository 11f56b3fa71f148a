"""Repository for AccessCode operations.

The claim is a single conditional UPDATE. The database serializes concurrent
writers on the same row, so for any code exactly one UPDATE can observe a
claimable status; every other writer re-reads the row after the winner
commits and matches zero rows.
"""

from sqlalchemy import delete, or_, update
from sqlalchemy.ext.asyncio import AsyncSession

from board_access.models.access_code import (
    CLAIMABLE_STATUSES,
    AccessCode,
    AccessCodeStatus,
)


class AccessCodeRepository:
    """Stateless repository for access_codes table operations.

    All methods are static; no instance state.
    """

    @staticmethod
    async def claim(
        db: AsyncSession,
        *,
        code: str,
        client_id: str,
        claimed_at: int,
        expires_at: int,
        ttl: int,
    ) -> bool:
        """Atomically transition a code to CLAIMED.

        The row is only updated when its status is NULL, AVAILABLE or
        ASSIGNED. Unknown codes match no row and are never created.

        Args:
            db: Async database session.
            code: Six-digit access code.
            client_id: Identity of the redeeming device.
            claimed_at: Epoch seconds of the claim.
            expires_at: Epoch seconds when the session expires.
            ttl: Epoch seconds after which the record may be deleted.

        Returns:
            True if this call won the claim, False otherwise.
        """
        stmt = (
            update(AccessCode)
            .where(
                AccessCode.code == code,
                or_(
                    AccessCode.status.is_(None),
                    AccessCode.status.in_([s.value for s in CLAIMABLE_STATUSES]),
                ),
            )
            .values(
                status=AccessCodeStatus.CLAIMED.value,
                client_id=client_id,
                claimed_at=claimed_at,
                expires_at=expires_at,
                ttl=ttl,
            )
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count == 1

    @staticmethod
    async def get(db: AsyncSession, code: str) -> AccessCode | None:
        """Look up a code record.

        Args:
            db: Async database session.
            code: Six-digit access code.

        Returns:
            AccessCode if found, None otherwise.
        """
        return await db.get(AccessCode, code)

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        code: str,
        notes: str,
        created_at: int,
    ) -> bool:
        """Store a new AVAILABLE code unless the code already exists.

        Intended for the single-writer issuance script; concurrent issuance
        is not supported.

        Args:
            db: Async database session.
            code: Six-digit access code.
            notes: Batch label.
            created_at: Epoch seconds of generation.

        Returns:
            True if a record was added, False on collision.
        """
        if await db.get(AccessCode, code) is not None:
            return False
        db.add(
            AccessCode(
                code=code,
                status=AccessCodeStatus.AVAILABLE.value,
                notes=notes,
                created_at=created_at,
            )
        )
        await db.flush()
        return True

    @staticmethod
    async def assign(db: AsyncSession, code: str) -> bool:
        """Mark an AVAILABLE code as ASSIGNED (handed out, not yet redeemed).

        Args:
            db: Async database session.
            code: Six-digit access code.

        Returns:
            True if the code moved to ASSIGNED, False if it was in any other
            state or does not exist.
        """
        stmt = (
            update(AccessCode)
            .where(
                AccessCode.code == code,
                AccessCode.status == AccessCodeStatus.AVAILABLE.value,
            )
            .values(status=AccessCodeStatus.ASSIGNED.value)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count == 1

    @staticmethod
    async def delete_expired(db: AsyncSession, *, now: int) -> int:
        """Delete records whose ttl has passed.

        Records without a ttl (never claimed) are kept.

        Args:
            db: Async database session.
            now: Current epoch seconds.

        Returns:
            Number of deleted rows.
        """
        stmt = delete(AccessCode).where(
            AccessCode.ttl.is_not(None),
            AccessCode.ttl < now,
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count
