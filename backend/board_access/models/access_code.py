"""Access code model - one record per distributable 6-digit code.

Timestamps are epoch seconds (integers) so they can be copied straight into
JWT claims and compared against ``ttl`` without timezone handling.
"""

from enum import StrEnum

from sqlalchemy import BigInteger, CheckConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from board_access.models.base import Base


class AccessCodeStatus(StrEnum):
    """Lifecycle of an access code.

    A NULL status column is the UNSET state. UNSET, AVAILABLE and ASSIGNED
    are pre-claim states; CLAIMED is terminal.
    """

    AVAILABLE = "AVAILABLE"
    ASSIGNED = "ASSIGNED"
    CLAIMED = "CLAIMED"


# Statuses from which a claim may proceed (NULL is handled separately)
CLAIMABLE_STATUSES: tuple[AccessCodeStatus, ...] = (
    AccessCodeStatus.AVAILABLE,
    AccessCodeStatus.ASSIGNED,
)


class AccessCode(Base):
    """A single-use access code and, once claimed, its binding to a client.

    Attributes:
        code: Six ASCII digits, primary key.
        status: AVAILABLE, ASSIGNED, CLAIMED, or None (unset).
        client_id: Redeeming device identity. Set only on claim.
        claimed_at: Epoch seconds of the successful claim.
        expires_at: claimed_at + session lifetime.
        ttl: expires_at + grace period; the sweep deletes the row after it.
        notes: Free-text label given when the code was generated.
        created_at: Epoch seconds of generation.
    """

    __tablename__ = "access_codes"
    __table_args__ = (
        CheckConstraint(
            "status IS NULL OR status IN ('AVAILABLE', 'ASSIGNED', 'CLAIMED')",
            name="ck_access_codes_status",
        ),
        Index("ix_access_codes_ttl", "ttl"),
    )

    code: Mapped[str] = mapped_column(String(6), primary_key=True)
    status: Mapped[str | None] = mapped_column(String(16), nullable=True)
    client_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    claimed_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    expires_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    ttl: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
