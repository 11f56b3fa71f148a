"""SQLAlchemy ORM models for the access-code store.

    from board_access.models import AccessCode, AccessCodeStatus
"""

from board_access.models.access_code import (
    CLAIMABLE_STATUSES,
    AccessCode,
    AccessCodeStatus,
)
from board_access.models.base import Base

__all__ = [
    "Base",
    "AccessCode",
    "AccessCodeStatus",
    "CLAIMABLE_STATUSES",
]
