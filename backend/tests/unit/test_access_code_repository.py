"""Tests for AccessCodeRepository.

Covers:
- claim: every pre-claim state, terminal CLAIMED, unknown codes,
  concurrent claims with exactly one winner
- create: new codes, collisions
- assign: AVAILABLE only
- delete_expired: ttl boundary, unclaimed records kept
"""

import asyncio

import pytest

from board_access.models import AccessCodeStatus
from board_access.repositories.access_code_repository import AccessCodeRepository
from tests.conftest import load_code, seed_code

_NOW = 1_700_000_000
_EXPIRES_AT = _NOW + 604800
_TTL = _EXPIRES_AT + 86400


async def _claim(session, code: str, client_id: str = "client-a") -> bool:
    return await AccessCodeRepository.claim(
        session,
        code=code,
        client_id=client_id,
        claimed_at=_NOW,
        expires_at=_EXPIRES_AT,
        ttl=_TTL,
    )


# =============================================================================
# Tests: claim
# =============================================================================


class TestClaim:
    """Conditional claim transition."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status",
        [None, AccessCodeStatus.AVAILABLE, AccessCodeStatus.ASSIGNED],
        ids=["unset", "available", "assigned"],
    )
    async def test_pre_claim_states_are_claimable(self, session_factory, status):
        """UNSET, AVAILABLE and ASSIGNED all move to CLAIMED."""
        await seed_code(session_factory, "111111", status=status)

        async with session_factory() as session:
            assert await _claim(session, "111111") is True
            await session.commit()

        record = await load_code(session_factory, "111111")
        assert record.status == AccessCodeStatus.CLAIMED
        assert record.client_id == "client-a"
        assert record.claimed_at == _NOW
        assert record.expires_at == _EXPIRES_AT
        assert record.ttl == _TTL

    @pytest.mark.asyncio
    async def test_claimed_is_terminal(self, session_factory):
        """A claimed code cannot be claimed again, even by its owner."""
        await seed_code(session_factory, "222222")
        async with session_factory() as session:
            assert await _claim(session, "222222", "client-a") is True
            await session.commit()

        async with session_factory() as session:
            assert await _claim(session, "222222", "client-a") is False
            assert await _claim(session, "222222", "client-b") is False
            await session.commit()

        record = await load_code(session_factory, "222222")
        assert record.client_id == "client-a"

    @pytest.mark.asyncio
    async def test_unknown_code_is_not_created(self, session_factory):
        """Claiming a code that was never issued fails and stores nothing."""
        async with session_factory() as session:
            assert await _claim(session, "999999") is False
            await session.commit()

        assert await load_code(session_factory, "999999") is None

    @pytest.mark.asyncio
    async def test_rollback_leaves_code_claimable(self, session_factory):
        """An uncommitted claim that is rolled back changes nothing."""
        await seed_code(session_factory, "333333")
        async with session_factory() as session:
            assert await _claim(session, "333333") is True
            await session.rollback()

        record = await load_code(session_factory, "333333")
        assert record.status == AccessCodeStatus.AVAILABLE
        assert record.client_id is None

    @pytest.mark.asyncio
    async def test_concurrent_claims_have_one_winner(self, session_factory):
        """N simultaneous claims on one code: exactly one succeeds."""
        await seed_code(session_factory, "444444")

        async def attempt(index: int) -> bool:
            async with session_factory() as session:
                won = await _claim(session, "444444", f"client-{index}")
                await session.commit()
                return won

        results = await asyncio.gather(*(attempt(i) for i in range(8)))

        assert results.count(True) == 1
        winner = f"client-{results.index(True)}"
        record = await load_code(session_factory, "444444")
        assert record.status == AccessCodeStatus.CLAIMED
        assert record.client_id == winner


# =============================================================================
# Tests: create / assign
# =============================================================================


class TestCreate:
    """Issuance inserts."""

    @pytest.mark.asyncio
    async def test_creates_available_code(self, db_session, session_factory):
        """New codes start AVAILABLE with notes and creation time."""
        added = await AccessCodeRepository.create(
            db_session, code="555555", notes="Spring cohort", created_at=_NOW
        )
        await db_session.commit()

        assert added is True
        record = await load_code(session_factory, "555555")
        assert record.status == AccessCodeStatus.AVAILABLE
        assert record.notes == "Spring cohort"
        assert record.created_at == _NOW

    @pytest.mark.asyncio
    async def test_collision_returns_false(self, db_session, session_factory):
        """An existing code is left untouched."""
        await seed_code(session_factory, "555556", status=AccessCodeStatus.CLAIMED)

        added = await AccessCodeRepository.create(
            db_session, code="555556", notes="again", created_at=_NOW
        )

        assert added is False
        record = await load_code(session_factory, "555556")
        assert record.status == AccessCodeStatus.CLAIMED


class TestAssign:
    """AVAILABLE to ASSIGNED."""

    @pytest.mark.asyncio
    async def test_assigns_available(self, db_session, session_factory):
        """An available code becomes assigned."""
        await seed_code(session_factory, "666666")

        assert await AccessCodeRepository.assign(db_session, "666666") is True
        await db_session.commit()

        record = await load_code(session_factory, "666666")
        assert record.status == AccessCodeStatus.ASSIGNED

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status",
        [None, AccessCodeStatus.ASSIGNED, AccessCodeStatus.CLAIMED],
        ids=["unset", "assigned", "claimed"],
    )
    async def test_other_states_unchanged(self, db_session, session_factory, status):
        """Only AVAILABLE codes can be assigned."""
        await seed_code(session_factory, "666667", status=status)

        assert await AccessCodeRepository.assign(db_session, "666667") is False
        await db_session.commit()

        record = await load_code(session_factory, "666667")
        assert record.status == (status.value if status else None)

    @pytest.mark.asyncio
    async def test_unknown_code(self, db_session):
        """Unknown codes are not assigned."""
        assert await AccessCodeRepository.assign(db_session, "000001") is False


# =============================================================================
# Tests: delete_expired
# =============================================================================


class TestDeleteExpired:
    """Retention sweep."""

    @pytest.mark.asyncio
    async def test_deletes_only_past_ttl(self, db_session, session_factory):
        """Records with ttl < now go; ttl >= now and NULL ttl stay."""
        await seed_code(
            session_factory, "700001", status=AccessCodeStatus.CLAIMED, ttl=_NOW - 1
        )
        await seed_code(
            session_factory, "700002", status=AccessCodeStatus.CLAIMED, ttl=_NOW
        )
        await seed_code(session_factory, "700003")

        deleted = await AccessCodeRepository.delete_expired(db_session, now=_NOW)
        await db_session.commit()

        assert deleted == 1
        assert await load_code(session_factory, "700001") is None
        assert await load_code(session_factory, "700002") is not None
        assert await load_code(session_factory, "700003") is not None
