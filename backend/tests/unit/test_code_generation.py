"""Tests for access code issuance and hand-out."""

from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from board_access.models import AccessCode, AccessCodeStatus
from board_access.services.code_generation import (
    DEFAULT_NOTES,
    CodeSpaceExhaustedError,
    assign_code,
    generate_codes,
    make_code,
)
from tests.conftest import load_code, seed_code

_NOW = 1_700_000_000


class TestMakeCode:
    """Single draws."""

    def test_six_digits_without_leading_zero(self):
        """Draws stay within 100000-999999."""
        for _ in range(500):
            code = make_code()
            assert len(code) == 6
            assert code.isascii() and code.isdigit()
            assert 100000 <= int(code) <= 999999

    def test_bounds(self):
        """Lowest and highest draws map to the range ends."""
        with patch("board_access.services.code_generation.secrets.randbelow", return_value=0):
            assert make_code() == "100000"
        with patch(
            "board_access.services.code_generation.secrets.randbelow",
            return_value=899_999,
        ):
            assert make_code() == "999999"


class TestGenerateCodes:
    """Batch generation against the store."""

    @pytest.mark.asyncio
    async def test_creates_requested_count(self, db_session, session_factory):
        """Every created code is stored AVAILABLE with notes and createdAt."""
        result = await generate_codes(db_session, count=5, notes="Pilot", now=_NOW)

        assert result.created == 5
        assert len(set(result.codes)) == 5
        for code in result.codes:
            record = await load_code(session_factory, code)
            assert record.status == AccessCodeStatus.AVAILABLE
            assert record.notes == "Pilot"
            assert record.created_at == _NOW

    @pytest.mark.asyncio
    async def test_default_notes(self, db_session):
        """Batches are labelled by default."""
        result = await generate_codes(db_session, count=1)
        assert result.notes == DEFAULT_NOTES

    @pytest.mark.asyncio
    async def test_collision_is_redrawn(self, db_session, session_factory):
        """A draw hitting an existing code is skipped, not overwritten."""
        await seed_code(session_factory, "200000", status=AccessCodeStatus.CLAIMED)
        draws = iter(["200000", "200001"])

        with patch(
            "board_access.services.code_generation.make_code",
            side_effect=lambda: next(draws),
        ):
            result = await generate_codes(db_session, count=1, now=_NOW)

        assert result.codes == ["200001"]
        assert result.collisions == 1
        existing = await load_code(session_factory, "200000")
        assert existing.status == AccessCodeStatus.CLAIMED

    @pytest.mark.asyncio
    async def test_gives_up_when_space_is_full(self, db_session, session_factory):
        """Endless collisions stop with an error."""
        await seed_code(session_factory, "300000")

        with (
            patch(
                "board_access.services.code_generation.make_code",
                return_value="300000",
            ),
            pytest.raises(CodeSpaceExhaustedError),
        ):
            await generate_codes(db_session, count=1)

    @pytest.mark.asyncio
    async def test_zero_count(self, db_session, session_factory):
        """A zero-size batch creates nothing."""
        result = await generate_codes(db_session, count=0)

        assert result.created == 0
        async with session_factory() as session:
            total = await session.scalar(select(func.count()).select_from(AccessCode))
        assert total == 0

    @pytest.mark.asyncio
    async def test_negative_count(self, db_session):
        """Negative counts are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            await generate_codes(db_session, count=-1)


class TestAssignCode:
    """Hand-out transition."""

    @pytest.mark.asyncio
    async def test_assigns_and_commits(self, db_session, session_factory):
        """Available codes become assigned."""
        await seed_code(session_factory, "400000")

        assert await assign_code(db_session, "400000") is True

        record = await load_code(session_factory, "400000")
        assert record.status == AccessCodeStatus.ASSIGNED

    @pytest.mark.asyncio
    async def test_claimed_code_unchanged(self, db_session, session_factory):
        """Claimed codes are never moved back."""
        await seed_code(
            session_factory,
            "400001",
            status=AccessCodeStatus.CLAIMED,
            client_id="someone",
        )

        assert await assign_code(db_session, "400001") is False

        record = await load_code(session_factory, "400001")
        assert record.status == AccessCodeStatus.CLAIMED
        assert record.client_id == "someone"
