"""Unit tests for the credit gate, using a mocked async session."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.core.exceptions import CreditsExhaustedError, StoreUnavailableError
from app.services.credit_gate import (
    CreditSnapshot,
    check_credits,
    consume_credit,
    credits_status,
    get_counter,
)


@pytest.fixture
def mock_db():
    db = MagicMock()
    db.execute = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


def query_result(row):
    result = MagicMock()
    result.scalars.return_value.first.return_value = row
    return result


class TestCheckCredits:

    def test_allows_when_credits_left(self):
        check_credits(CreditSnapshot("c1", 4, 5))

    def test_rejects_when_used_equals_max(self):
        with pytest.raises(CreditsExhaustedError) as exc_info:
            check_credits(CreditSnapshot("c1", 5, 5))

        assert exc_info.value.status_code == 429
        assert "all 5 credits" in exc_info.value.message

    def test_rejects_when_used_exceeds_max(self):
        with pytest.raises(CreditsExhaustedError):
            check_credits(CreditSnapshot("c1", 7, 5))


class TestGetCounter:

    def test_returns_snapshot(self, mock_db):
        row = MagicMock(id="c1", credits_used=2, max_credits=5)
        mock_db.execute.return_value = query_result(row)

        counter = asyncio.run(get_counter(mock_db))

        assert counter == CreditSnapshot("c1", 2, 5)
        assert counter.remaining == 3

    def test_missing_row_is_store_error(self, mock_db):
        mock_db.execute.return_value = query_result(None)

        with pytest.raises(StoreUnavailableError) as exc_info:
            asyncio.run(get_counter(mock_db))

        assert exc_info.value.message == "Unable to check credits"

    def test_read_failure_is_store_error(self, mock_db):
        mock_db.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(StoreUnavailableError):
            asyncio.run(get_counter(mock_db))


class TestConsumeCredit:

    def test_returns_remaining_after_increment(self, mock_db):
        remaining = asyncio.run(consume_credit(mock_db, CreditSnapshot("c1", 1, 5)))

        assert remaining == 3
        mock_db.execute.assert_awaited_once()
        mock_db.commit.assert_awaited_once()

    def test_write_failure_is_tolerated(self, mock_db):
        mock_db.execute.side_effect = SQLAlchemyError("write failed")

        remaining = asyncio.run(consume_credit(mock_db, CreditSnapshot("c1", 4, 5)))

        assert remaining == 0
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()


def test_credits_status():
    assert credits_status(CreditSnapshot("c1", 2, 5)) == {
        "credits_used": 2,
        "max_credits": 5,
        "credits_remaining": 3,
    }
