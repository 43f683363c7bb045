"""Unit tests for the raw-SQL NonceRepository (statement choice and result mapping)."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.px_nonce.domain.models import ORDER_NONCE_EXECUTED
from src.px_nonce.infrastructure.persistence import NonceRepository

USER = "0x2B5AD5c4795c026514f8317c7a215E218DcCD6cF"
ORDER_HASH = "0x" + "ab" * 32


def _db(row: object = None, scalar: object = None) -> AsyncMock:
    result = MagicMock()
    result.fetchone.return_value = row
    result.scalar_one_or_none.return_value = scalar
    db = AsyncMock()
    db.execute.return_value = result
    return db


def _sql(db: AsyncMock) -> str:
    return str(db.execute.await_args.args[0])


class TestOrderNonceReads:
    async def test_plain_read_takes_no_lock(self) -> None:
        db = _db(scalar=ORDER_NONCE_EXECUTED)
        status = await NonceRepository().get_order_nonce_status(USER, 4, db)
        assert status == ORDER_NONCE_EXECUTED
        assert "FOR UPDATE" not in _sql(db)

    async def test_settlement_read_locks_row(self) -> None:
        db = _db()
        status = await NonceRepository().get_order_nonce_status(USER, 4, db, for_update=True)
        assert status is None
        assert "FOR UPDATE" in _sql(db)


class TestClaimOrderNonce:
    async def test_claim_applied_when_row_returned(self) -> None:
        db = _db(row=(ORDER_NONCE_EXECUTED,))
        repo = NonceRepository()
        assert await repo.claim_order_nonce(USER, 4, ORDER_HASH, ORDER_NONCE_EXECUTED, db)
        params = db.execute.await_args.args[1]
        assert params == {
            "user": USER,
            "order_nonce": 4,
            "order_hash": ORDER_HASH,
            "status": ORDER_NONCE_EXECUTED,
        }
        sql = _sql(db)
        assert "WHERE order_nonces.status = :order_hash" in sql
        assert "RETURNING" in sql

    async def test_claim_refused_when_nothing_returned(self) -> None:
        db = _db(row=None)
        assert not await NonceRepository().claim_order_nonce(
            USER, 4, ORDER_HASH, ORDER_NONCE_EXECUTED, db
        )

    @pytest.mark.parametrize("status", [ORDER_NONCE_EXECUTED, ORDER_HASH])
    async def test_cancel_never_reopens_executed(self, status: str) -> None:
        db = _db()
        await NonceRepository().set_order_nonce_status(USER, 4, status, db)
        assert db.execute.await_args.args[1]["executed"] == ORDER_NONCE_EXECUTED
        assert "order_nonces.status <> :executed" in _sql(db)
