"""NonceRepository — raw SQL persistence implementation.

uint256 nonces are stored as NUMERIC(78, 0); asyncpg hands them back as
Decimal, so every read converts to int.
"""
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_nonce.domain.models import ORDER_NONCE_EXECUTED, UserNonceState

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_GET_GENERATIONS_SQL = text("""
    SELECT bid_nonce, ask_nonce FROM user_nonces WHERE user_address = :user
""")

_INCREMENT_GENERATIONS_SQL = text("""
    INSERT INTO user_nonces (user_address, bid_nonce, ask_nonce)
    VALUES (:user, :bid_inc, :ask_inc)
    ON CONFLICT (user_address) DO UPDATE
    SET bid_nonce = user_nonces.bid_nonce + :bid_inc,
        ask_nonce = user_nonces.ask_nonce + :ask_inc,
        updated_at = NOW()
    RETURNING bid_nonce, ask_nonce
""")

_GET_ORDER_NONCE_SQL = text("""
    SELECT status FROM order_nonces
    WHERE user_address = :user AND order_nonce = :order_nonce
""")

_GET_ORDER_NONCE_FOR_UPDATE_SQL = text("""
    SELECT status FROM order_nonces
    WHERE user_address = :user AND order_nonce = :order_nonce
    FOR UPDATE
""")

# An EXECUTED row is terminal: the WHERE clause keeps it from being overwritten.
_SET_ORDER_NONCE_SQL = text("""
    INSERT INTO order_nonces (user_address, order_nonce, status)
    VALUES (:user, :order_nonce, :status)
    ON CONFLICT (user_address, order_nonce) DO UPDATE
    SET status = EXCLUDED.status, updated_at = NOW()
    WHERE order_nonces.status <> :executed
""")

# Compare-and-set: only a clear nonce or one held by the same order hash moves.
# No row returned means another settlement got there first.
_CLAIM_ORDER_NONCE_SQL = text("""
    INSERT INTO order_nonces (user_address, order_nonce, status)
    VALUES (:user, :order_nonce, :status)
    ON CONFLICT (user_address, order_nonce) DO UPDATE
    SET status = EXCLUDED.status, updated_at = NOW()
    WHERE order_nonces.status = :order_hash
    RETURNING status
""")

_GET_SUBSET_SQL = text("""
    SELECT 1 FROM subset_nonces
    WHERE user_address = :user AND subset_nonce = :subset_nonce
""")

_CANCEL_SUBSET_SQL = text("""
    INSERT INTO subset_nonces (user_address, subset_nonce)
    VALUES (:user, :subset_nonce)
    ON CONFLICT (user_address, subset_nonce) DO NOTHING
""")


class NonceRepository:
    """Concrete implementation of NonceRepositoryProtocol using raw SQL."""

    async def get_generations(self, user: str, db: AsyncSession) -> UserNonceState:
        row = (await db.execute(_GET_GENERATIONS_SQL, {"user": user})).fetchone()
        if row is None:
            return UserNonceState(user=user)
        return UserNonceState(user=user, bid_nonce=int(row.bid_nonce), ask_nonce=int(row.ask_nonce))

    async def increment_generations(
        self, user: str, bid: bool, ask: bool, db: AsyncSession
    ) -> UserNonceState:
        row = (
            await db.execute(
                _INCREMENT_GENERATIONS_SQL,
                {"user": user, "bid_inc": int(bid), "ask_inc": int(ask)},
            )
        ).fetchone()
        return UserNonceState(user=user, bid_nonce=int(row.bid_nonce), ask_nonce=int(row.ask_nonce))

    async def get_order_nonce_status(
        self, user: str, order_nonce: int, db: AsyncSession, for_update: bool = False
    ) -> str | None:
        sql = _GET_ORDER_NONCE_FOR_UPDATE_SQL if for_update else _GET_ORDER_NONCE_SQL
        result = await db.execute(sql, {"user": user, "order_nonce": order_nonce})
        return result.scalar_one_or_none()

    async def set_order_nonce_status(
        self, user: str, order_nonce: int, status: str, db: AsyncSession
    ) -> None:
        await db.execute(
            _SET_ORDER_NONCE_SQL,
            {
                "user": user,
                "order_nonce": order_nonce,
                "status": status,
                "executed": ORDER_NONCE_EXECUTED,
            },
        )

    async def claim_order_nonce(
        self, user: str, order_nonce: int, order_hash: str, status: str, db: AsyncSession
    ) -> bool:
        result = await db.execute(
            _CLAIM_ORDER_NONCE_SQL,
            {
                "user": user,
                "order_nonce": order_nonce,
                "order_hash": order_hash,
                "status": status,
            },
        )
        return result.fetchone() is not None

    async def is_subset_cancelled(self, user: str, subset_nonce: int, db: AsyncSession) -> bool:
        result = await db.execute(_GET_SUBSET_SQL, {"user": user, "subset_nonce": subset_nonce})
        return result.scalar_one_or_none() is not None

    async def cancel_subset_nonces(
        self, user: str, subset_nonces: list[int], db: AsyncSession
    ) -> None:
        for subset_nonce in subset_nonces:
            await db.execute(_CANCEL_SUBSET_SQL, {"user": user, "subset_nonce": subset_nonce})
