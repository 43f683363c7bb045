"""NonceService — user-owned replay-protection operations.

Only the owning user reaches these methods (the router passes the
authenticated address). Each mutation commits on success and rolls back on
any error, so a batch is all-or-nothing.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.px_clearing.infrastructure.events import write_event
from src.px_common.enums import EventType
from src.px_common.errors import EmptyBatchError, NothingToIncrementError
from src.px_nonce.domain.models import ORDER_NONCE_EXECUTED, UserNonceState
from src.px_nonce.domain.repository import NonceRepositoryProtocol
from src.px_nonce.infrastructure.persistence import NonceRepository

logger = logging.getLogger(__name__)


class NonceService:
    def __init__(self, repo: NonceRepositoryProtocol | None = None) -> None:
        self._repo: NonceRepositoryProtocol = repo or NonceRepository()

    async def view_generations(self, user: str, db: AsyncSession) -> UserNonceState:
        return await self._repo.get_generations(user, db)

    async def cancel_order_nonces(
        self, user: str, order_nonces: list[int], db: AsyncSession
    ) -> list[int]:
        """Flag every nonce executed-or-cancelled. Already-flagged nonces are a no-op."""
        if not order_nonces:
            raise EmptyBatchError()
        try:
            for nonce in order_nonces:
                await self._repo.set_order_nonce_status(user, nonce, ORDER_NONCE_EXECUTED, db)
            await write_event(
                EventType.ORDER_NONCES_CANCELLED, user, {"order_nonces": order_nonces}, db
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Order nonces cancelled: user=%s count=%d", user, len(order_nonces))
        return order_nonces

    async def cancel_subset_nonces(
        self, user: str, subset_nonces: list[int], db: AsyncSession
    ) -> list[int]:
        if not subset_nonces:
            raise EmptyBatchError()
        try:
            await self._repo.cancel_subset_nonces(user, subset_nonces, db)
            await write_event(
                EventType.SUBSET_NONCES_CANCELLED, user, {"subset_nonces": subset_nonces}, db
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Subset nonces cancelled: user=%s count=%d", user, len(subset_nonces))
        return subset_nonces

    async def bump_generations(
        self, user: str, bid: bool, ask: bool, db: AsyncSession
    ) -> UserNonceState:
        """Advance the bid and/or ask generation, invalidating every older order of that side."""
        if not bid and not ask:
            raise NothingToIncrementError()
        try:
            state = await self._repo.increment_generations(user, bid, ask, db)
            await write_event(
                EventType.NEW_BID_ASK_NONCES,
                user,
                {"bid_nonce": state.bid_nonce, "ask_nonce": state.ask_nonce},
                db,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Generations bumped: user=%s bid=%d ask=%d", user, state.bid_nonce, state.ask_nonce
        )
        return state
