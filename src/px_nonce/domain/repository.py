"""NonceRepository Protocol — dependency inversion for testability.

Unit tests inject an in-memory fake conforming to this Protocol.
Infrastructure layer provides the raw-SQL implementation.
"""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.px_nonce.domain.models import UserNonceState


class NonceRepositoryProtocol(Protocol):
    async def get_generations(self, user: str, db: AsyncSession) -> UserNonceState: ...

    async def increment_generations(
        self, user: str, bid: bool, ask: bool, db: AsyncSession
    ) -> UserNonceState: ...

    async def get_order_nonce_status(
        self, user: str, order_nonce: int, db: AsyncSession, for_update: bool = False
    ) -> str | None: ...

    async def set_order_nonce_status(
        self, user: str, order_nonce: int, status: str, db: AsyncSession
    ) -> None: ...

    async def claim_order_nonce(
        self, user: str, order_nonce: int, order_hash: str, status: str, db: AsyncSession
    ) -> bool:
        """Move a clear nonce, or one held by ``order_hash``, to ``status``.

        Returns False when the nonce is EXECUTED or held by another order.
        """
        ...

    async def is_subset_cancelled(
        self, user: str, subset_nonce: int, db: AsyncSession
    ) -> bool: ...

    async def cancel_subset_nonces(
        self, user: str, subset_nonces: list[int], db: AsyncSession
    ) -> None: ...
