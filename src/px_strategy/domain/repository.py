# src/px_strategy/domain/repository.py
"""StrategyRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.px_strategy.domain.models import StrategyRecord


class StrategyRepositoryProtocol(Protocol):
    async def add(
        self,
        has_royalties: bool,
        protocol_fee_bp: int,
        max_protocol_fee_bp: int,
        implementation: str,
        db: AsyncSession,
    ) -> StrategyRecord: ...

    async def update(
        self,
        strategy_id: int,
        has_royalties: bool,
        protocol_fee_bp: int,
        is_active: bool,
        db: AsyncSession,
    ) -> None: ...

    async def get_by_id(self, strategy_id: int, db: AsyncSession) -> StrategyRecord | None: ...

    async def list_all(self, db: AsyncSession) -> list[StrategyRecord]: ...
