"""StrategyRegistryService — strategy records and their fee caps.

Reads are public. Mutations are operator-only (enforced at the router) and
commit or roll back as a unit together with their event row.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.px_clearing.infrastructure.events import write_event
from src.px_common.enums import EventType
from src.px_common.errors import (
    StrategyImplementationInvalidError,
    StrategyNotFoundError,
    StrategyProtocolFeeTooHighError,
)
from src.px_strategy.domain.models import StrategyRecord
from src.px_strategy.domain.repository import StrategyRepositoryProtocol
from src.px_strategy.domain.rules import check_fee_caps
from src.px_strategy.infrastructure.persistence import StrategyRepository
from src.px_strategy.strategies.catalog import IMPLEMENTATION_KEYS

logger = logging.getLogger(__name__)


class StrategyRegistryService:
    def __init__(
        self,
        repo: StrategyRepositoryProtocol | None = None,
        fee_ceiling_bp: int | None = None,
    ) -> None:
        self._repo: StrategyRepositoryProtocol = repo or StrategyRepository()
        self._fee_ceiling_bp = (
            fee_ceiling_bp if fee_ceiling_bp is not None else settings.MAX_PROTOCOL_FEE_BP
        )

    async def add_strategy(
        self,
        operator: str,
        has_royalties: bool,
        protocol_fee_bp: int,
        max_protocol_fee_bp: int,
        implementation: str,
        db: AsyncSession,
    ) -> StrategyRecord:
        check_fee_caps(protocol_fee_bp, max_protocol_fee_bp, self._fee_ceiling_bp)
        if implementation not in IMPLEMENTATION_KEYS:
            raise StrategyImplementationInvalidError(implementation)
        try:
            record = await self._repo.add(
                has_royalties, protocol_fee_bp, max_protocol_fee_bp, implementation, db
            )
            await write_event(
                EventType.STRATEGY_ADDED,
                operator,
                {
                    "strategy_id": record.strategy_id,
                    "protocol_fee_bp": protocol_fee_bp,
                    "max_protocol_fee_bp": max_protocol_fee_bp,
                    "has_royalties": has_royalties,
                    "implementation": implementation,
                },
                db,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Strategy added: id=%d impl=%s", record.strategy_id, implementation)
        return record

    async def update_strategy(
        self,
        operator: str,
        strategy_id: int,
        has_royalties: bool,
        protocol_fee_bp: int,
        is_active: bool,
        db: AsyncSession,
    ) -> StrategyRecord:
        try:
            current = await self._repo.get_by_id(strategy_id, db)
            if current is None:
                raise StrategyNotFoundError(strategy_id)
            if protocol_fee_bp > current.max_protocol_fee_bp or protocol_fee_bp < 0:
                raise StrategyProtocolFeeTooHighError(
                    protocol_fee_bp, current.max_protocol_fee_bp
                )
            await self._repo.update(strategy_id, has_royalties, protocol_fee_bp, is_active, db)
            await write_event(
                EventType.STRATEGY_UPDATED,
                operator,
                {
                    "strategy_id": strategy_id,
                    "protocol_fee_bp": protocol_fee_bp,
                    "has_royalties": has_royalties,
                    "is_active": is_active,
                },
                db,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Strategy updated: id=%d fee=%dbp active=%s", strategy_id, protocol_fee_bp, is_active
        )
        return StrategyRecord(
            strategy_id=strategy_id,
            is_active=is_active,
            has_royalties=has_royalties,
            protocol_fee_bp=protocol_fee_bp,
            max_protocol_fee_bp=current.max_protocol_fee_bp,
            implementation=current.implementation,
        )

    async def view_strategy(self, strategy_id: int, db: AsyncSession) -> StrategyRecord:
        record = await self._repo.get_by_id(strategy_id, db)
        if record is None:
            raise StrategyNotFoundError(strategy_id)
        return record

    async def list_strategies(self, db: AsyncSession) -> list[StrategyRecord]:
        return await self._repo.list_all(db)
