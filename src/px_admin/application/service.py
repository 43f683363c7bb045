# src/px_admin/application/service.py
"""Admin application service: operator-only configuration of the exchange."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.px_currency.application.service import CurrencyService
from src.px_matching.application.service import get_matching_engine
from src.px_matching.engine.engine import MatchingEngine
from src.px_strategy.application.service import StrategyRegistryService
from src.px_strategy.domain.models import StrategyRecord

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(
        self,
        strategies: StrategyRegistryService | None = None,
        currencies: CurrencyService | None = None,
        engine: MatchingEngine | None = None,
    ) -> None:
        self._strategies = strategies or StrategyRegistryService()
        self._currencies = currencies or CurrencyService()
        self._engine = engine

    @property
    def engine(self) -> MatchingEngine:
        return self._engine or get_matching_engine()

    async def add_strategy(
        self,
        operator: str,
        has_royalties: bool,
        protocol_fee_bp: int,
        max_protocol_fee_bp: int,
        implementation: str,
        db: AsyncSession,
    ) -> StrategyRecord:
        return await self._strategies.add_strategy(
            operator, has_royalties, protocol_fee_bp, max_protocol_fee_bp, implementation, db
        )

    async def update_strategy(
        self,
        operator: str,
        strategy_id: int,
        has_royalties: bool,
        protocol_fee_bp: int,
        is_active: bool,
        db: AsyncSession,
    ) -> StrategyRecord:
        return await self._strategies.update_strategy(
            operator, strategy_id, has_royalties, protocol_fee_bp, is_active, db
        )

    async def set_currency_status(
        self, operator: str, currency: str, is_allowed: bool, db: AsyncSession
    ) -> dict[str, object]:
        await self._currencies.set_status(operator, currency, is_allowed, db)
        return {"currency": currency, "is_allowed": is_allowed}

    def set_oracle_latency(self, operator: str, max_latency: int) -> dict[str, int]:
        """Applies to this process's engine; not persisted across restarts."""
        self.engine.catalog.oracle.set_max_latency(max_latency)
        logger.info("Oracle latency updated by %s", operator)
        return {"max_latency": max_latency}
