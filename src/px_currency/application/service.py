"""CurrencyService — operator-managed settlement currency whitelist."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.px_clearing.infrastructure.events import write_event
from src.px_common.enums import EventType
from src.px_currency.domain.repository import CurrencyRepositoryProtocol
from src.px_currency.infrastructure.persistence import CurrencyRepository

logger = logging.getLogger(__name__)


class CurrencyService:
    def __init__(self, repo: CurrencyRepositoryProtocol | None = None) -> None:
        self._repo: CurrencyRepositoryProtocol = repo or CurrencyRepository()

    async def set_status(
        self, operator: str, currency: str, is_allowed: bool, db: AsyncSession
    ) -> None:
        try:
            await self._repo.set_status(currency, is_allowed, db)
            await write_event(
                EventType.CURRENCY_STATUS_UPDATED,
                operator,
                {"currency": currency, "is_allowed": is_allowed},
                db,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Currency status: %s allowed=%s (by %s)", currency, is_allowed, operator)

    async def is_allowed(self, currency: str, db: AsyncSession) -> bool:
        return await self._repo.is_allowed(currency, db)
