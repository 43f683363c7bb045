# src/px_currency/infrastructure/persistence.py
"""CurrencyRepository — raw SQL over the currencies whitelist."""
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

_IS_ALLOWED_SQL = text("""
    SELECT is_allowed FROM currencies WHERE address = :address
""")

_UPSERT_STATUS_SQL = text("""
    INSERT INTO currencies (address, is_allowed)
    VALUES (:address, :is_allowed)
    ON CONFLICT (address) DO UPDATE
    SET is_allowed = EXCLUDED.is_allowed, updated_at = NOW()
""")


class CurrencyRepository:
    """Concrete implementation of CurrencyRepositoryProtocol. Unknown currencies are not allowed."""

    async def is_allowed(self, currency: str, db: AsyncSession) -> bool:
        row = (await db.execute(_IS_ALLOWED_SQL, {"address": currency})).fetchone()
        return bool(row is not None and row.is_allowed)

    async def set_status(self, currency: str, is_allowed: bool, db: AsyncSession) -> None:
        await db.execute(_UPSERT_STATUS_SQL, {"address": currency, "is_allowed": is_allowed})
