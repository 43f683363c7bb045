# src/px_currency/domain/repository.py
"""CurrencyRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class CurrencyRepositoryProtocol(Protocol):
    async def is_allowed(self, currency: str, db: AsyncSession) -> bool: ...

    async def set_status(self, currency: str, is_allowed: bool, db: AsyncSession) -> None: ...
