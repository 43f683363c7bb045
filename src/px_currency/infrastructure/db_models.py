# src/px_currency/infrastructure/db_models.py
"""SQLAlchemy ORM model for the currencies table (DDL reference only — queries use raw SQL)."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.px_common.database import Base


class CurrencyORM(Base):
    __tablename__ = "currencies"

    address: Mapped[str] = mapped_column(String(42), primary_key=True)
    is_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
