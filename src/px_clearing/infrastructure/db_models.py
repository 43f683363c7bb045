# src/px_clearing/infrastructure/db_models.py
"""SQLAlchemy ORM models for clearing tables (DDL reference only — queries use raw SQL)."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Numeric, String, func
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.px_common.database import Base


class TransferInstructionORM(Base):
    __tablename__ = "transfer_instructions"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    order_hash: Mapped[str] = mapped_column(String(66), nullable=False)
    leg: Mapped[str] = mapped_column(String(20), nullable=False)
    from_address: Mapped[str] = mapped_column(String(42), nullable=False)
    to_address: Mapped[str] = mapped_column(String(42), nullable=False)
    collection: Mapped[str | None] = mapped_column(String(42))
    asset_type: Mapped[str | None] = mapped_column(String(20))
    item_ids: Mapped[list[Decimal]] = mapped_column(ARRAY(Numeric(78, 0)), nullable=False)
    amounts: Mapped[list[Decimal]] = mapped_column(ARRAY(Numeric(78, 0)), nullable=False)
    currency: Mapped[str | None] = mapped_column(String(42))
    amount: Mapped[Decimal] = mapped_column(Numeric(78, 0), nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class ExchangeEventORM(Base):
    __tablename__ = "exchange_events"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    event_type: Mapped[str] = mapped_column(String(40), nullable=False)
    user_address: Mapped[str] = mapped_column(String(42), nullable=False)
    payload: Mapped[dict[str, object]] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


