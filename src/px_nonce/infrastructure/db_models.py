# src/px_nonce/infrastructure/db_models.py
"""SQLAlchemy ORM models for nonce tables (DDL reference only — queries use raw SQL)."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.px_common.database import Base


class UserNonceORM(Base):
    __tablename__ = "user_nonces"

    user_address: Mapped[str] = mapped_column(String(42), primary_key=True)
    bid_nonce: Mapped[Decimal] = mapped_column(Numeric(78, 0), nullable=False, default=0)
    ask_nonce: Mapped[Decimal] = mapped_column(Numeric(78, 0), nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class OrderNonceORM(Base):
    __tablename__ = "order_nonces"

    user_address: Mapped[str] = mapped_column(String(42), primary_key=True)
    order_nonce: Mapped[Decimal] = mapped_column(Numeric(78, 0), primary_key=True)
    status: Mapped[str] = mapped_column(String(66), nullable=False)  # EXECUTED marker or order hash
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class SubsetNonceORM(Base):
    __tablename__ = "subset_nonces"

    user_address: Mapped[str] = mapped_column(String(42), primary_key=True)
    subset_nonce: Mapped[Decimal] = mapped_column(Numeric(78, 0), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
