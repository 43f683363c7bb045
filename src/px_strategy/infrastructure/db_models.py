# src/px_strategy/infrastructure/db_models.py
"""SQLAlchemy ORM model for the strategies table (DDL reference only — queries use raw SQL)."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, SmallInteger, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.px_common.database import Base


class StrategyORM(Base):
    __tablename__ = "strategies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    has_royalties: Mapped[bool] = mapped_column(Boolean, nullable=False)
    protocol_fee_bp: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    max_protocol_fee_bp: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    implementation: Mapped[str] = mapped_column(String(40), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
