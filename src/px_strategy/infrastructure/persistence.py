# src/px_strategy/infrastructure/persistence.py
"""StrategyRepository — raw SQL persistence implementation."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_strategy.domain.models import StrategyRecord

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, is_active, has_royalties, protocol_fee_bp, max_protocol_fee_bp, implementation
"""

# Ids are dense and start at 0 (the seeded standard strategy).
_INSERT_STRATEGY_SQL = text(f"""
    INSERT INTO strategies
        (id, is_active, has_royalties, protocol_fee_bp, max_protocol_fee_bp, implementation)
    SELECT COALESCE(MAX(id), -1) + 1, TRUE, :has_royalties,
           :protocol_fee_bp, :max_protocol_fee_bp, :implementation
    FROM strategies
    RETURNING {_SELECT_COLUMNS}
""")

_UPDATE_STRATEGY_SQL = text("""
    UPDATE strategies
    SET has_royalties = :has_royalties,
        protocol_fee_bp = :protocol_fee_bp,
        is_active = :is_active,
        updated_at = NOW()
    WHERE id = :id
""")

_GET_STRATEGY_SQL = text(f"""
    SELECT {_SELECT_COLUMNS} FROM strategies WHERE id = :id
""")

_LIST_STRATEGIES_SQL = text(f"""
    SELECT {_SELECT_COLUMNS} FROM strategies ORDER BY id ASC
""")


def _row_to_record(row: Any) -> StrategyRecord:
    return StrategyRecord(
        strategy_id=row.id,
        is_active=row.is_active,
        has_royalties=row.has_royalties,
        protocol_fee_bp=row.protocol_fee_bp,
        max_protocol_fee_bp=row.max_protocol_fee_bp,
        implementation=row.implementation,
    )


class StrategyRepository:
    """Concrete implementation of StrategyRepositoryProtocol using raw SQL."""

    async def add(
        self,
        has_royalties: bool,
        protocol_fee_bp: int,
        max_protocol_fee_bp: int,
        implementation: str,
        db: AsyncSession,
    ) -> StrategyRecord:
        row = (
            await db.execute(
                _INSERT_STRATEGY_SQL,
                {
                    "has_royalties": has_royalties,
                    "protocol_fee_bp": protocol_fee_bp,
                    "max_protocol_fee_bp": max_protocol_fee_bp,
                    "implementation": implementation,
                },
            )
        ).fetchone()
        return _row_to_record(row)

    async def update(
        self,
        strategy_id: int,
        has_royalties: bool,
        protocol_fee_bp: int,
        is_active: bool,
        db: AsyncSession,
    ) -> None:
        await db.execute(
            _UPDATE_STRATEGY_SQL,
            {
                "id": strategy_id,
                "has_royalties": has_royalties,
                "protocol_fee_bp": protocol_fee_bp,
                "is_active": is_active,
            },
        )

    async def get_by_id(self, strategy_id: int, db: AsyncSession) -> StrategyRecord | None:
        row = (await db.execute(_GET_STRATEGY_SQL, {"id": strategy_id})).fetchone()
        if row is None:
            return None
        return _row_to_record(row)

    async def list_all(self, db: AsyncSession) -> list[StrategyRecord]:
        rows = (await db.execute(_LIST_STRATEGIES_SQL)).fetchall()
        return [_row_to_record(r) for r in rows]
