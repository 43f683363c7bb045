"""Settlement service — owns the outer transaction around engine calls."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.px_common.enums import QuoteType
from src.px_matching.domain.models import ExecutionReport
from src.px_matching.engine.engine import MatchingEngine
from src.px_order.domain.models import MakerOrder, MerkleTree, TakerOrder

logger = logging.getLogger(__name__)

_engine: MatchingEngine | None = None


def get_matching_engine() -> MatchingEngine:
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = MatchingEngine()
    return _engine


class SettlementService:
    def __init__(self, engine: MatchingEngine | None = None) -> None:
        self._engine = engine

    @property
    def engine(self) -> MatchingEngine:
        return self._engine or get_matching_engine()

    async def execute(
        self,
        taker_side: QuoteType,
        sender: str,
        taker: TakerOrder,
        maker: MakerOrder,
        signature: bytes,
        db: AsyncSession,
        merkle_tree: MerkleTree | None = None,
        affiliate: str | None = None,
    ) -> ExecutionReport:
        execute = (
            self.engine.execute_taker_bid
            if taker_side is QuoteType.BID
            else self.engine.execute_taker_ask
        )
        try:
            report = await execute(
                sender, taker, maker, signature, db, merkle_tree=merkle_tree, affiliate=affiliate
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return report

    async def check_maker_order(
        self,
        maker: MakerOrder,
        signature: bytes,
        db: AsyncSession,
        merkle_tree: MerkleTree | None = None,
    ) -> list[int]:
        return await self.engine.check_maker_order(maker, signature, db, merkle_tree)
