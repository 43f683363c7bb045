"""Matching domain models — what one settled (maker, taker) pair produced."""
from dataclasses import dataclass

from src.px_clearing.domain.models import FeeSplit, TransferInstruction
from src.px_common.enums import QuoteType
from src.px_strategy.domain.models import SettlementResult


@dataclass(frozen=True)
class ExecutionReport:
    order_hash: str
    quote_type: QuoteType  # taker side
    strategy_id: int
    buyer: str
    seller: str
    settlement: SettlementResult
    fees: FeeSplit
    transfers: tuple[TransferInstruction, ...]
