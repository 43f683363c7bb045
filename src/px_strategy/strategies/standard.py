from typing import Any

from src.px_order.domain.models import MakerOrder, TakerOrder
from src.px_strategy.domain.models import SettlementResult
from src.px_strategy.strategies.base import BoundStrategy
from src.px_strategy.strategies.rules import (
    check_amounts,
    check_exact_price,
    check_paired_lengths,
    check_same_items,
)


class StandardSaleStrategy(BoundStrategy):
    """Fixed-price sale of exactly the items the maker listed, either side."""

    def __init__(self, owner: Any, enforce_single_unit: bool = True) -> None:
        super().__init__(owner)
        self.enforce_single_unit = enforce_single_unit

    def check_maker(self, maker: MakerOrder) -> None:
        check_paired_lengths(maker.item_ids, maker.amounts)
        check_amounts(maker.amounts, maker.asset_type, self.enforce_single_unit)

    def execute_with_taker(
        self, caller: Any, taker: TakerOrder, maker: MakerOrder, now: int
    ) -> SettlementResult:
        self.ensure_caller(caller)
        self.check_maker(maker)
        check_same_items(maker, taker)
        check_exact_price(maker, taker)
        return SettlementResult(
            price=maker.price, item_ids=maker.item_ids, amounts=maker.amounts
        )
