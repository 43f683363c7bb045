"""Collection offer over an inclusive band of item ids.

The maker bid carries ``item_ids = (min_id, max_id)`` and a single desired
amount. The taker lists the ids it delivers in strictly ascending order;
ids outside the band are ignored and the in-band amounts must add up to the
desired amount exactly.
"""
from typing import Any

from src.px_common.enums import QuoteType
from src.px_common.errors import OrderInvalidError, OrderInvalidReason
from src.px_order.domain.models import MakerOrder, TakerOrder
from src.px_strategy.domain.models import SettlementResult
from src.px_strategy.strategies.base import BoundStrategy
from src.px_strategy.strategies.rules import (
    check_amounts,
    check_exact_price,
    check_paired_lengths,
    check_strictly_ascending,
)


class ItemIdsRangeStrategy(BoundStrategy):
    maker_sides = frozenset({QuoteType.BID})

    def __init__(self, owner: Any, enforce_single_unit: bool = True) -> None:
        super().__init__(owner)
        self.enforce_single_unit = enforce_single_unit

    def check_maker(self, maker: MakerOrder) -> None:
        if len(maker.item_ids) != 2 or len(maker.amounts) != 1:
            raise OrderInvalidError(
                OrderInvalidReason.LENGTH_MISMATCH, "range needs (min_id, max_id) and one amount"
            )
        min_id, max_id = maker.item_ids
        if min_id >= max_id:
            raise OrderInvalidError(OrderInvalidReason.INVALID_RANGE, f"[{min_id}, {max_id}]")
        if maker.amounts[0] == 0:
            raise OrderInvalidError(OrderInvalidReason.ZERO_AMOUNT)

    def execute_with_taker(
        self, caller: Any, taker: TakerOrder, maker: MakerOrder, now: int
    ) -> SettlementResult:
        self.ensure_caller(caller)
        self.check_maker(maker)
        check_paired_lengths(taker.item_ids, taker.amounts)
        check_strictly_ascending(taker.item_ids)
        check_amounts(taker.amounts, maker.asset_type, self.enforce_single_unit)

        min_id, max_id = maker.item_ids
        desired = maker.amounts[0]
        item_ids: list[int] = []
        amounts: list[int] = []
        for item_id, amount in zip(taker.item_ids, taker.amounts):
            if item_id > max_id:
                break
            if item_id >= min_id:
                item_ids.append(item_id)
                amounts.append(amount)

        delivered = sum(amounts)
        if delivered != desired:
            raise OrderInvalidError(
                OrderInvalidReason.AMOUNT_MISMATCH, f"delivered {delivered}, desired {desired}"
            )
        check_exact_price(maker, taker)
        return SettlementResult(
            price=maker.price, item_ids=tuple(item_ids), amounts=tuple(amounts)
        )
