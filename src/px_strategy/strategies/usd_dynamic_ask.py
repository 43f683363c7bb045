"""Maker ask denominated in USD, settled in the order currency.

``additional_parameters`` carries the desired USD price (18 decimals) as one
uint256. The USD feed answers USD per currency unit.
"""
from typing import Any

from src.px_common.enums import QuoteType
from src.px_common.errors import BidTooLowError
from src.px_order.domain.models import MakerOrder, TakerOrder
from src.px_strategy.domain.models import SettlementResult
from src.px_strategy.infrastructure.oracle import OracleConfig, PriceFeedRegistry, read_price
from src.px_strategy.strategies.base import BoundStrategy
from src.px_strategy.strategies.chainlink_floor import decode_uint256
from src.px_strategy.strategies.rules import check_amounts, check_paired_lengths, check_same_items


def usd_to_currency(usd_price: int, answer: int, answer_decimals: int) -> int:
    return usd_price * 10**answer_decimals // answer


class USDDynamicAskStrategy(BoundStrategy):
    maker_sides = frozenset({QuoteType.ASK})

    def __init__(self, owner: Any, feeds: PriceFeedRegistry, oracle: OracleConfig) -> None:
        super().__init__(owner)
        self.feeds = feeds
        self.oracle = oracle

    def check_maker(self, maker: MakerOrder) -> None:
        check_paired_lengths(maker.item_ids, maker.amounts)
        check_amounts(maker.amounts, maker.asset_type)
        decode_uint256(maker.additional_parameters)

    def execute_with_taker(
        self, caller: Any, taker: TakerOrder, maker: MakerOrder, now: int
    ) -> SettlementResult:
        self.ensure_caller(caller)
        self.check_maker(maker)
        check_same_items(maker, taker)

        feed = self.feeds.usd()
        answer = read_price(feed, now, self.oracle.max_latency)
        desired_usd = decode_uint256(maker.additional_parameters)
        price = max(usd_to_currency(desired_usd, answer, feed.decimals()), maker.price)
        if taker.price < price:
            raise BidTooLowError(taker.price, price)
        return SettlementResult(price=price, item_ids=maker.item_ids, amounts=maker.amounts)
