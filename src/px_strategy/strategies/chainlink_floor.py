"""Single-item trades priced off a collection floor oracle.

Premium modes serve maker asks (price = floor + premium, never below the
maker's minimum); discount modes serve maker bids (price = floor - discount,
never above the maker's maximum). The premium or discount is the maker's
``additional_parameters`` as one ABI-encoded uint256.
"""
from enum import Enum
from typing import Any

from eth_abi import decode
from eth_abi.exceptions import DecodingError

from src.px_common.bps import BPS_DENOMINATOR
from src.px_common.enums import QuoteType
from src.px_common.errors import BidTooLowError, OrderInvalidError, OrderInvalidReason
from src.px_order.domain.models import MakerOrder, TakerOrder
from src.px_strategy.domain.models import SettlementResult
from src.px_strategy.infrastructure.oracle import OracleConfig, PriceFeedRegistry, read_price_wei
from src.px_strategy.strategies.base import BoundStrategy


class FloorMode(str, Enum):
    PREMIUM_FIXED = "premium_fixed"
    PREMIUM_BP = "premium_bp"
    DISCOUNT_FIXED = "discount_fixed"
    DISCOUNT_BP = "discount_bp"

    @property
    def is_premium(self) -> bool:
        return self in (FloorMode.PREMIUM_FIXED, FloorMode.PREMIUM_BP)

    @property
    def is_bp(self) -> bool:
        return self in (FloorMode.PREMIUM_BP, FloorMode.DISCOUNT_BP)


def decode_uint256(data: bytes) -> int:
    try:
        (value,) = decode(["uint256"], data)
    except DecodingError:
        raise OrderInvalidError(OrderInvalidReason.PARAMETERS_INVALID, "expected uint256") from None
    return value


def _check_single_item(item_ids: tuple[int, ...], amounts: tuple[int, ...]) -> None:
    if len(item_ids) != 1 or len(amounts) != 1:
        raise OrderInvalidError(OrderInvalidReason.LENGTH_MISMATCH, "exactly one item required")
    if amounts[0] != 1:
        raise OrderInvalidError(OrderInvalidReason.AMOUNT_INVALID, f"amount {amounts[0]}")


class FloorFromChainlinkStrategy(BoundStrategy):
    def __init__(
        self,
        owner: Any,
        mode: FloorMode,
        feeds: PriceFeedRegistry,
        oracle: OracleConfig,
    ) -> None:
        super().__init__(owner)
        self.mode = mode
        self.feeds = feeds
        self.oracle = oracle
        self.maker_sides = frozenset({QuoteType.ASK if mode.is_premium else QuoteType.BID})

    def check_maker(self, maker: MakerOrder) -> None:
        _check_single_item(maker.item_ids, maker.amounts)
        adjustment = decode_uint256(maker.additional_parameters)
        if self.mode is FloorMode.DISCOUNT_BP and adjustment >= BPS_DENOMINATOR:
            raise OrderInvalidError(OrderInvalidReason.DISCOUNT_TOO_HIGH, f"{adjustment}bp")

    def execute_with_taker(
        self, caller: Any, taker: TakerOrder, maker: MakerOrder, now: int
    ) -> SettlementResult:
        self.ensure_caller(caller)
        self.check_maker(maker)
        _check_single_item(taker.item_ids, taker.amounts)
        if taker.item_ids != maker.item_ids:
            raise OrderInvalidError(OrderInvalidReason.ITEM_MISMATCH)

        feed = self.feeds.floor_feed(maker.collection)
        floor = read_price_wei(feed, now, self.oracle.max_latency)
        adjustment = decode_uint256(maker.additional_parameters)

        if self.mode.is_premium:
            price = max(self._premium_price(floor, adjustment), maker.price)
            if taker.price < price:
                raise BidTooLowError(taker.price, price)
        else:
            price = min(self._discount_price(floor, adjustment), maker.price)
            if taker.price > price:
                raise BidTooLowError(price, taker.price)

        return SettlementResult(price=price, item_ids=maker.item_ids, amounts=maker.amounts)

    def _premium_price(self, floor: int, premium: int) -> int:
        if self.mode.is_bp:
            return floor * (BPS_DENOMINATOR + premium) // BPS_DENOMINATOR
        return floor + premium

    def _discount_price(self, floor: int, discount: int) -> int:
        if self.mode.is_bp:
            return floor * (BPS_DENOMINATOR - discount) // BPS_DENOMINATOR
        if discount >= floor:
            raise OrderInvalidError(
                OrderInvalidReason.DISCOUNT_TOO_HIGH, f"discount {discount}, floor {floor}"
            )
        return floor - discount
