"""Maker order structural and timing rules, shared by execution and pre-flight."""
from src.px_common.bps import BPS_DENOMINATOR
from src.px_common.enums import QuoteType
from src.px_common.errors import (
    OrderInvalidError,
    OrderInvalidReason,
    OutsideOfTimeRangeError,
)
from src.px_order.domain.models import MakerOrder


def check_maker_structure(maker: MakerOrder) -> None:
    """Raise OrderInvalidError if the maker's sequences or ratio are malformed.

    Paired item/amount lengths are a strategy concern: ranged orders carry
    two ids (the band) and a single desired amount.
    """
    if not maker.item_ids or not maker.amounts:
        raise OrderInvalidError(OrderInvalidReason.LENGTH_MISMATCH, "empty item or amount list")
    if any(amount == 0 for amount in maker.amounts):
        raise OrderInvalidError(OrderInvalidReason.ZERO_AMOUNT)
    if not (0 <= maker.min_net_ratio_bp <= BPS_DENOMINATOR):
        raise OrderInvalidError(
            OrderInvalidReason.MIN_NET_RATIO_INVALID, str(maker.min_net_ratio_bp)
        )


def check_quote_type(maker: MakerOrder, expected: QuoteType) -> None:
    """A taker bid only fills a maker ask and vice versa."""
    if maker.quote_type is not expected:
        raise OrderInvalidError(
            OrderInvalidReason.QUOTE_TYPE_MISMATCH,
            f"expected maker {expected.value}, got {maker.quote_type.value}",
        )


def check_time_window(maker: MakerOrder, now: int) -> None:
    """Raise OutsideOfTimeRangeError unless start_time <= now < end_time."""
    if not (maker.start_time <= now < maker.end_time):
        raise OutsideOfTimeRangeError(now, maker.start_time, maker.end_time)
