"""Checks shared across strategy variants. Each raises on the first violation."""
from src.px_common.enums import AssetType
from src.px_common.errors import BidTooLowError, OrderInvalidError, OrderInvalidReason
from src.px_order.domain.models import MakerOrder, TakerOrder


def check_paired_lengths(item_ids: tuple[int, ...], amounts: tuple[int, ...]) -> None:
    if not item_ids or len(item_ids) != len(amounts):
        raise OrderInvalidError(
            OrderInvalidReason.LENGTH_MISMATCH, f"{len(item_ids)} ids, {len(amounts)} amounts"
        )


def check_amounts(
    amounts: tuple[int, ...], asset_type: AssetType, enforce_single_unit: bool = True
) -> None:
    for amount in amounts:
        if amount == 0:
            raise OrderInvalidError(OrderInvalidReason.ZERO_AMOUNT)
        if enforce_single_unit and asset_type is AssetType.SINGLE_UNIT and amount != 1:
            raise OrderInvalidError(
                OrderInvalidReason.AMOUNT_INVALID, f"single-unit amount {amount}"
            )


def check_same_items(maker: MakerOrder, taker: TakerOrder) -> None:
    if taker.item_ids != maker.item_ids:
        raise OrderInvalidError(OrderInvalidReason.ITEM_MISMATCH)
    if taker.amounts != maker.amounts:
        raise OrderInvalidError(OrderInvalidReason.AMOUNT_MISMATCH)


def check_exact_price(maker: MakerOrder, taker: TakerOrder) -> None:
    """Maker and taker bounds must be equal.

    A buyer offering less than the seller's minimum is BidTooLow; the opposite
    inequality (overpaying or underselling) is a plain mismatch.
    """
    if maker.is_bid:
        offered, required = maker.price, taker.price
    else:
        offered, required = taker.price, maker.price
    if offered < required:
        raise BidTooLowError(offered, required)
    if offered != required:
        raise OrderInvalidError(
            OrderInvalidReason.PRICE_MISMATCH, f"maker {maker.price}, taker {taker.price}"
        )


def check_strictly_ascending(item_ids: tuple[int, ...]) -> None:
    previous = -1
    for item_id in item_ids:
        if item_id <= previous:
            raise OrderInvalidError(OrderInvalidReason.DUPLICATE_OR_UNSORTED_IDS, str(item_id))
        previous = item_id
