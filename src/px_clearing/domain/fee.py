"""Fee split — protocol fee first, royalty from what remains, rest to the seller."""
from src.px_clearing.domain.models import FeeSplit, RoyaltyQuote
from src.px_common.bps import BPS_DENOMINATOR, bps_of
from src.px_common.errors import NetProceedsTooLowError


def split_fees(price: int, protocol_fee_bp: int, royalty: RoyaltyQuote | None) -> FeeSplit:
    """Split ``price`` into protocol fee, royalty and seller net proceeds.

    protocol_fee = price x bp // 10000 (truncating). A royalty is clamped to
    what the protocol fee leaves; a quote with no recipient pays nothing.
    """
    protocol_fee = bps_of(price, protocol_fee_bp)
    royalty_fee = 0
    royalty_recipient = None
    if royalty is not None and royalty.recipient is not None and royalty.amount > 0:
        royalty_fee = min(royalty.amount, price - protocol_fee)
        royalty_recipient = royalty.recipient
    return FeeSplit(
        protocol_fee=protocol_fee,
        royalty_fee=royalty_fee,
        royalty_recipient=royalty_recipient,
        net_proceeds=price - protocol_fee - royalty_fee,
    )


def check_min_net_proceeds(fees: FeeSplit, price: int, min_net_ratio_bp: int) -> None:
    """Raise NetProceedsTooLowError unless net x 10000 >= price x ratio."""
    if fees.net_proceeds * BPS_DENOMINATOR < price * min_net_ratio_bp:
        raise NetProceedsTooLowError(
            fees.net_proceeds, price * min_net_ratio_bp // BPS_DENOMINATOR
        )
