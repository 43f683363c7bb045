"""Global enums — must match DB CHECK constraints exactly.

``code`` is the uint8 used in the EIP-712 encoding of a maker order.
"""

from enum import Enum


class QuoteType(str, Enum):
    BID = "BID"
    ASK = "ASK"

    @property
    def code(self) -> int:
        return 0 if self is QuoteType.BID else 1

    @property
    def opposite(self) -> "QuoteType":
        return QuoteType.ASK if self is QuoteType.BID else QuoteType.BID


class AssetType(str, Enum):
    """SINGLE_UNIT: one-of-a-kind items (amount is always 1). MULTI_UNIT: fungible editions."""
    SINGLE_UNIT = "SINGLE_UNIT"
    MULTI_UNIT = "MULTI_UNIT"

    @property
    def code(self) -> int:
        return 0 if self is AssetType.SINGLE_UNIT else 1


class TransferLeg(str, Enum):
    ASSET = "ASSET"
    SELLER_PROCEEDS = "SELLER_PROCEEDS"
    PROTOCOL_FEE = "PROTOCOL_FEE"
    ROYALTY_FEE = "ROYALTY_FEE"


class EventType(str, Enum):
    TAKER_BID = "TAKER_BID"
    TAKER_ASK = "TAKER_ASK"
    ORDER_NONCES_CANCELLED = "ORDER_NONCES_CANCELLED"
    SUBSET_NONCES_CANCELLED = "SUBSET_NONCES_CANCELLED"
    NEW_BID_ASK_NONCES = "NEW_BID_ASK_NONCES"
    STRATEGY_ADDED = "STRATEGY_ADDED"
    STRATEGY_UPDATED = "STRATEGY_UPDATED"
    CURRENCY_STATUS_UPDATED = "CURRENCY_STATUS_UPDATED"
