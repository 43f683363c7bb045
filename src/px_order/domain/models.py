"""Order domain models — pure dataclasses, no SQLAlchemy dependency.

A maker order is signed off-chain and never mutated afterwards, hence frozen.
``price`` is the maker's bound: minimum acceptable for an ASK, maximum
payable for a BID. The taker's ``price`` is the opposite bound.
"""
from dataclasses import dataclass, field

from src.px_common.enums import AssetType, QuoteType


@dataclass(frozen=True)
class MakerOrder:
    quote_type: QuoteType
    global_nonce: int  # bid or ask generation at signing time
    subset_nonce: int
    order_nonce: int
    strategy_id: int
    asset_type: AssetType
    collection: str
    currency: str
    signer: str
    start_time: int
    end_time: int
    price: int
    item_ids: tuple[int, ...]
    amounts: tuple[int, ...]
    min_net_ratio_bp: int = 0
    additional_parameters: bytes = b""
    recipient_data: bytes = b""

    @property
    def is_bid(self) -> bool:
        return self.quote_type is QuoteType.BID


@dataclass(frozen=True)
class TakerOrder:
    quote_type: QuoteType
    recipient: str
    price: int
    item_ids: tuple[int, ...] = ()
    amounts: tuple[int, ...] = ()
    additional_parameters: bytes = b""


@dataclass(frozen=True)
class MerkleTree:
    """Batch signature material: the signed root plus the maker's inclusion proof."""

    root: bytes
    proof: tuple[bytes, ...] = field(default_factory=tuple)
