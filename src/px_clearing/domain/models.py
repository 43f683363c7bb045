"""Clearing domain models — pure dataclasses."""
from dataclasses import dataclass

from src.px_common.enums import AssetType, TransferLeg


@dataclass(frozen=True)
class RoyaltyQuote:
    recipient: str | None
    amount: int


@dataclass(frozen=True)
class FeeSplit:
    protocol_fee: int
    royalty_fee: int
    royalty_recipient: str | None
    net_proceeds: int


@dataclass(frozen=True)
class TransferInstruction:
    """One leg of a settlement. Asset legs carry items; currency legs carry ``amount``."""

    leg: TransferLeg
    from_address: str
    to_address: str
    collection: str | None = None
    asset_type: AssetType | None = None
    item_ids: tuple[int, ...] = ()
    amounts: tuple[int, ...] = ()
    currency: str | None = None
    amount: int = 0
