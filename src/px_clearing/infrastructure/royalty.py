"""Royalty collaborator: who gets paid for a collection sale, and how much."""
from dataclasses import dataclass, field
from typing import Protocol

from eth_utils import to_checksum_address

from src.px_clearing.domain.models import RoyaltyQuote
from src.px_common.bps import bps_of


class RoyaltyManager(Protocol):
    def royalty_info(self, collection: str, price: int) -> RoyaltyQuote: ...


@dataclass
class StaticRoyaltyRegistry:
    """collection -> (recipient, bp). Collections without an entry pay no royalty."""

    entries: dict[str, tuple[str, int]] = field(default_factory=dict)

    def set_royalty(self, collection: str, recipient: str, bp: int) -> None:
        self.entries[to_checksum_address(collection)] = (to_checksum_address(recipient), bp)

    def royalty_info(self, collection: str, price: int) -> RoyaltyQuote:
        entry = self.entries.get(to_checksum_address(collection))
        if entry is None:
            return RoyaltyQuote(recipient=None, amount=0)
        recipient, bp = entry
        return RoyaltyQuote(recipient=recipient, amount=bps_of(price, bp))
