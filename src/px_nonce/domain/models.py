"""Domain models for px_nonce — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass

from eth_utils import keccak

# Order-nonce status written once an order is executed or cancelled. Any other
# stored value is the hash of the single order allowed to keep filling it.
ORDER_NONCE_EXECUTED: str = "0x" + keccak(text="ORDER_NONCE_EXECUTED").hex()


@dataclass
class UserNonceState:
    """Bid/ask generation counters; a user never seen has both at zero."""

    user: str
    bid_nonce: int = 0
    ask_nonce: int = 0

    def generation_for(self, is_bid: bool) -> int:
        return self.bid_nonce if is_bid else self.ask_nonce
