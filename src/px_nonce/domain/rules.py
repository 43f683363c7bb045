"""Replay-protection rules evaluated before any strategy runs."""
from src.px_common.errors import NonceInvalidError, NonceInvalidReason
from src.px_nonce.domain.models import ORDER_NONCE_EXECUTED, UserNonceState
from src.px_order.domain.models import MakerOrder


def check_maker_nonces(
    maker: MakerOrder,
    state: UserNonceState,
    order_nonce_status: str | None,
    subset_cancelled: bool,
    order_hash: str,
) -> None:
    """Raise NonceInvalidError if the maker order can no longer execute.

    order_nonce_status: None (clear), ORDER_NONCE_EXECUTED, or the hash of the
    order that partially consumed this nonce (only that order may reuse it).
    """
    if maker.global_nonce != state.generation_for(maker.is_bid):
        raise NonceInvalidError(NonceInvalidReason.GENERATION_MISMATCH)
    if order_nonce_status is not None and order_nonce_status != order_hash:
        raise NonceInvalidError(NonceInvalidReason.ALREADY_EXECUTED_OR_CANCELLED)
    if subset_cancelled:
        raise NonceInvalidError(NonceInvalidReason.SUBSET_CANCELLED)


def status_after_fill(is_nonce_invalidated: bool, order_hash: str) -> str:
    """Status to store for the maker's order nonce after a successful fill."""
    return ORDER_NONCE_EXECUTED if is_nonce_invalidated else order_hash
