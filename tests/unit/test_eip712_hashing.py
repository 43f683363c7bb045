"""Unit tests for EIP-712 maker hashing and domain separation."""
from collections.abc import Callable
from dataclasses import replace

from eth_utils import keccak

from src.px_order.domain.models import MakerOrder
from src.px_signature.domain.hashing import (
    DOMAIN_TYPEHASH,
    MAKER_TYPE,
    Eip712Domain,
    hash_maker,
    hash_merkle_tree,
)


def test_domain_typehash_is_standard() -> None:
    assert DOMAIN_TYPEHASH.hex() == (
        "8b73c3c69bb8fe3d512ecc4cf759cc79239f7b179b0ffacaa9a75d522b39400f"
    )


def test_maker_type_lists_every_signed_field() -> None:
    for member in ("uint256 globalNonce", "uint256[] itemIds", "bytes recipientData"):
        assert member in MAKER_TYPE


def test_hash_is_deterministic(make_maker: Callable[..., MakerOrder]) -> None:
    assert hash_maker(make_maker()) == hash_maker(make_maker())
    assert len(hash_maker(make_maker())) == 32


def test_every_field_changes_the_hash(make_maker: Callable[..., MakerOrder]) -> None:
    base = make_maker()
    variants = [
        replace(base, global_nonce=1),
        replace(base, subset_nonce=1),
        replace(base, order_nonce=1),
        replace(base, strategy_id=1),
        replace(base, price=base.price + 1),
        replace(base, item_ids=(8,)),
        replace(base, amounts=(2,)),
        replace(base, min_net_ratio_bp=9000),
        replace(base, additional_parameters=b"\x01"),
        replace(base, recipient_data=b"\x01"),
        replace(base, end_time=base.end_time + 1),
    ]
    hashes = {hash_maker(v) for v in variants}
    assert hash_maker(base) not in hashes
    assert len(hashes) == len(variants)


def test_domain_separates_chains(make_maker: Callable[..., MakerOrder]) -> None:
    exchange = "0x0000000000000000000000000000000000000e01"
    mainnet = Eip712Domain("PeerExchange", "1", 1, exchange)
    testnet = Eip712Domain("PeerExchange", "1", 5, exchange)
    maker = make_maker()
    assert mainnet.separator != testnet.separator
    assert mainnet.maker_digest(maker) != testnet.maker_digest(maker)


def test_digest_layout(domain: Eip712Domain, make_maker: Callable[..., MakerOrder]) -> None:
    maker = make_maker()
    expected = keccak(b"\x19\x01" + domain.separator + hash_maker(maker))
    assert domain.maker_digest(maker) == expected


def test_merkle_digest_differs_from_root() -> None:
    root = keccak(text="root")
    assert hash_merkle_tree(root) != root
