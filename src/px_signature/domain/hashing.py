"""EIP-712 typed-data hashing for maker orders.

digest = keccak256("\\x19\\x01" ‖ domainSeparator ‖ structHash)

Dynamic members follow EIP-712: ``uint256[]`` is hashed as the keccak of the
packed 32-byte words, ``bytes`` as the keccak of its content.
"""
from eth_abi import encode
from eth_utils import keccak, to_checksum_address

from src.px_order.domain.models import MakerOrder

EIP712_DOMAIN_TYPE = (
    "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
MAKER_TYPE = (
    "Maker("
    "uint8 quoteType,"
    "uint256 globalNonce,"
    "uint256 subsetNonce,"
    "uint256 orderNonce,"
    "uint256 strategyId,"
    "uint8 assetType,"
    "address collection,"
    "address currency,"
    "address signer,"
    "uint256 startTime,"
    "uint256 endTime,"
    "uint256 price,"
    "uint256[] itemIds,"
    "uint256[] amounts,"
    "uint256 minNetRatioBp,"
    "bytes additionalParameters,"
    "bytes recipientData"
    ")"
)
MERKLE_TREE_TYPE = "MerkleTree(bytes32 root)"

DOMAIN_TYPEHASH = keccak(text=EIP712_DOMAIN_TYPE)
MAKER_TYPEHASH = keccak(text=MAKER_TYPE)
MERKLE_TREE_TYPEHASH = keccak(text=MERKLE_TREE_TYPE)

_MAKER_ABI_TYPES = [
    "bytes32",
    "uint8",
    "uint256",
    "uint256",
    "uint256",
    "uint256",
    "uint8",
    "address",
    "address",
    "address",
    "uint256",
    "uint256",
    "uint256",
    "bytes32",
    "bytes32",
    "uint256",
    "bytes32",
    "bytes32",
]


def _hash_uint256_array(values: tuple[int, ...]) -> bytes:
    return keccak(b"".join(value.to_bytes(32, "big") for value in values))


def hash_maker(maker: MakerOrder) -> bytes:
    """EIP-712 struct hash of a maker order (also used as its order hash)."""
    return keccak(
        encode(
            _MAKER_ABI_TYPES,
            [
                MAKER_TYPEHASH,
                maker.quote_type.code,
                maker.global_nonce,
                maker.subset_nonce,
                maker.order_nonce,
                maker.strategy_id,
                maker.asset_type.code,
                to_checksum_address(maker.collection),
                to_checksum_address(maker.currency),
                to_checksum_address(maker.signer),
                maker.start_time,
                maker.end_time,
                maker.price,
                _hash_uint256_array(maker.item_ids),
                _hash_uint256_array(maker.amounts),
                maker.min_net_ratio_bp,
                keccak(maker.additional_parameters),
                keccak(maker.recipient_data),
            ],
        )
    )


def hash_merkle_tree(root: bytes) -> bytes:
    """Struct hash of a batch-signed ``MerkleTree(bytes32 root)``."""
    return keccak(encode(["bytes32", "bytes32"], [MERKLE_TREE_TYPEHASH, root]))


class Eip712Domain:
    """Domain separator bound to protocol name, version, chain id and exchange address."""

    def __init__(self, name: str, version: str, chain_id: int, verifying_contract: str) -> None:
        self.name = name
        self.version = version
        self.chain_id = chain_id
        self.verifying_contract = to_checksum_address(verifying_contract)
        self.separator: bytes = keccak(
            encode(
                ["bytes32", "bytes32", "bytes32", "uint256", "address"],
                [
                    DOMAIN_TYPEHASH,
                    keccak(text=name),
                    keccak(text=version),
                    chain_id,
                    self.verifying_contract,
                ],
            )
        )

    def digest(self, struct_hash: bytes) -> bytes:
        return keccak(b"\x19\x01" + self.separator + struct_hash)

    def maker_digest(self, maker: MakerOrder) -> bytes:
        return self.digest(hash_maker(maker))

    def merkle_digest(self, root: bytes) -> bytes:
        return self.digest(hash_merkle_tree(root))
