"""Batch order signing: a maker signs one merkle root covering many order hashes.

Pairs are hashed in sorted order, so proofs carry no left/right flags.
"""
from eth_utils import keccak

from src.px_common.errors import MerkleProofInvalidError, MerkleProofTooLargeError

MAX_PROOF_LENGTH = 10  # 2**10 orders per signed root


def hash_pair(a: bytes, b: bytes) -> bytes:
    return keccak(a + b) if a <= b else keccak(b + a)


def compute_root(leaf: bytes, proof: tuple[bytes, ...]) -> bytes:
    node = leaf
    for sibling in proof:
        node = hash_pair(node, sibling)
    return node


def build_tree(leaves: list[bytes]) -> list[list[bytes]]:
    """Build all levels bottom-up; an odd node is promoted unchanged."""
    if not leaves:
        raise ValueError("cannot build a merkle tree without leaves")
    levels = [list(leaves)]
    while len(levels[-1]) > 1:
        current = levels[-1]
        nxt = [
            hash_pair(current[i], current[i + 1]) if i + 1 < len(current) else current[i]
            for i in range(0, len(current), 2)
        ]
        levels.append(nxt)
    return levels


def proof_for(levels: list[list[bytes]], index: int) -> tuple[bytes, ...]:
    proof: list[bytes] = []
    for level in levels[:-1]:
        sibling = index ^ 1
        if sibling < len(level):
            proof.append(level[sibling])
        index //= 2
    return tuple(proof)


def verify_proof(leaf: bytes, root: bytes, proof: tuple[bytes, ...]) -> None:
    """Raise unless ``proof`` links ``leaf`` to ``root``."""
    if len(proof) > MAX_PROOF_LENGTH:
        raise MerkleProofTooLargeError(len(proof))
    if compute_root(leaf, proof) != root:
        raise MerkleProofInvalidError()
