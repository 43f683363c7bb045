"""Contract-account signers (EIP-1271 style).

A contract signer has no private key; it approves a digest through a
validator that returns the 4-byte magic value on success.
"""
from collections.abc import Callable

from eth_utils import to_checksum_address

EIP1271_MAGIC_VALUE = bytes.fromhex("1626ba7e")

SignatureValidator = Callable[[bytes, bytes], bytes]


class ContractSignerRegistry:
    def __init__(self) -> None:
        self._validators: dict[str, SignatureValidator] = {}

    def register(self, address: str, validator: SignatureValidator) -> None:
        self._validators[to_checksum_address(address)] = validator

    def unregister(self, address: str) -> None:
        self._validators.pop(to_checksum_address(address), None)

    def is_contract(self, address: str) -> bool:
        return to_checksum_address(address) in self._validators

    def is_valid_signature(self, address: str, digest: bytes, signature: bytes) -> bytes:
        validator = self._validators[to_checksum_address(address)]
        return validator(digest, signature)
