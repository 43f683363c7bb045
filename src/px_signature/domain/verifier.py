"""Signer authentication for hashed maker orders.

Accepted encodings:
  65 bytes  r ‖ s ‖ v
  64 bytes  r ‖ vs   (EIP-2098 compact form, v packed into the top bit of s)
Contract signers bypass ECDSA recovery and answer through their validator.

Checks run in a fixed order so each failure maps to exactly one error:
length → v → s (malleability) → null signer → signer mismatch.
"""
import logging

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import to_checksum_address

from src.px_common.errors import (
    AppError,
    NullSignerAddressError,
    SignatureEOAInvalidError,
    SignatureLengthInvalidError,
    SignatureParameterSInvalidError,
    SignatureParameterVInvalidError,
)
from src.px_signature.infrastructure.contract_signers import (
    EIP1271_MAGIC_VALUE,
    ContractSignerRegistry,
)

logger = logging.getLogger(__name__)

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N = SECP256K1_N // 2
NULL_ADDRESS = "0x0000000000000000000000000000000000000000"

_S_MASK = (1 << 255) - 1


def split_signature(signature: bytes) -> tuple[int, int, int]:
    """Return (r, s, v) for a 64- or 65-byte signature."""
    if len(signature) == 65:
        r = int.from_bytes(signature[:32], "big")
        s = int.from_bytes(signature[32:64], "big")
        return r, s, signature[64]
    if len(signature) == 64:
        r = int.from_bytes(signature[:32], "big")
        vs = int.from_bytes(signature[32:], "big")
        return r, vs & _S_MASK, (vs >> 255) + 27
    raise SignatureLengthInvalidError(len(signature))


def recover_signer(digest: bytes, signature: bytes) -> str:
    """Recover the EOA that produced ``signature`` over ``digest``, or raise."""
    r, s, v = split_signature(signature)
    if v not in (27, 28):
        raise SignatureParameterVInvalidError(v)
    if s > SECP256K1_HALF_N:
        raise SignatureParameterSInvalidError()
    try:
        public_key = keys.Signature(vrs=(v - 27, r, s)).recover_public_key_from_msg_hash(
            digest
        )
    except (BadSignature, ValidationError, ValueError):
        raise NullSignerAddressError() from None
    recovered = public_key.to_checksum_address()
    if recovered == NULL_ADDRESS:
        raise NullSignerAddressError()
    return recovered


class SignatureVerifier:
    def __init__(self, contract_signers: ContractSignerRegistry | None = None) -> None:
        self.contract_signers = contract_signers or ContractSignerRegistry()

    def check(self, signer: str, digest: bytes, signature: bytes) -> None:
        """Raise the matching signature error unless ``signer`` signed ``digest``."""
        signer = to_checksum_address(signer)
        if self.contract_signers.is_contract(signer):
            answer = self.contract_signers.is_valid_signature(signer, digest, signature)
            if answer != EIP1271_MAGIC_VALUE:
                raise SignatureEOAInvalidError(signer)
            return
        recovered = recover_signer(digest, signature)
        if recovered != signer:
            raise SignatureEOAInvalidError(signer)

    def verify(self, signer: str, digest: bytes, signature: bytes) -> bool:
        """Pre-flight variant of ``check``: never raises."""
        try:
            self.check(signer, digest, signature)
        except AppError as exc:
            logger.debug("Signature rejected for %s: code=%d", signer, exc.code)
            return False
        return True
