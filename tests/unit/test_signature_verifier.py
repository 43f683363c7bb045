"""Unit tests for SignatureVerifier: encodings, malleability and contract signers."""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from eth_keys.exceptions import BadSignature
from eth_utils import keccak

from src.px_common.errors import (
    NullSignerAddressError,
    SignatureEOAInvalidError,
    SignatureLengthInvalidError,
    SignatureParameterSInvalidError,
    SignatureParameterVInvalidError,
)
from src.px_signature.domain.verifier import (
    NULL_ADDRESS,
    SECP256K1_N,
    SignatureVerifier,
    recover_signer,
    split_signature,
)
from src.px_signature.infrastructure.contract_signers import (
    EIP1271_MAGIC_VALUE,
    ContractSignerRegistry,
)

DIGEST = keccak(text="maker order digest")


def _to_compact(signature: bytes) -> bytes:
    """EIP-2098: fold v into the top bit of s."""
    s = int.from_bytes(signature[32:64], "big")
    vs = s | ((signature[64] - 27) << 255)
    return signature[:32] + vs.to_bytes(32, "big")


@pytest.fixture
def verifier() -> SignatureVerifier:
    return SignatureVerifier()


class TestValidSignatures:
    def test_65_byte_signature_accepted(
        self, verifier: SignatureVerifier, ctx: SimpleNamespace
    ) -> None:
        sig = ctx.sign_digest(ctx.maker_key, DIGEST)
        verifier.check(ctx.maker, DIGEST, sig)
        assert verifier.verify(ctx.maker, DIGEST, sig) is True

    def test_64_byte_compact_signature_accepted(
        self, verifier: SignatureVerifier, ctx: SimpleNamespace
    ) -> None:
        sig = _to_compact(ctx.sign_digest(ctx.maker_key, DIGEST))
        assert len(sig) == 64
        verifier.check(ctx.maker, DIGEST, sig)

    def test_compact_split_matches_full(self, ctx: SimpleNamespace) -> None:
        sig = ctx.sign_digest(ctx.maker_key, DIGEST)
        assert split_signature(sig) == split_signature(_to_compact(sig))

    def test_lowercase_signer_accepted(
        self, verifier: SignatureVerifier, ctx: SimpleNamespace
    ) -> None:
        sig = ctx.sign_digest(ctx.maker_key, DIGEST)
        assert verifier.verify(ctx.maker.lower(), DIGEST, sig) is True


class TestRejections:
    @pytest.mark.parametrize("length", [0, 63, 66, 70])
    def test_bad_length_rejected(
        self, verifier: SignatureVerifier, ctx: SimpleNamespace, length: int
    ) -> None:
        with pytest.raises(SignatureLengthInvalidError):
            verifier.check(ctx.maker, DIGEST, b"\x01" * length)

    def test_v_outside_27_28_rejected(
        self, verifier: SignatureVerifier, ctx: SimpleNamespace
    ) -> None:
        sig = ctx.sign_digest(ctx.maker_key, DIGEST)
        with pytest.raises(SignatureParameterVInvalidError):
            verifier.check(ctx.maker, DIGEST, sig[:64] + bytes([sig[64] - 27]))

    def test_high_s_twin_rejected(
        self, verifier: SignatureVerifier, ctx: SimpleNamespace
    ) -> None:
        sig = ctx.sign_digest(ctx.maker_key, DIGEST)
        s = int.from_bytes(sig[32:64], "big")
        flipped_v = 27 + (1 - (sig[64] - 27))
        twin = sig[:32] + (SECP256K1_N - s).to_bytes(32, "big") + bytes([flipped_v])
        with pytest.raises(SignatureParameterSInvalidError):
            verifier.check(ctx.maker, DIGEST, twin)

    def test_other_signer_rejected(
        self, verifier: SignatureVerifier, ctx: SimpleNamespace
    ) -> None:
        sig = ctx.sign_digest(ctx.taker_key, DIGEST)
        with pytest.raises(SignatureEOAInvalidError):
            verifier.check(ctx.maker, DIGEST, sig)

    def test_other_digest_rejected(
        self, verifier: SignatureVerifier, ctx: SimpleNamespace
    ) -> None:
        sig = ctx.sign_digest(ctx.maker_key, DIGEST)
        assert verifier.verify(ctx.maker, keccak(text="another order"), sig) is False

    def test_every_single_byte_mutation_rejected(
        self, verifier: SignatureVerifier, ctx: SimpleNamespace
    ) -> None:
        sig = ctx.sign_digest(ctx.maker_key, DIGEST)
        for position in range(len(sig)):
            mutated = bytearray(sig)
            mutated[position] ^= 0x01
            assert verifier.verify(ctx.maker, DIGEST, bytes(mutated)) is False, position


class TestNullSigner:
    def test_unrecoverable_signature_is_null_signer(self, ctx: SimpleNamespace) -> None:
        sig = ctx.sign_digest(ctx.maker_key, DIGEST)
        with patch("src.px_signature.domain.verifier.keys.Signature") as signature_cls:
            signature_cls.return_value.recover_public_key_from_msg_hash.side_effect = (
                BadSignature("no point")
            )
            with pytest.raises(NullSignerAddressError):
                recover_signer(DIGEST, sig)

    def test_zero_address_recovery_is_null_signer(self, ctx: SimpleNamespace) -> None:
        sig = ctx.sign_digest(ctx.maker_key, DIGEST)
        public_key = MagicMock()
        public_key.to_checksum_address.return_value = NULL_ADDRESS
        with patch("src.px_signature.domain.verifier.keys.Signature") as signature_cls:
            signature_cls.return_value.recover_public_key_from_msg_hash.return_value = public_key
            with pytest.raises(NullSignerAddressError):
                recover_signer(DIGEST, sig)


class TestContractSigners:
    def test_magic_value_accepts_any_encoding(self, ctx: SimpleNamespace) -> None:
        registry = ContractSignerRegistry()
        registry.register(ctx.collection, lambda digest, sig: EIP1271_MAGIC_VALUE)
        verifier = SignatureVerifier(registry)
        verifier.check(ctx.collection, DIGEST, b"\x00" * 70)

    def test_other_answer_rejected(self, ctx: SimpleNamespace) -> None:
        registry = ContractSignerRegistry()
        registry.register(ctx.collection, lambda digest, sig: b"\xff\xff\xff\xff")
        verifier = SignatureVerifier(registry)
        with pytest.raises(SignatureEOAInvalidError):
            verifier.check(ctx.collection, DIGEST, b"\x00" * 65)

    def test_unregistered_contract_falls_back_to_ecdsa(self, ctx: SimpleNamespace) -> None:
        registry = ContractSignerRegistry()
        registry.register(ctx.maker, lambda digest, sig: b"\x00\x00\x00\x00")
        registry.unregister(ctx.maker)
        verifier = SignatureVerifier(registry)
        assert verifier.verify(ctx.maker, DIGEST, ctx.sign_digest(ctx.maker_key, DIGEST))
