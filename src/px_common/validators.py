"""Field validators shared by the pydantic schemas of every module."""

from eth_utils import is_address, to_checksum_address

UINT256_MAX = 2**256 - 1


def check_uint256(value: int) -> int:
    if not (0 <= value <= UINT256_MAX):
        raise ValueError(f"value {value} is not a uint256")
    return value


def checksum_address(value: str) -> str:
    """Accept any-case hex address, return the EIP-55 checksum form."""
    if not is_address(value.lower()):
        raise ValueError(f"invalid address: {value}")
    return to_checksum_address(value)


def hex_to_bytes(value: str) -> bytes:
    """Decode a 0x-prefixed hex string."""
    if not value.startswith("0x"):
        raise ValueError("hex value must start with 0x")
    try:
        return bytes.fromhex(value[2:])
    except ValueError:
        raise ValueError(f"invalid hex value: {value}") from None
