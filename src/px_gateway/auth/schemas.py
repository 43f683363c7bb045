"""Pydantic request/response schemas for wallet login."""

from pydantic import BaseModel, field_validator

from src.px_common.validators import checksum_address, hex_to_bytes


class ChallengeRequest(BaseModel):
    address: str

    @field_validator("address")
    @classmethod
    def normalize_address(cls, v: str) -> str:
        return checksum_address(v)


class ChallengeResponse(BaseModel):
    address: str
    message: str
    expires_in: int


class LoginRequest(BaseModel):
    address: str
    signature: str  # 0x-prefixed personal_sign output

    @field_validator("address")
    @classmethod
    def normalize_address(cls, v: str) -> str:
        return checksum_address(v)

    @field_validator("signature")
    @classmethod
    def signature_is_hex(cls, v: str) -> str:
        hex_to_bytes(v)
        return v


class RefreshRequest(BaseModel):
    refresh_token: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800
    address: str


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = 1800
