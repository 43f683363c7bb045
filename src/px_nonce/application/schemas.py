"""Pydantic request/response schemas for px_nonce.

Nonces are uint256, so they travel as JSON integers of arbitrary size.
Emptiness is a domain error (EmptyBatch), not a schema error.
"""
from pydantic import BaseModel, field_validator

from src.px_common.validators import check_uint256


class CancelNoncesRequest(BaseModel):
    nonces: list[int]

    @field_validator("nonces")
    @classmethod
    def nonces_are_uint256(cls, v: list[int]) -> list[int]:
        for nonce in v:
            check_uint256(nonce)
        return v


class CancelNoncesResponse(BaseModel):
    user: str
    cancelled: list[int]


class BumpGenerationsRequest(BaseModel):
    bid: bool = False
    ask: bool = False


class GenerationsResponse(BaseModel):
    user: str
    bid_nonce: int
    ask_nonce: int
