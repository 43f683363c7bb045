"""Pydantic request/response schemas for px_strategy."""
from pydantic import BaseModel, Field

from src.px_strategy.domain.models import StrategyRecord


class AddStrategyRequest(BaseModel):
    has_royalties: bool
    protocol_fee_bp: int = Field(..., ge=0)
    max_protocol_fee_bp: int = Field(..., ge=0)
    implementation: str


class UpdateStrategyRequest(BaseModel):
    has_royalties: bool
    protocol_fee_bp: int = Field(..., ge=0)
    is_active: bool


class StrategyResponse(BaseModel):
    strategy_id: int
    is_active: bool
    has_royalties: bool
    protocol_fee_bp: int
    max_protocol_fee_bp: int
    implementation: str

    @classmethod
    def from_record(cls, record: StrategyRecord) -> "StrategyResponse":
        return cls(
            strategy_id=record.strategy_id,
            is_active=record.is_active,
            has_royalties=record.has_royalties,
            protocol_fee_bp=record.protocol_fee_bp,
            max_protocol_fee_bp=record.max_protocol_fee_bp,
            implementation=record.implementation,
        )


class StrategyListResponse(BaseModel):
    items: list[StrategyResponse]
