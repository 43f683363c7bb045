"""Pydantic request/response schemas for px_matching.

Addresses are normalized to their checksum form, byte fields travel as
0x-prefixed hex, and every uint256 field is range-checked at the boundary.
"""
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from src.px_common.enums import AssetType, QuoteType
from src.px_common.validators import check_uint256, checksum_address, hex_to_bytes
from src.px_matching.domain.models import ExecutionReport
from src.px_order.domain.models import MakerOrder, MerkleTree, TakerOrder


def _hex_field(v: str) -> str:
    hex_to_bytes(v)
    return v


class MakerOrderSchema(BaseModel):
    quote_type: Literal["BID", "ASK"]
    global_nonce: int
    subset_nonce: int
    order_nonce: int
    strategy_id: int
    asset_type: Literal["SINGLE_UNIT", "MULTI_UNIT"]
    collection: str
    currency: str
    signer: str
    start_time: int
    end_time: int
    price: int
    item_ids: list[int]
    amounts: list[int]
    min_net_ratio_bp: int = Field(0, ge=0)
    additional_parameters: str = "0x"
    recipient_data: str = "0x"

    @field_validator(
        "global_nonce", "subset_nonce", "order_nonce", "strategy_id",
        "start_time", "end_time", "price", "min_net_ratio_bp",
    )
    @classmethod
    def uint256_scalar(cls, v: int) -> int:
        return check_uint256(v)

    @field_validator("item_ids", "amounts")
    @classmethod
    def uint256_list(cls, v: list[int]) -> list[int]:
        for value in v:
            check_uint256(value)
        return v

    @field_validator("collection", "currency", "signer")
    @classmethod
    def normalize_address(cls, v: str) -> str:
        return checksum_address(v)

    @field_validator("additional_parameters", "recipient_data")
    @classmethod
    def hex_bytes(cls, v: str) -> str:
        return _hex_field(v)

    def to_domain(self) -> MakerOrder:
        return MakerOrder(
            quote_type=QuoteType(self.quote_type),
            global_nonce=self.global_nonce,
            subset_nonce=self.subset_nonce,
            order_nonce=self.order_nonce,
            strategy_id=self.strategy_id,
            asset_type=AssetType(self.asset_type),
            collection=self.collection,
            currency=self.currency,
            signer=self.signer,
            start_time=self.start_time,
            end_time=self.end_time,
            price=self.price,
            item_ids=tuple(self.item_ids),
            amounts=tuple(self.amounts),
            min_net_ratio_bp=self.min_net_ratio_bp,
            additional_parameters=hex_to_bytes(self.additional_parameters),
            recipient_data=hex_to_bytes(self.recipient_data),
        )


class TakerOrderSchema(BaseModel):
    """The taker side is implied by the endpoint it is posted to."""

    recipient: str
    price: int
    item_ids: list[int] = []
    amounts: list[int] = []
    additional_parameters: str = "0x"

    @field_validator("recipient")
    @classmethod
    def normalize_address(cls, v: str) -> str:
        return checksum_address(v)

    @field_validator("price")
    @classmethod
    def uint256_scalar(cls, v: int) -> int:
        return check_uint256(v)

    @field_validator("item_ids", "amounts")
    @classmethod
    def uint256_list(cls, v: list[int]) -> list[int]:
        for value in v:
            check_uint256(value)
        return v

    @field_validator("additional_parameters")
    @classmethod
    def hex_bytes(cls, v: str) -> str:
        return _hex_field(v)

    def to_domain(self, quote_type: QuoteType) -> TakerOrder:
        return TakerOrder(
            quote_type=quote_type,
            recipient=self.recipient,
            price=self.price,
            item_ids=tuple(self.item_ids),
            amounts=tuple(self.amounts),
            additional_parameters=hex_to_bytes(self.additional_parameters),
        )


class MerkleTreeSchema(BaseModel):
    root: str
    proof: list[str] = []

    @field_validator("root")
    @classmethod
    def root_is_bytes32(cls, v: str) -> str:
        if len(hex_to_bytes(v)) != 32:
            raise ValueError("merkle root must be 32 bytes")
        return v

    @field_validator("proof")
    @classmethod
    def proof_is_hex(cls, v: list[str]) -> list[str]:
        for node in v:
            _hex_field(node)
        return v

    def to_domain(self) -> MerkleTree:
        return MerkleTree(
            root=hex_to_bytes(self.root), proof=tuple(hex_to_bytes(p) for p in self.proof)
        )


class ExecuteTakerRequest(BaseModel):
    taker: TakerOrderSchema
    maker: MakerOrderSchema
    signature: str
    merkle_tree: MerkleTreeSchema | None = None
    affiliate: str | None = None

    @field_validator("signature")
    @classmethod
    def signature_is_hex(cls, v: str) -> str:
        return _hex_field(v)

    @field_validator("affiliate")
    @classmethod
    def normalize_affiliate(cls, v: str | None) -> str | None:
        return checksum_address(v) if v is not None else None


class ValidateMakerRequest(BaseModel):
    maker: MakerOrderSchema
    signature: str
    merkle_tree: MerkleTreeSchema | None = None

    @field_validator("signature")
    @classmethod
    def signature_is_hex(cls, v: str) -> str:
        return _hex_field(v)


class ValidateMakerResponse(BaseModel):
    is_valid: bool
    error_codes: list[int]


class TransferResponse(BaseModel):
    leg: str
    from_address: str
    to_address: str
    collection: str | None
    item_ids: list[int]
    amounts: list[int]
    currency: str | None
    amount: int


class ExecutionReportResponse(BaseModel):
    order_hash: str
    quote_type: str
    strategy_id: int
    buyer: str
    seller: str
    price: int
    item_ids: list[int]
    amounts: list[int]
    is_nonce_invalidated: bool
    protocol_fee: int
    royalty_fee: int
    royalty_recipient: str | None
    net_proceeds: int
    transfers: list[TransferResponse]

    @classmethod
    def from_report(cls, report: ExecutionReport) -> "ExecutionReportResponse":
        return cls(
            order_hash=report.order_hash,
            quote_type=report.quote_type.value,
            strategy_id=report.strategy_id,
            buyer=report.buyer,
            seller=report.seller,
            price=report.settlement.price,
            item_ids=list(report.settlement.item_ids),
            amounts=list(report.settlement.amounts),
            is_nonce_invalidated=report.settlement.is_nonce_invalidated,
            protocol_fee=report.fees.protocol_fee,
            royalty_fee=report.fees.royalty_fee,
            royalty_recipient=report.fees.royalty_recipient,
            net_proceeds=report.fees.net_proceeds,
            transfers=[
                TransferResponse(
                    leg=t.leg.value,
                    from_address=t.from_address,
                    to_address=t.to_address,
                    collection=t.collection,
                    item_ids=list(t.item_ids),
                    amounts=list(t.amounts),
                    currency=t.currency,
                    amount=t.amount,
                )
                for t in report.transfers
            ],
        )
