# src/px_admin/api/router.py
"""Admin REST API. Every route requires an operator wallet."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_admin.application.service import AdminService
from src.px_common.database import get_db_session
from src.px_common.response import ApiResponse, success_response
from src.px_common.validators import checksum_address
from src.px_gateway.auth.dependencies import require_operator
from src.px_gateway.middleware.request_log import get_request_id
from src.px_strategy.application.schemas import (
    AddStrategyRequest,
    StrategyResponse,
    UpdateStrategyRequest,
)

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


class CurrencyStatusRequest(BaseModel):
    is_allowed: bool


class OracleLatencyRequest(BaseModel):
    max_latency: int = Field(..., ge=0)


@router.post("/strategies", response_model=ApiResponse, status_code=201)
async def add_strategy(
    request: Request,
    body: AddStrategyRequest,
    operator: Annotated[str, Depends(require_operator)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    record = await _service.add_strategy(
        operator,
        body.has_royalties,
        body.protocol_fee_bp,
        body.max_protocol_fee_bp,
        body.implementation,
        db,
    )
    resp = success_response(StrategyResponse.from_record(record).model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.patch("/strategies/{strategy_id}", response_model=ApiResponse)
async def update_strategy(
    request: Request,
    strategy_id: int,
    body: UpdateStrategyRequest,
    operator: Annotated[str, Depends(require_operator)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    record = await _service.update_strategy(
        operator, strategy_id, body.has_royalties, body.protocol_fee_bp, body.is_active, db
    )
    resp = success_response(StrategyResponse.from_record(record).model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.put("/currencies/{address}", response_model=ApiResponse)
async def set_currency_status(
    request: Request,
    address: str,
    body: CurrencyStatusRequest,
    operator: Annotated[str, Depends(require_operator)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    try:
        currency = checksum_address(address)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    result = await _service.set_currency_status(operator, currency, body.is_allowed, db)
    resp = success_response(result)
    resp.request_id = get_request_id(request)
    return resp


@router.put("/oracle-latency", response_model=ApiResponse)
async def set_oracle_latency(
    request: Request,
    body: OracleLatencyRequest,
    operator: Annotated[str, Depends(require_operator)],
) -> ApiResponse:
    resp = success_response(_service.set_oracle_latency(operator, body.max_latency))
    resp.request_id = get_request_id(request)
    return resp
