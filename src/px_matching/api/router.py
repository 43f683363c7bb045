"""Order API router: settle a taker against a signed maker order, or pre-flight a maker."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_common.database import get_db_session
from src.px_common.enums import QuoteType
from src.px_common.response import ApiResponse, success_response
from src.px_common.validators import hex_to_bytes
from src.px_gateway.auth.dependencies import get_current_address
from src.px_gateway.middleware.request_log import get_request_id
from src.px_matching.application.schemas import (
    ExecuteTakerRequest,
    ExecutionReportResponse,
    ValidateMakerRequest,
    ValidateMakerResponse,
)
from src.px_matching.application.service import SettlementService

router = APIRouter(prefix="/orders", tags=["orders"])
_service = SettlementService()


async def _settle(
    request: Request,
    taker_side: QuoteType,
    body: ExecuteTakerRequest,
    sender: str,
    db: AsyncSession,
) -> ApiResponse:
    report = await _service.execute(
        taker_side,
        sender,
        body.taker.to_domain(taker_side),
        body.maker.to_domain(),
        hex_to_bytes(body.signature),
        db,
        merkle_tree=body.merkle_tree.to_domain() if body.merkle_tree else None,
        affiliate=body.affiliate,
    )
    resp = success_response(ExecutionReportResponse.from_report(report).model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.post("/taker-bid", response_model=ApiResponse)
async def execute_taker_bid(
    request: Request,
    body: ExecuteTakerRequest,
    sender: Annotated[str, Depends(get_current_address)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    return await _settle(request, QuoteType.BID, body, sender, db)


@router.post("/taker-ask", response_model=ApiResponse)
async def execute_taker_ask(
    request: Request,
    body: ExecuteTakerRequest,
    sender: Annotated[str, Depends(get_current_address)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    return await _settle(request, QuoteType.ASK, body, sender, db)


@router.post("/validate", response_model=ApiResponse)
async def validate_maker_order(
    request: Request,
    body: ValidateMakerRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    codes = await _service.check_maker_order(
        body.maker.to_domain(),
        hex_to_bytes(body.signature),
        db,
        merkle_tree=body.merkle_tree.to_domain() if body.merkle_tree else None,
    )
    data = ValidateMakerResponse(is_valid=not codes, error_codes=codes)
    resp = success_response(data.model_dump())
    resp.request_id = get_request_id(request)
    return resp
