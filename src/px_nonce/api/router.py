"""Nonce API router: view generations, cancel order/subset nonces, bump generations.

Mutations act on the authenticated wallet only; nobody can cancel or bump
on behalf of another user.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_common.database import get_db_session
from src.px_common.response import ApiResponse, success_response
from src.px_common.validators import checksum_address
from src.px_gateway.auth.dependencies import get_current_address
from src.px_gateway.middleware.request_log import get_request_id
from src.px_nonce.application.schemas import (
    BumpGenerationsRequest,
    CancelNoncesRequest,
    CancelNoncesResponse,
    GenerationsResponse,
)
from src.px_nonce.application.service import NonceService
from src.px_nonce.domain.models import UserNonceState

router = APIRouter(prefix="/nonces", tags=["nonces"])
_service = NonceService()


def _generations(state: UserNonceState) -> dict[str, object]:
    return GenerationsResponse(
        user=state.user, bid_nonce=state.bid_nonce, ask_nonce=state.ask_nonce
    ).model_dump()


@router.get("/{address}", response_model=ApiResponse)
async def view_generations(
    request: Request,
    address: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    try:
        user = checksum_address(address)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    state = await _service.view_generations(user, db)
    resp = success_response(_generations(state))
    resp.request_id = get_request_id(request)
    return resp


@router.post("/order-nonces/cancel", response_model=ApiResponse)
async def cancel_order_nonces(
    request: Request,
    body: CancelNoncesRequest,
    user: Annotated[str, Depends(get_current_address)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    cancelled = await _service.cancel_order_nonces(user, body.nonces, db)
    resp = success_response(CancelNoncesResponse(user=user, cancelled=cancelled).model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.post("/subset-nonces/cancel", response_model=ApiResponse)
async def cancel_subset_nonces(
    request: Request,
    body: CancelNoncesRequest,
    user: Annotated[str, Depends(get_current_address)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    cancelled = await _service.cancel_subset_nonces(user, body.nonces, db)
    resp = success_response(CancelNoncesResponse(user=user, cancelled=cancelled).model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.post("/bump", response_model=ApiResponse)
async def bump_generations(
    request: Request,
    body: BumpGenerationsRequest,
    user: Annotated[str, Depends(get_current_address)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    state = await _service.bump_generations(user, body.bid, body.ask, db)
    resp = success_response(_generations(state))
    resp.request_id = get_request_id(request)
    return resp
