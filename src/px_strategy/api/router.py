"""Strategy API router: public read access to strategy records."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.px_common.database import get_db_session
from src.px_common.response import ApiResponse, success_response
from src.px_gateway.middleware.request_log import get_request_id
from src.px_strategy.application.schemas import StrategyListResponse, StrategyResponse
from src.px_strategy.application.service import StrategyRegistryService

router = APIRouter(prefix="/strategies", tags=["strategies"])
_service = StrategyRegistryService()


@router.get("", response_model=ApiResponse)
async def list_strategies(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    records = await _service.list_strategies(db)
    data = StrategyListResponse(items=[StrategyResponse.from_record(r) for r in records])
    resp = success_response(data.model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.get("/{strategy_id}", response_model=ApiResponse)
async def get_strategy(
    request: Request,
    strategy_id: int,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    record = await _service.view_strategy(strategy_id, db)
    resp = success_response(StrategyResponse.from_record(record).model_dump())
    resp.request_id = get_request_id(request)
    return resp
