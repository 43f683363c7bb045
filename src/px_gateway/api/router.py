"""Auth API router: challenge, login, refresh.

All endpoints return ApiResponse. request_id is read from
request.state (injected by RequestLogMiddleware).
"""

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Request, status

from config.settings import settings
from src.px_common.redis_client import get_redis
from src.px_common.response import ApiResponse, success_response
from src.px_common.validators import hex_to_bytes
from src.px_gateway.auth.schemas import (
    ChallengeRequest,
    ChallengeResponse,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
)
from src.px_gateway.auth.wallet_login import WalletLoginService
from src.px_gateway.middleware.request_log import get_request_id

router = APIRouter(prefix="/auth", tags=["auth"])
_service = WalletLoginService()


@router.post(
    "/challenge",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Issue a login challenge for a wallet",
)
async def challenge(
    request: Request,
    body: ChallengeRequest,
    redis: aioredis.Redis = Depends(get_redis),
) -> ApiResponse:
    message = await _service.issue_challenge(body.address, redis)
    data = ChallengeResponse(
        address=body.address,
        message=message,
        expires_in=settings.LOGIN_CHALLENGE_TTL_SECONDS,
    )
    resp = success_response(data.model_dump(), message="Challenge issued")
    resp.request_id = get_request_id(request)
    return resp


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Exchange a signed challenge for tokens",
)
async def login(
    request: Request,
    body: LoginRequest,
    redis: aioredis.Redis = Depends(get_redis),
) -> ApiResponse:
    access_token, refresh_token = await _service.login(
        body.address, hex_to_bytes(body.signature), redis
    )
    data = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        address=body.address,
    )
    resp = success_response(data.model_dump(), message="Login successful")
    resp.request_id = get_request_id(request)
    return resp


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(request: Request, body: RefreshRequest) -> ApiResponse:
    new_access_token = await _service.refresh(body.refresh_token)
    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    resp = success_response(data.model_dump(), message="Token refreshed")
    resp.request_id = get_request_id(request)
    return resp
