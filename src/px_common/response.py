"""Unified API response wrapper.

Every endpoint answers with:
{
    "code": 0,           // 0=success, otherwise an AppError code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field

from src.px_common.datetime_utils import utc_now
from src.px_common.errors import AppError


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(code=0, message=message, data=data)


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None)


def app_error_response(exc: AppError) -> ApiResponse:
    """Render an AppError; reason-carrying errors expose the reason in ``data``."""
    reason = getattr(exc, "reason", None)
    data = {"reason": reason.value} if reason is not None else None
    return ApiResponse(code=exc.code, message=exc.message, data=data)
