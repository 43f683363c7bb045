"""Shared test fixtures.

Settings are read at import time, so the environment is prepared before
anything under ``src`` is imported.
"""

import json
import os

from eth_keys import keys

OPERATOR_KEY = keys.PrivateKey(b"\x0a" * 32)

os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ.setdefault(
    "OPERATOR_ADDRESSES", json.dumps([OPERATOR_KEY.public_key.to_checksum_address()])
)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
