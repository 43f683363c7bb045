"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.

The operator key matches the OPERATOR_ADDRESSES entry set by tests/conftest.py.
"""

import secrets
from collections.abc import Awaitable, Callable

import pytest
import pytest_asyncio
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys import keys
from httpx import ASGITransport, AsyncClient

from src.main import app

OPERATOR_KEY = keys.PrivateKey(b"\x0a" * 32)

LoginFn = Callable[[keys.PrivateKey], Awaitable[dict[str, str]]]


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def login(client: AsyncClient) -> LoginFn:
    """Challenge, personal_sign, login; returns the Bearer header for ``key``."""

    async def _login(key: keys.PrivateKey) -> dict[str, str]:
        address = key.public_key.to_checksum_address()
        challenge = await client.post("/api/v1/auth/challenge", json={"address": address})
        message = challenge.json()["data"]["message"]
        signed = Account.sign_message(encode_defunct(text=message), private_key=key.to_bytes())
        resp = await client.post(
            "/api/v1/auth/login",
            json={"address": address, "signature": "0x" + bytes(signed.signature).hex()},
        )
        return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}

    return _login


@pytest.fixture
def operator_key() -> keys.PrivateKey:
    return OPERATOR_KEY


@pytest.fixture
def fresh_wallet() -> keys.PrivateKey:
    """A never-seen wallet, so generations start at zero on every run."""
    return keys.PrivateKey(secrets.token_bytes(32))
