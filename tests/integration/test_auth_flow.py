"""Integration tests for wallet login (requires running Redis).

Run: pytest tests/integration/test_auth_flow.py -v
Pre-condition: PG + Redis up, alembic upgrade head
"""

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys import keys
from httpx import AsyncClient

# All tests in this module share the session-scoped event loop so that the
# module-level SQLAlchemy async engine pool stays alive across tests.
pytestmark = pytest.mark.asyncio(loop_scope="session")


def _sign(key: keys.PrivateKey, message: str) -> str:
    signed = Account.sign_message(encode_defunct(text=message), private_key=key.to_bytes())
    return "0x" + bytes(signed.signature).hex()


class TestWalletLogin:
    async def test_login_success(
        self, client: AsyncClient, fresh_wallet: keys.PrivateKey
    ) -> None:
        address = fresh_wallet.public_key.to_checksum_address()
        challenge = await client.post("/api/v1/auth/challenge", json={"address": address})
        assert challenge.status_code == 201
        message = challenge.json()["data"]["message"]

        resp = await client.post(
            "/api/v1/auth/login",
            json={"address": address, "signature": _sign(fresh_wallet, message)},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["address"] == address
        assert "access_token" in body["data"]
        assert "refresh_token" in body["data"]

    async def test_challenge_single_use(
        self, client: AsyncClient, fresh_wallet: keys.PrivateKey
    ) -> None:
        address = fresh_wallet.public_key.to_checksum_address()
        challenge = await client.post("/api/v1/auth/challenge", json={"address": address})
        payload = {
            "address": address,
            "signature": _sign(fresh_wallet, challenge.json()["data"]["message"]),
        }
        first = await client.post("/api/v1/auth/login", json=payload)
        assert first.status_code == 200
        replay = await client.post("/api/v1/auth/login", json=payload)
        assert replay.status_code == 401
        assert replay.json()["code"] == 1005

    async def test_refresh(self, client: AsyncClient, fresh_wallet: keys.PrivateKey) -> None:
        address = fresh_wallet.public_key.to_checksum_address()
        challenge = await client.post("/api/v1/auth/challenge", json={"address": address})
        login = await client.post(
            "/api/v1/auth/login",
            json={
                "address": address,
                "signature": _sign(fresh_wallet, challenge.json()["data"]["message"]),
            },
        )
        refresh_token = login.json()["data"]["refresh_token"]
        resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert resp.status_code == 200
        assert "access_token" in resp.json()["data"]
