"""Wallet login: prove key ownership by signing a one-time challenge.

Flow:
  1. POST /auth/challenge  → random challenge stored in Redis (TTL)
  2. wallet signs it with EIP-191 personal_sign
  3. POST /auth/login      → challenge consumed, signer recovered, JWT issued

A challenge is deleted on first use, so a captured login signature cannot
be replayed.
"""

import logging
import secrets

import redis.asyncio as aioredis
from eth_account import Account
from eth_account.messages import encode_defunct

from config.settings import settings
from src.px_common.errors import ChallengeExpiredError, InvalidCredentialsError
from src.px_common.redis_client import challenge_key
from src.px_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)

logger = logging.getLogger(__name__)


def build_challenge_message(address: str, nonce: str) -> str:
    return (
        f"{settings.APP_NAME} login\n"
        f"Address: {address}\n"
        f"Chain ID: {settings.CHAIN_ID}\n"
        f"Nonce: {nonce}"
    )


class WalletLoginService:
    async def issue_challenge(self, address: str, redis: aioredis.Redis) -> str:
        message = build_challenge_message(address, secrets.token_hex(16))
        await redis.set(
            challenge_key(address),
            message,
            ex=settings.LOGIN_CHALLENGE_TTL_SECONDS,
        )
        return message

    async def login(
        self, address: str, signature: bytes, redis: aioredis.Redis
    ) -> tuple[str, str]:
        """Return (access_token, refresh_token) if ``address`` signed its pending challenge."""
        message = await redis.getdel(challenge_key(address))
        if message is None:
            raise ChallengeExpiredError(address)
        try:
            recovered = Account.recover_message(encode_defunct(text=message), signature=signature)
        except Exception:
            # eth_account raises assorted ValueError/BadSignature subclasses on malformed input
            logger.info("Unrecoverable login signature for %s", address)
            raise InvalidCredentialsError() from None
        if recovered != address:
            raise InvalidCredentialsError()
        logger.info("Wallet login: %s", address)
        return create_access_token(address), create_refresh_token(address)

    async def refresh(self, refresh_token: str) -> str:
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(payload["sub"])
