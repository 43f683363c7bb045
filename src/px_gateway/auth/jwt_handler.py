"""JWT token creation and verification.

The subject of every token is the checksummed wallet address that proved
control of its key through the login challenge. Tokens also carry the chain
id of the EIP-712 domain they were issued under; a token minted by a
deployment on another chain is rejected even if it shares the secret.

NOTE: Using HS256 (symmetric HMAC). No token revocation: once issued,
tokens are valid until expiry.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.px_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)


def _encode(address: str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    claims = {
        "sub": address,
        "type": token_type,
        "chain": settings.CHAIN_ID,
        "iat": now,
        "exp": now + lifetime,
    }
    return str(jwt.encode(claims, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(address: str) -> str:
    return _encode(address, "access", _ACCESS_EXPIRE)


def create_refresh_token(address: str) -> str:
    return _encode(address, "refresh", _REFRESH_EXPIRE)


def decode_token(token: str, expected_type: str) -> dict[str, Any]:
    """Decode a token and enforce its type and chain.

    Raises:
        InvalidCredentialsError: invalid access token.
        InvalidRefreshTokenError: invalid refresh token.
    """
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise _auth_error(expected_type) from None

    if claims.get("type") != expected_type or claims.get("chain") != settings.CHAIN_ID:
        raise _auth_error(expected_type)
    return claims


def _auth_error(expected_type: str) -> Exception:
    if expected_type == "access":
        return InvalidCredentialsError()
    return InvalidRefreshTokenError()
