"""FastAPI dependencies: get_current_address, require_operator.

Usage in any protected router:
    from src.px_gateway.auth.dependencies import get_current_address

    @router.post("/protected")
    async def protected(address: str = Depends(get_current_address)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from config.settings import settings
from src.px_common.errors import InvalidCredentialsError, UnauthorizedError
from src.px_common.validators import checksum_address
from src.px_gateway.auth.jwt_handler import decode_token

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_address(token: str = Depends(oauth2_scheme)) -> str:
    """Validate the Bearer token and return the checksummed wallet address it was issued to."""
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    subject: str | None = payload.get("sub")
    if not subject:
        raise _CREDENTIALS_EXCEPTION
    try:
        return checksum_address(subject)
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None


def _operator_set() -> frozenset[str]:
    return frozenset(checksum_address(a) for a in settings.OPERATOR_ADDRESSES)


async def require_operator(address: str = Depends(get_current_address)) -> str:
    """Only configured operators may mutate strategies, currencies or oracle settings."""
    if address not in _operator_set():
        raise UnauthorizedError(address)
    return address
