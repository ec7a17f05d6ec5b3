"""Session token (JWT) issuing and verification."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.config import get_settings
from src.constants import TOKEN_TYPE_ACCESS
from src.models.user import User

settings = get_settings()


def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    """Create a signed session token for a user.

    Args:
        user: Persisted user (must have an id)
        expires_delta: Optional custom lifetime (default: JWT_EXPIRE_DAYS)

    Returns:
        Encoded JWT string
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(days=settings.jwt_expire_days))

    payload = {
        "sub": str(user.id),
        "lark_id": user.lark_id,
        "email": user.email,
        "name": user.name,
        "iat": now,
        "exp": expire,
        "type": TOKEN_TYPE_ACCESS,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Verify a session token.

    Returns:
        Claims if the signature, expiry and token type are valid, else None
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE_ACCESS:
        return None
    # sub carries the numeric user id
    sub = payload.get("sub")
    if not isinstance(sub, str) or not (sub.isascii() and sub.isdigit()):
        return None
    return payload
