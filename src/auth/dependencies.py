"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.tokens import decode_access_token
from src.db import get_db
from src.db.crud.users import get_user
from src.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_token_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> dict:
    """Validate the bearer token, raising 401 if missing or invalid."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    claims = decode_access_token(credentials.credentials)
    if claims is None:
        raise _unauthorized("Invalid or expired token")
    return claims


async def get_current_user(
    claims: Annotated[dict, Depends(get_token_claims)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current user, raising 401 if not authenticated."""
    user = await get_user(db, int(claims["sub"]))
    if not user:
        raise _unauthorized("User no longer exists")
    return user
