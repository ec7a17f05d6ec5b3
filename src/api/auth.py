"""Authentication API endpoints."""

import logging
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import create_access_token, get_token_claims, oauth_states
from src.auth.lark import LarkOAuthError, build_authorize_url, exchange_code, fetch_user_info
from src.config import get_settings
from src.constants import (
    AUTH_ERROR_GENERIC,
    AUTH_ERROR_INVALID_CODE,
    AUTH_ERROR_INVALID_STATE,
)
from src.db import get_db
from src.db.crud import get_user, upsert_lark_user
from src.models.schemas import LoginResponse, MeResponse, UserRead
from src.utils.logging import LogContext
from src.utils.metrics import metrics

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


def _client_redirect(path: str, **params: str) -> RedirectResponse:
    url = f"{settings.client_url.rstrip('/')}{path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return RedirectResponse(url=url, status_code=302)


def _error_redirect(code: str) -> RedirectResponse:
    metrics.oauth_logins_total.inc(outcome=code)
    return _client_redirect("/auth/error", error=code)


@router.get("/lark/login", response_model=LoginResponse)
async def lark_login() -> LoginResponse:
    """Start the Lark login: return the consent URL and its state."""
    if not settings.lark_configured:
        raise HTTPException(status_code=501, detail="Lark OAuth not configured")

    state = oauth_states.issue()
    return LoginResponse(auth_url=build_authorize_url(state), state=state)


@router.get("/callback")
async def lark_callback(
    db: Annotated[AsyncSession, Depends(get_db)],
    code: str | None = None,
    state: str | None = None,
) -> RedirectResponse:
    """Handle the Lark redirect; always answers with a redirect to the client."""
    if not oauth_states.consume(state):
        logger.warning("OAuth callback with missing or unknown state")
        return _error_redirect(AUTH_ERROR_INVALID_STATE)

    if not code:
        return _error_redirect(AUTH_ERROR_INVALID_CODE)

    try:
        access_token = await exchange_code(code)
        lark_user = await fetch_user_info(access_token)

        ctx = LogContext(logger, lark_id=lark_user.user_id)
        user, created = await upsert_lark_user(db, lark_user, access_token)
        ctx.info("Created user on first login" if created else "User logged in")

        token = create_access_token(user)
    except LarkOAuthError as e:
        logger.warning(f"Lark login failed: {e}")
        return _error_redirect(e.code)
    except Exception:
        logger.exception("Unexpected error during Lark callback")
        await db.rollback()
        return _error_redirect(AUTH_ERROR_GENERIC)

    metrics.oauth_logins_total.inc(outcome="success")
    return _client_redirect("/auth/success", token=token)


@router.get("/me", response_model=MeResponse)
async def get_me(
    claims: Annotated[dict, Depends(get_token_claims)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MeResponse:
    """Return the user identified by the bearer token."""
    user = await get_user(db, int(claims["sub"]))
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return MeResponse(user=UserRead.model_validate(user))


@router.post("/logout", status_code=204)
async def logout() -> Response:
    """Acknowledge logout; session tokens are stateless, the client drops its copy."""
    return Response(status_code=204)
