"""Lark open platform OAuth calls."""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from src.auth.models import LarkUser
from src.config import get_settings
from src.constants import (
    AUTH_ERROR_TOKEN_EXCHANGE,
    AUTH_ERROR_USER_INFO,
    LARK_ACCESS_TOKEN_PATH,
    LARK_AUTHORIZE_PATH,
    LARK_USER_INFO_PATH,
)
from src.utils.http_client import get_lark_client
from src.utils.metrics import metrics
from src.utils.retry import retry_async

logger = logging.getLogger(__name__)
settings = get_settings()


class LarkOAuthError(Exception):
    """A step of the Lark login failed; `code` is the client-facing error code."""

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(message or code)
        self.code = code


def _url(path: str) -> str:
    return f"{settings.lark_base_url.rstrip('/')}{path}"


def build_authorize_url(state: str) -> str:
    """Lark consent page URL for the given state."""
    params = {
        "app_id": settings.lark_app_id,
        "redirect_uri": settings.lark_redirect_uri,
        "response_type": "code",
        "state": state,
    }
    return f"{_url(LARK_AUTHORIZE_PATH)}?{urlencode(params)}"


def _json_data(response: httpx.Response | None, endpoint: str) -> dict[str, Any] | None:
    """Return the `data` object of a Lark response, recording the outcome."""
    if response is None:
        metrics.lark_api_requests_total.inc(endpoint=endpoint, status="unreachable")
        return None

    metrics.lark_api_requests_total.inc(endpoint=endpoint, status=str(response.status_code))
    try:
        body = response.json()
    except ValueError:
        logger.warning(f"Lark {endpoint}: non-JSON response ({response.status_code})")
        return None

    if not isinstance(body, dict):
        return None

    data = body.get("data")
    if not isinstance(data, dict):
        logger.warning(
            f"Lark {endpoint}: no data in response "
            f"(status={response.status_code}, code={body.get('code')})"
        )
        return None
    return data


async def exchange_code(code: str) -> str:
    """Exchange an authorization code for a user access token.

    Raises:
        LarkOAuthError: token_exchange_failed
    """
    client = get_lark_client()
    payload = {
        "grant_type": "authorization_code",
        "code": code,
        "app_id": settings.lark_app_id,
        "app_secret": settings.lark_app_secret,
    }

    response = await retry_async(
        lambda: client.post(_url(LARK_ACCESS_TOKEN_PATH), json=payload),
        operation_name="Lark token exchange",
    )
    data = _json_data(response, "access_token")
    access_token = data.get("access_token") if data else None
    if not access_token:
        raise LarkOAuthError(AUTH_ERROR_TOKEN_EXCHANGE, "Lark did not return an access token")
    return access_token


async def fetch_user_info(access_token: str) -> LarkUser:
    """Fetch the profile of the user owning `access_token`.

    Raises:
        LarkOAuthError: user_info_failed
    """
    client = get_lark_client()
    headers = {"Authorization": f"Bearer {access_token}"}

    response = await retry_async(
        lambda: client.get(_url(LARK_USER_INFO_PATH), headers=headers),
        operation_name="Lark user info",
    )
    data = _json_data(response, "user_info")
    if not data or not data.get("user_id"):
        raise LarkOAuthError(AUTH_ERROR_USER_INFO, "Lark did not return user info")
    return LarkUser.model_validate(data)
