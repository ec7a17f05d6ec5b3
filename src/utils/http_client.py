"""Shared persistent httpx client for identity-provider calls.

Using a persistent client avoids creating a new TCP connection + TLS handshake
for every login, through connection reuse and pooling.
"""

import httpx

from src.constants import HTTPX_TIMEOUT

# Connection pool limits
_POOL_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30,
)

_lark_client: httpx.AsyncClient | None = None


def get_lark_client() -> httpx.AsyncClient:
    """Get persistent httpx client for Lark open platform calls."""
    global _lark_client
    if _lark_client is None:
        _lark_client = httpx.AsyncClient(
            timeout=HTTPX_TIMEOUT,
            limits=_POOL_LIMITS,
            http2=False,
        )
    return _lark_client


async def close_all_clients() -> None:
    """Close all persistent httpx clients. Call during app shutdown."""
    global _lark_client
    if _lark_client is not None:
        await _lark_client.aclose()
        _lark_client = None
