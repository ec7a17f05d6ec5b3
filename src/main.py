"""DRAV FastAPI application: middleware, lifespan and monitoring endpoints."""

import asyncio
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.gzip import GZipMiddleware

from src.api import api_router
from src.auth import oauth_states
from src.config import get_settings
from src.constants import MAX_CONSECUTIVE_FAILURES, OAUTH_STATE_PURGE_INTERVAL
from src.db import async_session_maker, init_db
from src.utils.cache import cache
from src.utils.http_client import close_all_clients
from src.utils.logging import get_logger, setup_logging
from src.utils.metrics import MetricsMiddleware, metrics

settings = get_settings()
setup_logging()
logger = get_logger(__name__)

APP_VERSION = "0.1.0"

_started_at = datetime.now(UTC)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to every API response."""

    HEADERS = {
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
        # Nothing is rendered from this origin
        "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    }

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers.update(self.HEADERS)
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


async def run_periodic(
    name: str,
    interval: float,
    job: Callable[[], Awaitable[None]],
    shutdown_event: asyncio.Event,
) -> None:
    """Run `job` every `interval` seconds until shutdown.

    After MAX_CONSECUTIVE_FAILURES failures in a row the loop sits out one
    extra interval before trying again.
    """
    failures = 0
    while not shutdown_event.is_set():
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
            return
        except TimeoutError:
            pass

        try:
            await job()
            failures = 0
        except Exception as e:
            failures += 1
            logger.error(f"{name} failed ({failures}/{MAX_CONSECUTIVE_FAILURES}): {e}")
            if failures >= MAX_CONSECUTIVE_FAILURES:
                logger.critical(f"{name}: too many consecutive failures, backing off")
                await asyncio.sleep(interval)
                failures = 0


async def purge_oauth_states() -> None:
    purged = oauth_states.purge_expired()
    if purged:
        logger.info(f"Purged {purged} expired OAuth states")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    await init_db()
    logger.info("Database initialized")

    if await cache.connect():
        logger.info("Redis cache connected")
    else:
        logger.warning("Redis cache unavailable - dashboard responses are not cached")

    if not settings.lark_configured:
        logger.warning("LARK_APP_ID / LARK_APP_SECRET not set - login is disabled")

    shutdown_event = asyncio.Event()
    purge_task = asyncio.create_task(
        run_periodic(
            "OAuth state purge", OAUTH_STATE_PURGE_INTERVAL, purge_oauth_states, shutdown_event
        ),
        name="oauth_state_purge",
    )

    yield

    shutdown_event.set()
    await cache.close()
    await close_all_clients()

    try:
        await asyncio.wait_for(purge_task, timeout=10.0)
    except TimeoutError:
        purge_task.cancel()
        await asyncio.gather(purge_task, return_exceptions=True)

    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Disaster-recovery maturity assessments for office sites",
    version=APP_VERSION,
    lifespan=lifespan,
)

# First added = last executed
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=500)

# The dashboard SPA is served from CLIENT_URL
cors_origins = [settings.client_url]
if settings.is_development:
    cors_origins = list(dict.fromkeys(cors_origins + ["http://localhost:3000", "http://localhost:8080"]))
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router)


async def _check_database() -> None:
    async with async_session_maker() as db:
        await db.execute(text("SELECT 1"))


async def _check_redis() -> None:
    await cache.ping()


HEALTH_CHECKS: dict[str, Callable[[], Awaitable[None]]] = {
    "database": _check_database,
    "redis": _check_redis,
}


@app.get("/health", tags=["monitoring"])
async def health_check() -> JSONResponse:
    """Report dependency health; 503 when any check fails."""
    checks: dict[str, dict[str, Any]] = {}
    for name, check in HEALTH_CHECKS.items():
        started = time.perf_counter()
        try:
            await check()
            checks[name] = {"status": "healthy"}
        except Exception as e:
            logger.warning(f"Health check {name} failed: {e}")
            checks[name] = {"status": "unhealthy"}
        checks[name]["latency_ms"] = round((time.perf_counter() - started) * 1000, 1)

    healthy = all(c["status"] == "healthy" for c in checks.values())
    now = datetime.now(UTC)
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "degraded",
            "timestamp": now.isoformat(),
            "uptime_seconds": (now - _started_at).total_seconds(),
            "version": APP_VERSION,
            "checks": checks,
        },
    )


@app.get("/metrics", tags=["monitoring"])
async def prometheus_metrics() -> Response:
    """Prometheus text exposition of the in-process counters."""
    return Response(content=metrics.format_prometheus(), media_type="text/plain; charset=utf-8")
