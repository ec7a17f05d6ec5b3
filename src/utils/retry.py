"""Retry with exponential backoff for outbound identity-provider calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 2
    base_delay: float = 0.5  # seconds
    max_delay: float = 5.0  # seconds
    exponential_base: float = 2.0
    retryable_exceptions: tuple = (
        httpx.TimeoutException,
        httpx.ConnectError,
        httpx.ReadError,
        ConnectionError,
        TimeoutError,
    )
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)

    def delay_for(self, attempt: int) -> float:
        return min(self.base_delay * (self.exponential_base**attempt), self.max_delay)


DEFAULT_RETRY_CONFIG = RetryConfig()


async def retry_async(
    func: Callable[[], Awaitable[httpx.Response]],
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    operation_name: str = "operation",
) -> httpx.Response | None:
    """Run an HTTP call, retrying transient failures.

    Args:
        func: Zero-argument coroutine factory performing the request
        config: Retry configuration
        operation_name: Name of the operation for logging

    Returns:
        The response, or None once every attempt hit a retryable failure.
        Non-retryable exceptions propagate immediately.
    """
    attempts = config.max_retries + 1

    for attempt in range(attempts):
        try:
            response = await func()
        except config.retryable_exceptions as e:
            if attempt < config.max_retries:
                delay = config.delay_for(attempt)
                logger.warning(
                    f"{operation_name}: {type(e).__name__}, "
                    f"retrying in {delay:.1f}s (attempt {attempt + 1}/{attempts})"
                )
                await asyncio.sleep(delay)
                continue
            logger.error(f"{operation_name}: Failed after {attempts} attempts: {e}")
            return None

        if response.status_code in config.retryable_status_codes:
            if attempt < config.max_retries:
                delay = config.delay_for(attempt)
                logger.warning(
                    f"{operation_name}: Got status {response.status_code}, "
                    f"retrying in {delay:.1f}s (attempt {attempt + 1}/{attempts})"
                )
                await asyncio.sleep(delay)
                continue
            logger.error(
                f"{operation_name}: Failed after {attempts} attempts "
                f"with status {response.status_code}"
            )
            return None

        return response

    return None
