"""Tests for retry with exponential backoff."""

import httpx
import pytest

from src.utils.retry import RetryConfig, retry_async

NO_DELAY = RetryConfig(max_retries=2, base_delay=0, max_delay=0)


class _Flaky:
    """Fails `failures` times, then answers 200."""

    def __init__(self, failures: int, error: Exception | None = None, status: int = 503):
        self.calls = 0
        self.failures = failures
        self.error = error
        self.status = status

    async def __call__(self) -> httpx.Response:
        self.calls += 1
        if self.calls <= self.failures:
            if self.error:
                raise self.error
            return httpx.Response(self.status)
        return httpx.Response(200)


class TestRetryAsync:
    @pytest.mark.asyncio
    async def test_recovers_from_transient_errors(self):
        call = _Flaky(failures=2, error=httpx.ConnectError("refused"))
        response = await retry_async(call, NO_DELAY)

        assert response.status_code == 200
        assert call.calls == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        call = _Flaky(failures=10, error=httpx.ReadError("reset"))
        assert await retry_async(call, NO_DELAY) is None
        assert call.calls == 3

    @pytest.mark.asyncio
    async def test_retries_retryable_status(self):
        call = _Flaky(failures=1, status=503)
        response = await retry_async(call, NO_DELAY)
        assert response.status_code == 200
        assert call.calls == 2

    @pytest.mark.asyncio
    async def test_client_errors_returned_immediately(self):
        call = _Flaky(failures=1, status=400)
        response = await retry_async(call, NO_DELAY)
        assert response.status_code == 400
        assert call.calls == 1

    @pytest.mark.asyncio
    async def test_non_retryable_exception_propagates(self):
        call = _Flaky(failures=1, error=ValueError("bug"))
        with pytest.raises(ValueError):
            await retry_async(call, NO_DELAY)

    def test_delay_is_capped(self):
        config = RetryConfig(base_delay=1, max_delay=3, exponential_base=2)
        assert [config.delay_for(i) for i in range(4)] == [1, 2, 3, 3]
