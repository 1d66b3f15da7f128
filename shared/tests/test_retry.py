"""
Unit tests for the shared retry decorator.
"""

import pytest
from unittest.mock import AsyncMock, patch

from shared.retry import RetryConfig, RetryError, retry_on_exception, _calculate_delay


class TransientError(Exception):
    pass


class TestRetryOnException:
    """Test cases for retry_on_exception."""

    @pytest.fixture
    def config(self):
        """Retry configuration without delays."""
        return RetryConfig(max_attempts=3, base_delay=0.0, jitter=False)

    @pytest.mark.asyncio
    async def test_returns_first_success(self, config):
        func = AsyncMock(side_effect=[TransientError("first"), "ok"])
        func.__name__ = "fetch"

        result = await retry_on_exception((TransientError,), config=config)(func)()

        assert result == "ok"
        assert func.await_count == 2

    @pytest.mark.asyncio
    async def test_raises_retry_error_when_exhausted(self, config):
        func = AsyncMock(side_effect=TransientError("down"))
        func.__name__ = "fetch"

        with pytest.raises(RetryError) as exc_info:
            await retry_on_exception((TransientError,), config=config)(func)()

        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.last_exception, TransientError)
        assert func.await_count == 3

    @pytest.mark.asyncio
    async def test_other_exceptions_are_not_retried(self, config):
        func = AsyncMock(side_effect=ValueError("bad input"))
        func.__name__ = "fetch"

        with pytest.raises(ValueError):
            await retry_on_exception((TransientError,), config=config)(func)()

        assert func.await_count == 1

    def test_preserves_function_metadata(self, config):
        async def fetch_status():
            """Fetch the upstream status."""
            return "ok"

        wrapped = retry_on_exception((TransientError,), config=config)(fetch_status)

        assert wrapped.__name__ == "fetch_status"
        assert wrapped.__doc__ == "Fetch the upstream status."
        assert wrapped.__wrapped__ is fetch_status

    @pytest.mark.asyncio
    async def test_sleeps_between_attempts(self):
        config = RetryConfig(max_attempts=3, base_delay=0.5, jitter=False)
        func = AsyncMock(side_effect=TransientError("down"))
        func.__name__ = "fetch"

        with patch("shared.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            with pytest.raises(RetryError):
                await retry_on_exception((TransientError,), config=config)(func)()

        assert [call.args[0] for call in mock_sleep.await_args_list] == [0.5, 1.0]


class TestCalculateDelay:
    """Test cases for backoff calculation."""

    def test_exponential_capped(self):
        config = RetryConfig(base_delay=1.0, max_delay=3.0, jitter=False)

        assert [_calculate_delay(n, config) for n in (1, 2, 3)] == [1.0, 2.0, 3.0]

    def test_jitter_stays_within_ten_percent(self):
        config = RetryConfig(base_delay=1.0, jitter=True)

        for _ in range(20):
            assert 0.9 <= _calculate_delay(1, config) <= 1.1
