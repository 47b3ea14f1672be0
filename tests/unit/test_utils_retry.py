"""Unit tests for git_credential_taskcluster/utils/retry.py."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from git_credential_taskcluster.utils.retry import async_retry


@pytest.fixture
def mock_sleep():
    """Patch asyncio.sleep in the retry module."""
    with patch("git_credential_taskcluster.utils.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


class TestAsyncRetry:
    """Tests for the async_retry decorator."""

    @pytest.mark.asyncio
    async def test_success_first_try(self, mock_sleep: AsyncMock) -> None:
        """No retry when the call succeeds."""
        func = AsyncMock(return_value="ok")
        func.__name__ = "func"

        result = await async_retry()(func)()

        assert result == "ok"
        assert func.await_count == 1
        mock_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_retries_with_exponential_backoff(self, mock_sleep: AsyncMock) -> None:
        """Delays grow as backoff_factor ** attempt."""
        func = AsyncMock(side_effect=[ConnectionError("a"), ConnectionError("b"), "ok"])
        func.__name__ = "func"

        result = await async_retry(max_attempts=3, backoff_factor=2.0)(func)()

        assert result == "ok"
        assert [c.args[0] for c in mock_sleep.await_args_list] == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_raises_after_max_attempts(self, mock_sleep: AsyncMock) -> None:
        """The last exception is raised once attempts run out."""
        func = AsyncMock(side_effect=ConnectionError("down"))
        func.__name__ = "func"

        with pytest.raises(ConnectionError, match="down"):
            await async_retry(max_attempts=2)(func)()

        assert func.await_count == 2

    @pytest.mark.asyncio
    async def test_other_exceptions_not_retried(self, mock_sleep: AsyncMock) -> None:
        """Exceptions outside the tuple propagate immediately."""
        func = AsyncMock(side_effect=KeyError("x"))
        func.__name__ = "func"

        with pytest.raises(KeyError):
            await async_retry(exceptions=(ConnectionError,))(func)()

        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_retry_if_predicate(self, mock_sleep: AsyncMock) -> None:
        """retry_if can veto a retry for a caught exception."""
        func = AsyncMock(side_effect=ValueError("permanent"))
        func.__name__ = "func"

        decorated = async_retry(exceptions=(ValueError,), retry_if=lambda e: "transient" in str(e))(func)

        with pytest.raises(ValueError, match="permanent"):
            await decorated()

        assert func.await_count == 1
        mock_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancellation_not_retried(self, mock_sleep: AsyncMock) -> None:
        """CancelledError passes straight through."""
        func = AsyncMock(side_effect=asyncio.CancelledError())
        func.__name__ = "func"

        with pytest.raises(asyncio.CancelledError):
            await async_retry()(func)()

        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_preserves_metadata(self) -> None:
        """functools.wraps keeps the wrapped function's name."""

        @async_retry()
        async def fetch_secret() -> str:
            return "x"

        assert fetch_secret.__name__ == "fetch_secret"
        assert await fetch_secret() == "x"
