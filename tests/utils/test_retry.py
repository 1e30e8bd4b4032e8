# ABOUTME: Tests for the navigation retry policy
# ABOUTME: Only NavigationError is retried; other render failures surface on the first attempt

from unittest.mock import AsyncMock

import pytest

from fuel_price_ingest.extraction.base import ExtractionError, NavigationError, RenderTimeout
from fuel_price_ingest.utils.retry import navigation_retry


def _retrying(func, attempts: int = 3):
    return navigation_retry(max_attempts=attempts, min_wait=0, max_wait=0)(func)


@pytest.mark.asyncio
async def test_transient_navigation_error_is_retried():
    func = AsyncMock(side_effect=[NavigationError("connection reset"), "rendered"])

    assert await _retrying(func)("https://gasprices.aaa.com/?state=IN") == "rendered"
    assert func.await_count == 2


@pytest.mark.asyncio
async def test_exhausted_attempts_reraise_last_error():
    func = AsyncMock(side_effect=NavigationError("ERR_NAME_NOT_RESOLVED"))

    with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
        await _retrying(func, attempts=2)()

    assert func.await_count == 2


@pytest.mark.parametrize("error", [RenderTimeout("too slow"), ExtractionError("rate limited")])
@pytest.mark.asyncio
async def test_other_failures_are_not_retried(error):
    func = AsyncMock(side_effect=error)

    with pytest.raises(type(error)):
        await _retrying(func)()

    assert func.await_count == 1


@pytest.mark.asyncio
async def test_single_attempt_disables_retry():
    func = AsyncMock(side_effect=NavigationError("HTTP 503"))

    with pytest.raises(NavigationError):
        await _retrying(func, attempts=1)()

    assert func.await_count == 1
