import asyncio

import pytest

from recruitment_admin.exceptions import RequestCancelled
from recruitment_admin.utils.cancellation import CancellationToken, guarded


@pytest.mark.asyncio
async def test_guard_returns_result():
    token = CancellationToken()

    async def work():
        await asyncio.sleep(0)
        return 42

    assert await token.guard(work()) == 42
    assert not token.cancelled


@pytest.mark.asyncio
async def test_cancel_abandons_in_flight_work():
    token = CancellationToken()
    finished = False

    async def slow():
        nonlocal finished
        await asyncio.sleep(10)
        finished = True

    task = asyncio.ensure_future(token.guard(slow()))
    await asyncio.sleep(0)
    token.cancel("shutdown")

    with pytest.raises(RequestCancelled, match="shutdown"):
        await task
    assert not finished


@pytest.mark.asyncio
async def test_cancelled_token_fails_fast():
    token = CancellationToken()
    token.cancel()
    token.cancel("second reason is ignored")
    assert token.reason == "cancelled"

    with pytest.raises(RequestCancelled):
        token.raise_if_cancelled()
    with pytest.raises(RequestCancelled):
        await token.guard(asyncio.sleep(0))


@pytest.mark.asyncio
async def test_guarded_without_token():
    async def work():
        return "ok"

    assert await guarded(work(), None) == "ok"
