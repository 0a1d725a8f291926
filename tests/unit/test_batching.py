import asyncio

import pytest

from recruitment_admin.exceptions import RequestCancelled
from recruitment_admin.logging_config import SensitiveDataFilter
from recruitment_admin.utils import batching
from recruitment_admin.utils.batching import gather_in_batches


@pytest.mark.asyncio
async def test_window_never_exceeds_batch_size():
    in_flight = 0
    peak = 0

    async def fetch(key):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01 * (key % 3))
        in_flight -= 1
        return key * 10

    results = await gather_in_batches(list(range(11)), fetch, batch_size=4)

    assert peak == 4
    assert results == {key: key * 10 for key in range(11)}


@pytest.mark.asyncio
async def test_window_settles_before_next_starts():
    started = []
    seen_after_sleep = []

    async def fetch(key):
        started.append(key)
        if key < 2:
            await asyncio.sleep(0.02)
            seen_after_sleep.append(list(started))
        return key

    await gather_in_batches([0, 1, 2, 3], fetch, batch_size=2)
    assert started == [0, 1, 2, 3]
    # The second window had not started while the first was still sleeping.
    assert seen_after_sleep == [[0, 1], [0, 1]]


@pytest.mark.asyncio
async def test_failures_become_none():
    async def fetch(key):
        if key == "bad":
            raise RuntimeError("boom")
        return key.upper()

    results = await gather_in_batches(["a", "bad", "c"], fetch, batch_size=2)
    assert results == {"a": "A", "bad": None, "c": "C"}


@pytest.mark.asyncio
async def test_cancellation_is_not_swallowed():
    async def fetch(key):
        raise RequestCancelled("view closed")

    with pytest.raises(RequestCancelled):
        await gather_in_batches(["a"], fetch)


@pytest.mark.asyncio
async def test_invalid_batch_size():
    async def fetch(key):
        return key

    with pytest.raises(ValueError):
        await gather_in_batches(["a"], fetch, batch_size=0)


def test_failure_warnings_use_the_json_logger():
    assert batching.logger.name == "batching"
    assert any(isinstance(f, SensitiveDataFilter) for f in batching.logger.filters)
