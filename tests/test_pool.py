import asyncio

import pytest

from langtrend.application.pool import BoundedPool


@pytest.mark.anyio
async def test_map_preserves_input_order():
    async def _double(n: int) -> int:
        # Later items finish first
        await asyncio.sleep(0.001 * (10 - n))
        return n * 2

    result = await BoundedPool(3).map(_double, range(10))
    assert result == [n * 2 for n in range(10)]


@pytest.mark.anyio
async def test_map_never_exceeds_limit():
    in_flight = 0
    peak = 0

    async def _work(_: int) -> None:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.001)
        in_flight -= 1

    await BoundedPool(10).map(_work, range(37))
    assert peak == 10


@pytest.mark.anyio
async def test_map_empty():
    async def _never(_):
        raise AssertionError("should not be called")

    assert await BoundedPool(4).map(_never, []) == []


@pytest.mark.anyio
async def test_first_failure_propagates_and_cancels_rest():
    started = []

    async def _work(n: int) -> int:
        started.append(n)
        if n == 1:
            raise RuntimeError("boom")
        await asyncio.sleep(1)
        return n

    with pytest.raises(RuntimeError, match="boom"):
        await BoundedPool(2).map(_work, range(20))

    # Only the first window got a slot before the failure
    assert len(started) < 20


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        BoundedPool(0)
