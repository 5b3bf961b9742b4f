"""Tests for the pending request queue."""

import asyncio

import pytest

from conftest import make_request
from monkeylearn_client.pipeline import QueueClosedError, RequestQueue


class TestRequestQueue:
    @pytest.mark.asyncio
    async def test_fifo_order(self) -> None:
        queue = RequestQueue()
        for n in range(1, 4):
            await queue.put(make_request(batch_num=n))
        await queue.close()

        received = []
        while (request := await queue.get()) is not None:
            received.append(request.batch_num)

        assert received == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_get_returns_none_repeatedly_after_close(self) -> None:
        queue = RequestQueue()
        await queue.close()

        assert await queue.get() is None
        assert await queue.get() is None

    @pytest.mark.asyncio
    async def test_put_after_close_raises(self) -> None:
        queue = RequestQueue()
        await queue.close()

        with pytest.raises(QueueClosedError):
            await queue.put(make_request())

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self) -> None:
        queue = RequestQueue()
        await queue.put(make_request())
        await queue.close()
        await queue.close()

        assert len(queue) == 1
        assert queue.closed

    @pytest.mark.asyncio
    async def test_get_waits_for_producer(self) -> None:
        queue = RequestQueue()

        getter = asyncio.create_task(queue.get())
        await asyncio.sleep(0.01)
        assert not getter.done()

        await queue.put(make_request(batch_num=7))

        request = await asyncio.wait_for(getter, timeout=1)
        assert request.batch_num == 7

    @pytest.mark.asyncio
    async def test_bounded_put_blocks_until_consumed(self) -> None:
        queue = RequestQueue(maxsize=1)
        await queue.put(make_request(batch_num=1))

        putter = asyncio.create_task(queue.put(make_request(batch_num=2)))
        await asyncio.sleep(0.01)
        assert not putter.done()

        assert (await queue.get()).batch_num == 1
        await asyncio.wait_for(putter, timeout=1)
        assert len(queue) == 1
