"""Ordered producer/consumer queue of pending API requests."""

from __future__ import annotations

import asyncio
import logging

from ..api.models import PendingRequest
from .exceptions import QueueClosedError

_CLOSED = object()


class RequestQueue:
    """FIFO channel of pending requests with an explicit close.

    The producer puts requests and closes the queue once everything has been
    enqueued. The consumer gets requests until get() returns None, which
    happens only when the queue is both closed and empty.

    With maxsize > 0, put() blocks while the queue is full.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue = asyncio.Queue(maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the producer has closed the queue."""
        return self._closed

    def __len__(self) -> int:
        """Number of requests waiting in the queue."""
        # The close marker stays in the queue once it is reached
        return max(0, self._queue.qsize() - (1 if self._closed else 0))

    async def put(self, request: PendingRequest) -> None:
        """Enqueue a request.

        Raises:
            QueueClosedError: If the queue has been closed.
        """
        if self._closed:
            raise QueueClosedError(f'Cannot enqueue batch {request.batch_num}: queue is closed')
        await self._queue.put(request)
        logging.debug('Queued request for batch %d', request.batch_num)

    async def close(self) -> None:
        """Close the queue; pending requests can still be consumed.

        Closing an already closed queue has no effect.
        """
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)
        logging.debug('Request queue closed')

    async def get(self) -> PendingRequest | None:
        """Remove and return the next request.

        Returns:
            The next request in FIFO order, or None once the queue is closed
            and empty.
        """
        item = await self._queue.get()
        if item is _CLOSED:
            # Keep the marker so later calls also see the end of the queue
            self._queue.put_nowait(_CLOSED)
            return None
        return item
