"""Result and error streams fed by the dispatcher.

The dispatcher pushes one Result per processed document on the results
channel, or one BatchFailure per failed request on the errors channel. A
single consumer drains both channels until they are closed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from ..processing.entities import Result
from .exceptions import StreamClosedError

_CLOSED = object()


@dataclass
class BatchFailure:
    """A request that produced no results.

    Attributes:
        batch_num: Sequence number of the failed batch.
        endpoint: Endpoint the request was sent to.
        size: Number of documents in the batch.
        error: The exception that made the request fail.
    """
    batch_num: int
    endpoint: str
    size: int
    error: Exception

    def __str__(self) -> str:
        return f'Batch {self.batch_num} ({self.size} documents) failed: {self.error}'


class ResultStream:
    """Fan-in channels of results and batch failures.

    Results arrive in completion order, which is not the submission order.
    The stream is closed exactly once, by its producer, after every producer
    task has finished.
    """

    def __init__(self) -> None:
        self._results: asyncio.Queue = asyncio.Queue()
        self._errors: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self.results_count = 0
        self.errors_count = 0

    @property
    def closed(self) -> bool:
        """Whether the producer side has closed the stream."""
        return self._closed

    def put_result(self, result: Result) -> None:
        """Publish a result.

        Raises:
            StreamClosedError: If the stream is closed.
        """
        self._ensure_open()
        self._results.put_nowait(result)
        self.results_count += 1

    def put_error(self, failure: BatchFailure) -> None:
        """Publish a batch failure.

        Raises:
            StreamClosedError: If the stream is closed.
        """
        self._ensure_open()
        self._errors.put_nowait(failure)
        self.errors_count += 1

    def close(self) -> None:
        """Close both channels.

        Raises:
            StreamClosedError: If the stream was already closed.
        """
        self._ensure_open()
        self._closed = True
        self._results.put_nowait(_CLOSED)
        self._errors.put_nowait(_CLOSED)
        logging.debug(
            'Result stream closed after %d results and %d errors',
            self.results_count, self.errors_count
        )

    async def iter_results(self) -> AsyncIterator[Result]:
        """Yield results until the stream is closed."""
        async for item in self._iterate(self._results):
            yield item

    async def iter_errors(self) -> AsyncIterator[BatchFailure]:
        """Yield batch failures until the stream is closed."""
        async for item in self._iterate(self._errors):
            yield item

    async def drain(self) -> tuple[list[Result], list[BatchFailure]]:
        """Consume both channels concurrently until they are closed.

        Returns:
            Tuple of (results, failures) in arrival order.
        """
        results, errors = await asyncio.gather(
            self._collect(self.iter_results()),
            self._collect(self.iter_errors()),
        )
        return results, errors

    def _ensure_open(self) -> None:
        if self._closed:
            raise StreamClosedError('Result stream is closed')

    @staticmethod
    async def _iterate(queue: asyncio.Queue) -> AsyncIterator[Any]:
        while True:
            item = await queue.get()
            if item is _CLOSED:
                # Leave the marker for any other reader of this channel
                queue.put_nowait(_CLOSED)
                return
            yield item

    @staticmethod
    async def _collect(iterator: AsyncIterator[Any]) -> list[Any]:
        return [item async for item in iterator]
