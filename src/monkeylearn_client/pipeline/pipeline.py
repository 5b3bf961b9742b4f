"""Batch processing pipeline for the MonkeyLearn API.

This module contains the Pipeline class that wires the components together:
documents are split into batches, serialized into pending requests, queued,
released by the rate-limited dispatcher and streamed back as results.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from typing import Any

from ..api.client import OPERATION_TEMPLATES, Client
from ..api.models import PendingRequest, QuotaSnapshot
from ..api.quota import QuotaTracker
from ..api.transport import Transport
from ..config.settings import Settings
from ..processing.batcher import split_in_batches
from ..processing.entities import Document, Result
from ..processing.exceptions import InvalidArgumentError
from .dispatcher import Dispatcher, PipelineState
from .exceptions import PipelineError
from .request_queue import RequestQueue
from .stats import DispatchStats
from .stream import BatchFailure, ResultStream


class Pipeline:
    """Rate-limited batch pipeline for one model endpoint.

    Typical use::

        async with Pipeline(token, base_url, CLASSIFY_ENDPOINT_TEMPLATE,
                            'cl_123', max_requests_per_minute=120) as pipeline:
            pipeline.add_documents(texts)
            await pipeline.start(batch_size=10)
            async for result in pipeline.results():
                ...
            await pipeline.wait()

    Errors are available from errors(), and both streams must be drained
    (or drain() used) to consume everything the pipeline produced.
    """

    def __init__(
        self,
        token: str,
        base_url: str,
        endpoint_template: str,
        model: str,
        max_requests_per_minute: float,
        *,
        transport: Transport | None = None,
        quota: QuotaTracker | None = None,
        max_in_flight: int | None = None,
        request_timeout: float | None = None,
        queue_maxsize: int = 0,
    ) -> None:
        """Initialize the pipeline.

        Args:
            token: API authentication token.
            base_url: Base URL of the API server.
            endpoint_template: Endpoint path with a ``{model}`` field.
            model: Classifier or extractor identifier.
            max_requests_per_minute: Maximum request release rate.
            transport: Transport to send requests through.
            quota: Quota tracker shared with other pipelines, if any.
            max_in_flight: Maximum concurrent requests, None for unbounded.
            request_timeout: Per-request deadline in seconds.
            queue_maxsize: Request queue capacity, 0 for unbounded.

        Raises:
            InvalidArgumentError: If the request rate is not positive.
            ValueError: If token, base_url or model are empty.
        """
        if not max_requests_per_minute or max_requests_per_minute <= 0:
            raise InvalidArgumentError(
                f'Max requests per minute must be > 0, got {max_requests_per_minute}',
                argument='max_requests_per_minute',
                value=max_requests_per_minute,
            )

        self.client = Client(
            token,
            base_url,
            transport=transport,
            quota=quota,
            timeout=request_timeout or Settings.REQUEST_TIMEOUT,
        )
        self.endpoint = self.client.endpoint_for(endpoint_template, model)
        self.max_requests_per_minute = max_requests_per_minute

        self.queue = RequestQueue(queue_maxsize)
        self.stream = ResultStream()
        self.dispatcher = Dispatcher(
            self.client,
            self.queue,
            self.stream,
            interval=Settings.request_interval(max_requests_per_minute),
            max_in_flight=max_in_flight,
            request_timeout=request_timeout,
        )

        self._documents: list[Document] = []
        self._producer_task: asyncio.Task | None = None
        self._dispatcher_task: asyncio.Task | None = None

        logging.info(
            'Pipeline initialized for %s (%.1f requests/minute)',
            self.endpoint, max_requests_per_minute
        )

    @classmethod
    def from_settings(
        cls,
        model: str | None = None,
        operation: str | None = None,
        **kwargs: Any,
    ) -> 'Pipeline':
        """Create a pipeline from Settings; keyword arguments take precedence.

        Args:
            model: Model identifier; defaults to Settings.MONKEYLEARN_MODEL.
            operation: 'classify' or 'extract'; defaults to Settings.MONKEYLEARN_OPERATION.
            **kwargs: Overrides for the constructor arguments.

        Raises:
            InvalidArgumentError: If the operation is unknown.
        """
        operation = (operation or Settings.MONKEYLEARN_OPERATION).lower()
        if operation not in OPERATION_TEMPLATES:
            raise InvalidArgumentError(
                f'Unsupported operation: {operation}',
                argument='operation',
                value=operation,
            )

        kwargs.setdefault('max_in_flight', Settings.MAX_IN_FLIGHT)
        kwargs.setdefault('request_timeout', Settings.REQUEST_TIMEOUT)
        return cls(
            kwargs.pop('token', None) or Settings.MONKEYLEARN_TOKEN,
            kwargs.pop('base_url', None) or Settings.MONKEYLEARN_BASE_URL,
            OPERATION_TEMPLATES[operation],
            model or Settings.MONKEYLEARN_MODEL,
            kwargs.pop('max_requests_per_minute', None) or Settings.MONKEYLEARN_RPM,
            **kwargs,
        )

    # ----------------------------------------------------------------------
    # Properties
    # ----------------------------------------------------------------------
    @property
    def state(self) -> PipelineState:
        """Current lifecycle state."""
        return self.dispatcher.state

    @property
    def stats(self) -> DispatchStats:
        """Dispatcher statistics, updated while running."""
        return self.dispatcher.stats

    @property
    def quota(self) -> QuotaSnapshot | None:
        """Latest quota reported by the API."""
        return self.client.quota.snapshot()

    @property
    def started(self) -> bool:
        """Whether start() has been called."""
        return self._dispatcher_task is not None

    @property
    def documents(self) -> list[Document]:
        """Documents added so far."""
        return list(self._documents)

    # ----------------------------------------------------------------------
    # Input
    # ----------------------------------------------------------------------
    def add_documents(self, documents: Iterable[Document | str]) -> None:
        """Append documents to process; plain strings are accepted.

        Raises:
            PipelineError: If the pipeline has already started.
        """
        if self.started:
            raise PipelineError('Cannot add documents after the pipeline started')
        self._documents.extend(Document.coerce(document) for document in documents)

    def add(self, *documents: Document | str) -> None:
        """Append documents to process."""
        self.add_documents(documents)

    # ----------------------------------------------------------------------
    # Execution
    # ----------------------------------------------------------------------
    async def start(self, batch_size: int) -> ResultStream:
        """Split the documents into batches and start processing them.

        Batching happens before anything is queued, so an invalid batch size
        is reported here and nothing is sent.

        Args:
            batch_size: Number of documents per request.

        Returns:
            The result stream to drain.

        Raises:
            InvalidArgumentError: If batch_size is not a positive integer.
            PipelineError: If the pipeline has already started.
        """
        if self.started:
            raise PipelineError('Pipeline has already been started')

        batches = split_in_batches(self._documents, batch_size)
        requests = [
            self.client.build_request(batch, self.endpoint, batch_num)
            for batch_num, batch in enumerate(batches, start=1)
        ]
        logging.info(
            'Processing %d documents in %d batches of up to %d documents',
            len(self._documents), len(requests), batch_size
        )

        self._dispatcher_task = asyncio.create_task(self.dispatcher.run(), name='dispatcher')
        self._producer_task = asyncio.create_task(self._produce(requests), name='producer')
        self._dispatcher_task.add_done_callback(self._stop_producer)
        return self.stream

    async def _produce(self, requests: list[PendingRequest]) -> None:
        try:
            for request in requests:
                await self.queue.put(request)
        finally:
            await self.queue.close()

    def _stop_producer(self, _task: asyncio.Task) -> None:
        """Unblock a producer waiting on a full queue once the dispatcher is gone."""
        if self._producer_task is not None and not self._producer_task.done():
            self._producer_task.cancel()

    def results(self) -> AsyncIterator[Result]:
        """Iterate over results as they arrive, until the stream closes."""
        return self.stream.iter_results()

    def errors(self) -> AsyncIterator[BatchFailure]:
        """Iterate over batch failures as they arrive, until the stream closes."""
        return self.stream.iter_errors()

    async def wait(self) -> DispatchStats:
        """Wait until every request has been processed and the stream closed.

        Returns:
            Statistics of the run.

        Raises:
            PipelineError: If the pipeline was never started.
        """
        if self._dispatcher_task is None or self._producer_task is None:
            raise PipelineError('Pipeline has not been started')
        stats = await self._dispatcher_task
        try:
            await self._producer_task
        except asyncio.CancelledError:
            if not self._producer_task.cancelled():
                raise
        return stats

    async def run(self, batch_size: int) -> tuple[list[Result], list[BatchFailure]]:
        """Process all documents and collect every result and failure.

        Args:
            batch_size: Number of documents per request.

        Returns:
            Tuple of (results, failures) in arrival order.
        """
        stream = await self.start(batch_size)
        results, errors = await stream.drain()
        await self.wait()
        return results, errors

    def shutdown(self) -> None:
        """Stop releasing new requests and let in-flight ones finish."""
        self.dispatcher.shutdown()

    def cancel(self) -> None:
        """Stop releasing new requests and cancel in-flight ones."""
        self.dispatcher.cancel()

    async def close(self) -> None:
        """Cancel unfinished work and release the transport."""
        if self.started and self.state is not PipelineState.CLOSED:
            self.cancel()
            await self.wait()
        await self.client.close()

    async def __aenter__(self) -> 'Pipeline':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
