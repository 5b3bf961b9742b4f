"""Rate-limited dispatcher executing queued API requests.

The dispatcher takes one request at a time off the request queue, never
faster than the configured pacing interval, and runs each released request
as its own task. Every task reports either all of its results or exactly one
failure on the result stream. The stream is closed once, by the dispatcher,
after all of its tasks have finished.

Request lifecycle: Queued -> Released -> Executing -> Completed | Failed.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from enum import Enum

from ..api.client import Client
from ..api.exceptions import APIClientError, RequestTimeoutError
from ..api.models import PendingRequest, TransportResponse
from ..processing.exceptions import ProcessingError
from ..processing.parser import ResponseParser
from .exceptions import PipelineError, RequestCancelledError
from .pacing import Ticker
from .request_queue import RequestQueue
from .stats import DispatchStats
from .stream import BatchFailure, ResultStream


class PipelineState(Enum):
    """Lifecycle of a dispatcher run."""
    STARTING = 'starting'
    RUNNING = 'running'
    DRAINING = 'draining'
    CLOSED = 'closed'


class Dispatcher:
    """Paced executor draining a RequestQueue into a ResultStream.

    The pacing interval caps how often requests are released, not how many
    run at once. In-flight concurrency can additionally be bounded with
    max_in_flight.
    """

    def __init__(
        self,
        client: Client,
        queue: RequestQueue,
        stream: ResultStream,
        *,
        interval: float,
        max_in_flight: int | None = None,
        request_timeout: float | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            client: API client used to send requests and check responses.
            queue: Queue of pending requests to drain.
            stream: Stream receiving results and failures; closed by run().
            interval: Minimum number of seconds between two releases.
            max_in_flight: Maximum number of concurrently executing requests,
                None for unbounded.
            request_timeout: Per-request deadline in seconds, None for none.

        Raises:
            ValueError: If any limit is not positive.
        """
        if max_in_flight is not None and max_in_flight <= 0:
            raise ValueError('max_in_flight must be > 0.')
        if request_timeout is not None and request_timeout <= 0:
            raise ValueError('request_timeout must be > 0.')

        self.client = client
        self.queue = queue
        self.stream = stream
        self.request_timeout = request_timeout
        self.max_in_flight = max_in_flight

        self.state = PipelineState.STARTING
        self.stats = DispatchStats()

        self._ticker = Ticker(interval)
        self._semaphore = asyncio.Semaphore(max_in_flight) if max_in_flight else None
        self._stop = asyncio.Event()
        self._in_flight: set[asyncio.Task] = set()

    @property
    def interval(self) -> float:
        """Minimum number of seconds between two releases."""
        return self._ticker.interval

    def shutdown(self) -> None:
        """Stop releasing requests; in-flight requests are allowed to finish.

        Requests still queued are consumed and counted as skipped so the
        producer is never left blocked.
        """
        if not self._stop.is_set():
            logging.info('Dispatcher shutdown requested (%d requests in flight)', len(self._in_flight))
        self._stop.set()

    def cancel(self) -> None:
        """Stop releasing requests and cancel every in-flight request."""
        self.shutdown()
        for task in list(self._in_flight):
            task.cancel()

    async def run(self) -> DispatchStats:
        """Drain the queue until it is closed and empty.

        Returns:
            Statistics of the run.

        Raises:
            PipelineError: If the dispatcher has already been run.
        """
        if self.state is not PipelineState.STARTING:
            raise PipelineError(f'Dispatcher cannot run from state {self.state.value}')

        self.state = PipelineState.RUNNING
        self.stats.start_time = time.time()
        self._ticker.start()
        logging.info('Dispatcher started (interval=%.3fs, max_in_flight=%s)',
                     self.interval, self.max_in_flight)

        try:
            # The task group is the join barrier: it exits only when every
            # released request has finished reporting.
            async with asyncio.TaskGroup() as tg:
                while (request := await self.queue.get()) is not None:
                    if not await self._acquire_slot():
                        self._skip(request)
                        continue

                    if not await self._wait_for_tick():
                        if self._semaphore is not None:
                            self._semaphore.release()
                        self._skip(request)
                        continue

                    self._release(tg, request)

                self.state = PipelineState.DRAINING
                logging.info('Request queue exhausted, waiting for %d in-flight requests',
                             len(self._in_flight))
        finally:
            self.stream.close()
            self.state = PipelineState.CLOSED
            self.stats.end_time = time.time()
            logging.info(
                f'Dispatcher finished: {self.stats.succeeded}/{self.stats.released} requests '
                f'succeeded, {self.stats.failed} failed, {self.stats.skipped} skipped, '
                f'{self.stats.results_emitted} results in {self.stats.processing_time:.2f}s'
            )

        return self.stats

    async def _acquire_slot(self) -> bool:
        """Wait for a free in-flight slot, giving up on shutdown.

        Returns:
            True when a slot is held, False on shutdown.
        """
        if self._semaphore is None:
            return not self._stop.is_set()

        acquire = asyncio.ensure_future(self._semaphore.acquire())
        stopped = asyncio.ensure_future(self._stop.wait())
        try:
            await asyncio.wait({acquire, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stopped.cancel()
            if not acquire.done():
                acquire.cancel()

        if not acquire.done() or acquire.cancelled():
            return False
        if self._stop.is_set():
            self._semaphore.release()
            return False
        return True

    async def _wait_for_tick(self) -> bool:
        """Wait until the next release is allowed.

        Returns:
            True when the request may be released, False on shutdown.
        """
        while (delay := self._ticker.delay()) > 0:
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=delay)
            except TimeoutError:
                continue
            return False
        return not self._stop.is_set()

    def _release(self, tg: asyncio.TaskGroup, request: PendingRequest) -> None:
        self.stats.release_times.append(self._ticker.mark())
        self.stats.released += 1
        logging.debug('Released batch %d (%d documents)', request.batch_num, request.size)

        task = tg.create_task(self._execute(request), name=f'batch-{request.batch_num}')
        self._in_flight.add(task)
        task.add_done_callback(functools.partial(self._finish, request))

    def _finish(self, request: PendingRequest, task: asyncio.Task) -> None:
        """Done callback of a released request's task.

        Frees the in-flight slot taken before release. A task cancelled at any
        point, including before its first step, has not reported yet and is
        reported here. run() leaves the task group only after this callback
        has run, so the stream is still open.
        """
        self._in_flight.discard(task)
        if self._semaphore is not None:
            self._semaphore.release()
        if task.cancelled():
            self._report_failure(
                request,
                RequestCancelledError(f'Batch {request.batch_num} was cancelled'),
            )

    def _skip(self, request: PendingRequest) -> None:
        self.stats.skipped += 1
        logging.info('Skipping batch %d after shutdown', request.batch_num)

    async def _execute(self, request: PendingRequest) -> None:
        """Execute one request and report its outcome on the stream.

        Cancellation is reported by _finish.
        """
        start_time = time.perf_counter()
        try:
            response = await self._send(request)
            self.client.check_status(request, response)
            if not self.client.update_quota(response):
                self.stats.quota_errors += 1
            results = ResponseParser.parse_results(response.body)
        except (APIClientError, ProcessingError) as e:
            logging.warning('Batch %d failed: %s', request.batch_num, e)
            self._report_failure(request, e)
            return
        except Exception as e:
            logging.error('Unexpected error executing batch %d: %s',
                          request.batch_num, e, exc_info=True)
            self._report_failure(request, e)
            return

        for result in results:
            self.stream.put_result(result)
        self.stats.succeeded += 1
        self.stats.results_emitted += len(results)

        logging.debug('Batch %d completed with %d results in %.3fs',
                      request.batch_num, len(results), time.perf_counter() - start_time)
        if len(results) != request.size:
            logging.warning('Batch %d: expected %d results, got %d',
                            request.batch_num, request.size, len(results))

    async def _send(self, request: PendingRequest) -> TransportResponse:
        if self.request_timeout is None:
            return await self.client.send_async(request)
        try:
            async with asyncio.timeout(self.request_timeout):
                return await self.client.send_async(request)
        except TimeoutError as e:
            raise RequestTimeoutError(
                f'Batch {request.batch_num} did not complete within {self.request_timeout}s',
                endpoint=request.endpoint,
                operation='dispatch',
                timeout=self.request_timeout,
            ) from e

    def _report_failure(self, request: PendingRequest, error: Exception) -> None:
        self.stats.failed += 1
        self.stream.put_error(BatchFailure(
            batch_num=request.batch_num,
            endpoint=request.endpoint,
            size=request.size,
            error=error,
        ))
