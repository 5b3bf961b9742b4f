"""Rate-limited processing pipeline components.

This package provides the request queue, the paced dispatcher that executes
queued requests concurrently, the result stream it feeds, run statistics,
and the Pipeline class tying them together.
"""

from .pipeline import Pipeline
from .dispatcher import Dispatcher, PipelineState
from .request_queue import RequestQueue
from .stream import BatchFailure, ResultStream
from .pacing import Ticker
from .stats import DispatchStats
from .exceptions import (
    ApplicationError,
    PipelineError,
    QueueClosedError,
    RequestCancelledError,
    StreamClosedError,
)

__all__ = [
    # Main pipeline class
    "Pipeline",

    # Pipeline components
    "Dispatcher",
    "PipelineState",
    "RequestQueue",
    "BatchFailure",
    "ResultStream",
    "Ticker",
    "DispatchStats",

    # Exceptions
    "ApplicationError",
    "PipelineError",
    "QueueClosedError",
    "RequestCancelledError",
    "StreamClosedError",
]
