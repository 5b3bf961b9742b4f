"""Pipeline-related exceptions for the MonkeyLearn client."""


class PipelineError(Exception):
    """Base exception for pipeline lifecycle errors."""


class QueueClosedError(PipelineError):
    """Raised when a request is enqueued after the queue was closed."""


class StreamClosedError(PipelineError):
    """Raised when writing to, or closing, an already closed result stream."""


class RequestCancelledError(PipelineError):
    """Reported for a request whose execution was cancelled before completing."""


class ApplicationError(Exception):
    """Custom exception for application-level errors."""
