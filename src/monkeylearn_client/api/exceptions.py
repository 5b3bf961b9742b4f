"""Exception classes for MonkeyLearn API operations.

The exception hierarchy follows a structured approach:
- APIClientError: Base class for all API-related errors
- RateLimitedError: The API throttled the request (HTTP 429)
- UnsuccessfulRequestError: Any other non-200 response
- TransportError: Network or connection failures
- RequestTimeoutError: A request exceeded its deadline
"""

from __future__ import annotations


class APIClientError(Exception):
    """Base exception class for all API client operations."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str | None = None,
        operation: str | None = None,
    ) -> None:
        """Initialize APIClientError with context information.

        Args:
            message: Descriptive error message.
            endpoint: API endpoint the request was sent to.
            operation: Operation being performed when error occurred.
        """
        super().__init__(message)
        self.endpoint = endpoint
        self.operation = operation

    def __str__(self) -> str:
        """Return formatted error message with context."""
        parts = [super().__str__()]
        if self.endpoint:
            parts.append(f'Endpoint: {self.endpoint}')
        if self.operation:
            parts.append(f'Operation: {self.operation}')
        return ' | '.join(parts)


class UnsuccessfulRequestError(APIClientError):
    """Exception for requests answered with a non-200 status code."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str | None = None,
        operation: str | None = None,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        """Initialize UnsuccessfulRequestError with response context.

        Args:
            message: Descriptive error message.
            endpoint: API endpoint the request was sent to.
            operation: Operation being performed when error occurred.
            status_code: HTTP status code from the API response.
            response_text: Raw response text from the API.
        """
        super().__init__(message, endpoint=endpoint, operation=operation)
        self.status_code = status_code
        self.response_text = response_text


class RateLimitedError(UnsuccessfulRequestError):
    """Exception raised when the API throttles a request.

    No retry is attempted; pacing is the only protection against throttling.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str | None = None,
        operation: str | None = None,
        response_text: str | None = None,
    ) -> None:
        super().__init__(
            message,
            endpoint=endpoint,
            operation=operation,
            status_code=429,
            response_text=response_text,
        )


class TransportError(APIClientError):
    """Exception for network connectivity issues."""


class RequestTimeoutError(TransportError):
    """Exception raised when a request does not complete within its deadline."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str | None = None,
        operation: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize RequestTimeoutError.

        Args:
            message: Descriptive error message.
            endpoint: API endpoint the request was sent to.
            operation: Operation being performed when error occurred.
            timeout: Deadline in seconds that was exceeded.
        """
        super().__init__(message, endpoint=endpoint, operation=operation)
        self.timeout = timeout
