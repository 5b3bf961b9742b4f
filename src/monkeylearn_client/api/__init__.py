"""MonkeyLearn API access.

This package provides the API client, the HTTP transports it sends requests
through, the quota tracker updated from response headers, and the exception
hierarchy for API failures.
"""

from .client import (
    CLASSIFY_ENDPOINT_TEMPLATE,
    EXTRACT_ENDPOINT_TEMPLATE,
    OPERATION_TEMPLATES,
    Client,
)
from .factory import create_client
from .models import PendingRequest, QuotaSnapshot, TransportResponse
from .quota import LIMIT_HEADER, REMAINING_HEADER, QuotaTracker
from .transport import HTTPTransport, Transport
from .exceptions import (
    APIClientError,
    RateLimitedError,
    RequestTimeoutError,
    TransportError,
    UnsuccessfulRequestError,
)

__all__ = [
    "CLASSIFY_ENDPOINT_TEMPLATE",
    "EXTRACT_ENDPOINT_TEMPLATE",
    "OPERATION_TEMPLATES",
    "Client",
    "create_client",
    "PendingRequest",
    "QuotaSnapshot",
    "TransportResponse",
    "LIMIT_HEADER",
    "REMAINING_HEADER",
    "QuotaTracker",
    "HTTPTransport",
    "Transport",
    "APIClientError",
    "RateLimitedError",
    "RequestTimeoutError",
    "TransportError",
    "UnsuccessfulRequestError",
]
