"""MonkeyLearn API client.

The client holds the authentication token and the base URL of the API, turns
batches into pending requests and executes them through a transport, either
synchronously or asynchronously. Both paths share the same response
handling: status code checks, quota update and result parsing.
"""

from __future__ import annotations

import logging
import time

from ..processing.entities import Batch, Result
from ..processing.exceptions import ParseError
from ..processing.parser import ResponseParser
from .exceptions import RateLimitedError, UnsuccessfulRequestError
from .models import PendingRequest, TransportResponse
from .quota import QuotaTracker
from .transport import HTTPTransport, Transport

CLASSIFY_ENDPOINT_TEMPLATE = '/v3/classifiers/{model}/classify/'
EXTRACT_ENDPOINT_TEMPLATE = '/v3/extractors/{model}/extract/'

OPERATION_TEMPLATES = {
    'classify': CLASSIFY_ENDPOINT_TEMPLATE,
    'extract': EXTRACT_ENDPOINT_TEMPLATE,
}


class Client:
    """Gateway to the MonkeyLearn API.

    Attributes:
        base_url: Base URL of the API server.
        transport: Transport used to send requests.
    """

    def __init__(
        self,
        token: str,
        base_url: str,
        *,
        transport: Transport | None = None,
        quota: QuotaTracker | None = None,
        timeout: float = 60.0,
    ) -> None:
        """Initialize the client.

        Args:
            token: API authentication token.
            base_url: Base URL of the API server.
            transport: Transport to use; an HTTPTransport is created if omitted.
            quota: Quota tracker to update from responses; created if omitted.
            timeout: Request timeout in seconds for the default transport.

        Raises:
            ValueError: If token or base_url are empty.
        """
        if not token:
            raise ValueError('Token must be provided for Client.')
        if not base_url:
            raise ValueError('Base URL must be provided for Client.')

        self._token = token
        self.base_url = base_url.rstrip('/')
        self.transport = transport or HTTPTransport(timeout=timeout)
        self._quota = quota or QuotaTracker()

        logging.info('MonkeyLearn client initialized with base_url=%s', self.base_url)

    @property
    def quota(self) -> QuotaTracker:
        """Quota tracker updated from every successful response."""
        return self._quota

    def endpoint_for(self, template: str, model: str) -> str:
        """Build the absolute endpoint URL for a model.

        Args:
            template: Endpoint path template containing a ``{model}`` field.
            model: Model identifier.

        Returns:
            Absolute endpoint URL.

        Raises:
            ValueError: If model is empty.
        """
        if not model:
            raise ValueError('Model must be provided.')
        path = template.format(model=model)
        if path.startswith(('http://', 'https://')):
            return path
        return f'{self.base_url}/{path.lstrip("/")}'

    def build_headers(self) -> dict[str, str]:
        """Build headers for API requests."""
        return {
            'Authorization': f'Token {self._token}',
            'Content-Type': 'application/json',
        }

    def build_request(self, batch: Batch, endpoint: str, batch_num: int = 0) -> PendingRequest:
        """Serialize a batch into a pending request.

        Args:
            batch: Documents to send.
            endpoint: Absolute endpoint URL.
            batch_num: Sequence number of the batch, used for reporting.

        Returns:
            The pending request.
        """
        return PendingRequest(
            endpoint=endpoint,
            payload=batch.to_payload(),
            headers=self.build_headers(),
            batch_num=batch_num,
            size=len(batch),
        )

    # ----------------------------------------------------------------------
    # Request execution
    # ----------------------------------------------------------------------
    def execute(self, request: PendingRequest) -> list[Result]:
        """Execute a pending request synchronously.

        Args:
            request: Request to send.

        Returns:
            One result per document, in the order returned by the API.

        Raises:
            RateLimitedError: If the API throttled the request.
            UnsuccessfulRequestError: If the API answered with a non-200 status.
            TransportError: On network failures.
            ParseError: If the response body is malformed.
        """
        start_time = time.perf_counter()
        response = self.transport.post(request.endpoint, request.payload, request.headers)
        results = self.handle_response(request, response)
        logging.debug('%s took %.3fs', request.endpoint, time.perf_counter() - start_time)
        return results

    async def execute_async(self, request: PendingRequest) -> list[Result]:
        """Execute a pending request asynchronously.

        Args:
            request: Request to send.

        Returns:
            One result per document, in the order returned by the API.

        Raises:
            RateLimitedError: If the API throttled the request.
            UnsuccessfulRequestError: If the API answered with a non-200 status.
            TransportError: On network failures.
            ParseError: If the response body is malformed.
        """
        start_time = time.perf_counter()
        response = await self.send_async(request)
        results = self.handle_response(request, response)
        logging.debug('%s took %.3fs', request.endpoint, time.perf_counter() - start_time)
        return results

    async def send_async(self, request: PendingRequest) -> TransportResponse:
        """Send a pending request without interpreting the response.

        Raises:
            TransportError: On network failures.
        """
        return await self.transport.post_async(
            request.endpoint, request.payload, request.headers
        )

    def handle_response(self, request: PendingRequest, response: TransportResponse) -> list[Result]:
        """Check the response status, update the quota and parse the results.

        A malformed quota header is logged and otherwise ignored; it never
        prevents the results from being returned.
        """
        self.check_status(request, response)
        self.update_quota(response)
        return ResponseParser.parse_results(response.body)

    @staticmethod
    def check_status(request: PendingRequest, response: TransportResponse) -> None:
        """Raise the matching error for any non-200 response.

        Raises:
            RateLimitedError: On status 429.
            UnsuccessfulRequestError: On any other status but 200.
        """
        if response.status == 429:
            raise RateLimitedError(
                f'Request got rate limited (batch {request.batch_num})',
                endpoint=request.endpoint,
                operation='execute',
                response_text=response.text,
            )
        if response.status != 200:
            raise UnsuccessfulRequestError(
                f'Unsuccessful request: status {response.status} (batch {request.batch_num})',
                endpoint=request.endpoint,
                operation='execute',
                status_code=response.status,
                response_text=response.text,
            )

    def update_quota(self, response: TransportResponse) -> bool:
        """Update the quota tracker from response headers.

        Returns:
            True if the quota was updated, False if the headers were malformed.
        """
        try:
            self._quota.update_from_headers(response.headers)
        except ParseError as e:
            logging.warning('Could not update quota from response headers: %s', e)
            return False
        return True

    # ----------------------------------------------------------------------
    # One-shot synchronous helpers
    # ----------------------------------------------------------------------
    def classify(self, model: str, batch: Batch) -> list[Result]:
        """Classify a batch of documents with a classifier model.

        Args:
            model: Classifier identifier.
            batch: Documents to classify.

        Returns:
            One result per document.
        """
        return self.execute(
            self.build_request(batch, self.endpoint_for(CLASSIFY_ENDPOINT_TEMPLATE, model))
        )

    def extract(self, model: str, batch: Batch) -> list[Result]:
        """Run an extractor model over a batch of documents.

        Args:
            model: Extractor identifier.
            batch: Documents to process.

        Returns:
            One result per document.
        """
        return self.execute(
            self.build_request(batch, self.endpoint_for(EXTRACT_ENDPOINT_TEMPLATE, model))
        )

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.transport.close()
