# tests/conftest.py
"""Shared test fixtures and helpers.

StubTransport answers requests in memory, so the client, dispatcher and
pipeline can be exercised without a network. By default it echoes one
empty result per submitted document together with valid quota headers.
Tests customize it with a ``respond`` callable returning a TransportResponse
or raising an exception, and with a per-request ``delay``.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any, Callable

import pytest

from monkeylearn_client.api import (
    LIMIT_HEADER,
    REMAINING_HEADER,
    Client,
    PendingRequest,
    QuotaTracker,
    Transport,
    TransportResponse,
)

BASE_URL = 'http://api.test'
TOKEN = 'test-token'


def echo_body(payload: dict[str, Any]) -> bytes:
    """Build a successful response body with one result per document."""
    return json.dumps([
        {
            'text': document['text'],
            'external_id': document['external_id'],
            'error': False,
            'error_detail': None,
            'classifications': [
                {'tag_name': 'Positive', 'tag_id': 1, 'confidence': 0.9},
            ],
            'extractions': [],
        }
        for document in payload['data']
    ]).encode('utf-8')


def quota_headers(limit: int | str = 1000, remaining: int | str = 999) -> dict[str, str]:
    return {LIMIT_HEADER: str(limit), REMAINING_HEADER: str(remaining)}


def echo_response(payload: dict[str, Any]) -> TransportResponse:
    return TransportResponse(status=200, headers=quota_headers(), body=echo_body(payload))


class StubTransport(Transport):
    """In-memory transport recording every call.

    Attributes:
        calls: (url, payload, headers) of every request, in send order.
        send_times: Monotonic time at which every request was sent.
        max_concurrent: Highest number of simultaneously executing requests.
    """

    def __init__(
        self,
        respond: Callable[[str, dict[str, Any]], TransportResponse] = None,
        delay: float = 0.0,
    ) -> None:
        self.respond = respond or (lambda url, payload: echo_response(payload))
        self.delay = delay
        self.calls: list[tuple[str, dict[str, Any], dict[str, str]]] = []
        self.send_times: list[float] = []
        self.closed = False
        self.max_concurrent = 0
        self._concurrent = 0

    def post(self, url, payload, headers) -> TransportResponse:
        self.calls.append((url, payload, headers))
        self.send_times.append(time.monotonic())
        return self.respond(url, payload)

    async def post_async(self, url, payload, headers) -> TransportResponse:
        self.calls.append((url, payload, headers))
        self.send_times.append(time.monotonic())
        self._concurrent += 1
        self.max_concurrent = max(self.max_concurrent, self._concurrent)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            return self.respond(url, payload)
        finally:
            self._concurrent -= 1

    async def close(self) -> None:
        self.closed = True


def make_request(size: int = 1, batch_num: int = 1, endpoint: str = f'{BASE_URL}/v3/x/') -> PendingRequest:
    """Build a pending request holding size documents with ids '<batch>-<i>'."""
    return PendingRequest(
        endpoint=endpoint,
        payload={'data': [
            {'text': f'text {batch_num}-{i}', 'external_id': f'{batch_num}-{i}'}
            for i in range(size)
        ]},
        headers={'Authorization': f'Token {TOKEN}'},
        batch_num=batch_num,
        size=size,
    )


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def client(transport: StubTransport) -> Client:
    return Client(TOKEN, BASE_URL, transport=transport, quota=QuotaTracker())
