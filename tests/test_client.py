"""Tests for the API client and its synchronous request path."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from conftest import BASE_URL, TOKEN, StubTransport, echo_body, quota_headers
from monkeylearn_client.api import (
    APIClientError,
    Client,
    HTTPTransport,
    QuotaSnapshot,
    RateLimitedError,
    RequestTimeoutError,
    TransportError,
    TransportResponse,
    UnsuccessfulRequestError,
    create_client,
)
from monkeylearn_client.config import Settings
from monkeylearn_client.processing import Batch, Document


def _mock_response(status_code=200, body=b'[]', headers=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = body
    response.headers = CaseInsensitiveDict(headers or {})
    return response


class TestClientInitialization:
    def test_requires_token(self) -> None:
        with pytest.raises(ValueError):
            Client('', BASE_URL, transport=StubTransport())

    def test_requires_base_url(self) -> None:
        with pytest.raises(ValueError):
            Client(TOKEN, '', transport=StubTransport())

    def test_default_transport(self) -> None:
        client = Client(TOKEN, BASE_URL)

        assert isinstance(client.transport, HTTPTransport)

    def test_endpoint_for(self) -> None:
        client = Client(TOKEN, BASE_URL + '/', transport=StubTransport())

        assert client.endpoint_for('/v3/classifiers/{model}/classify/', 'cl_1') == (
            f'{BASE_URL}/v3/classifiers/cl_1/classify/'
        )
        assert client.endpoint_for('https://other.test/{model}/', 'm') == 'https://other.test/m/'

    def test_endpoint_requires_model(self) -> None:
        with pytest.raises(ValueError):
            Client(TOKEN, BASE_URL, transport=StubTransport()).endpoint_for('/{model}/', '')

    def test_build_request(self, client) -> None:
        batch = Batch((Document('a', '1'), Document('b', '2')))

        request = client.build_request(batch, f'{BASE_URL}/x/', batch_num=4)

        assert request.size == 2
        assert request.batch_num == 4
        assert request.payload == batch.to_payload()
        assert request.headers == {
            'Authorization': f'Token {TOKEN}',
            'Content-Type': 'application/json',
        }


class TestClientSync:
    def test_classify(self, client, transport) -> None:
        results = client.classify('cl_1', Batch((Document('good', 'g'),)))

        url, _, _ = transport.calls[0]
        assert url == f'{BASE_URL}/v3/classifiers/cl_1/classify/'
        assert [r.external_id for r in results] == ['g']
        assert results[0].classifications[0].tag_name == 'Positive'
        assert client.quota.snapshot() == QuotaSnapshot(1000, 999)

    def test_extract(self, client, transport) -> None:
        client.extract('ex_1', Batch((Document('text'),)))

        url, _, _ = transport.calls[0]
        assert url == f'{BASE_URL}/v3/extractors/ex_1/extract/'

    def test_rate_limited(self) -> None:
        transport = StubTransport(respond=lambda url, payload: TransportResponse(status=429))
        client = Client(TOKEN, BASE_URL, transport=transport)

        with pytest.raises(RateLimitedError) as exc_info:
            client.classify('cl_1', Batch((Document('x'),)))

        assert exc_info.value.status_code == 429
        assert client.quota.snapshot() is None

    def test_unsuccessful_request_keeps_response_text(self) -> None:
        transport = StubTransport(
            respond=lambda url, payload: TransportResponse(status=401, body=b'{"detail": "bad token"}')
        )
        client = Client(TOKEN, BASE_URL, transport=transport)

        with pytest.raises(UnsuccessfulRequestError) as exc_info:
            client.classify('cl_1', Batch((Document('x'),)))

        assert exc_info.value.status_code == 401
        assert 'bad token' in exc_info.value.response_text
        assert 'Endpoint:' in str(exc_info.value)

    def test_malformed_quota_is_not_fatal(self) -> None:
        transport = StubTransport(respond=lambda url, payload: TransportResponse(
            status=200, headers=quota_headers('n/a', 'n/a'), body=echo_body(payload)
        ))
        client = Client(TOKEN, BASE_URL, transport=transport)

        results = client.classify('cl_1', Batch((Document('x'),)))

        assert len(results) == 1
        assert client.quota.snapshot() is None


class TestHTTPTransportSync:
    @patch.object(requests.Session, 'post')
    def test_post(self, mock_post) -> None:
        mock_post.return_value = _mock_response(
            body=echo_body({'data': [{'text': 'hi', 'external_id': 'h'}]}),
            headers=quota_headers(10, 3),
        )
        client = Client(TOKEN, BASE_URL, timeout=5)

        results = client.classify('cl_1', Batch((Document('hi', 'h'),)))

        assert [r.text for r in results] == ['hi']
        assert client.quota.snapshot() == QuotaSnapshot(10, 3)
        _, kwargs = mock_post.call_args
        assert kwargs['json'] == {'data': [{'text': 'hi', 'external_id': 'h'}]}
        assert kwargs['headers']['Authorization'] == f'Token {TOKEN}'
        assert kwargs['timeout'] == 5

    @patch.object(requests.Session, 'post')
    def test_timeout(self, mock_post) -> None:
        mock_post.side_effect = requests.exceptions.ReadTimeout('slow')

        with pytest.raises(RequestTimeoutError):
            HTTPTransport(timeout=1).post(f'{BASE_URL}/x', {'data': []}, {})

    @patch.object(requests.Session, 'post')
    def test_connection_error(self, mock_post) -> None:
        mock_post.side_effect = requests.exceptions.ConnectionError('refused')

        with pytest.raises(TransportError) as exc_info:
            HTTPTransport().post(f'{BASE_URL}/x', {'data': []}, {})

        assert not isinstance(exc_info.value, RequestTimeoutError)

    def test_invalid_timeout(self) -> None:
        with pytest.raises(ValueError):
            HTTPTransport(timeout=0)


class TestCreateClient:
    def test_uses_settings(self, monkeypatch) -> None:
        monkeypatch.setattr(Settings, 'MONKEYLEARN_TOKEN', 'from-env')
        monkeypatch.setattr(Settings, 'MONKEYLEARN_BASE_URL', 'http://env.test')

        client = create_client(transport=StubTransport())

        assert client.base_url == 'http://env.test'
        assert client.build_headers()['Authorization'] == 'Token from-env'

    def test_missing_token(self, monkeypatch) -> None:
        monkeypatch.setattr(Settings, 'MONKEYLEARN_TOKEN', None)

        with pytest.raises(APIClientError) as exc_info:
            create_client(base_url=BASE_URL)

        assert exc_info.value.operation == 'factory_creation'
