"""HTTP transports for the MonkeyLearn client.

Defines the abstract transport interface used by the client, supporting both
synchronous and asynchronous POST requests, and the default implementation
built on requests (sync) and aiohttp (async).
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

import aiohttp
import requests

from .exceptions import RequestTimeoutError, TransportError
from .models import TransportResponse

if TYPE_CHECKING:  # Only for type-checkers; not needed at runtime.
    from aiohttp import ClientTimeout


class Transport(ABC):
    """Abstract base class for HTTP transports.

    A transport only moves bytes: it never interprets status codes. Network
    failures must be raised as TransportError so the caller can report them
    per request.
    """

    @abstractmethod
    def post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
    ) -> TransportResponse:
        """Perform a synchronous POST request with a JSON body.

        Args:
            url: Absolute request URL.
            payload: JSON-serializable body.
            headers: Request headers.

        Returns:
            The raw response.

        Raises:
            TransportError: On network failures.
        """

    @abstractmethod
    async def post_async(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
    ) -> TransportResponse:
        """Perform an asynchronous POST request with a JSON body.

        Args:
            url: Absolute request URL.
            payload: JSON-serializable body.
            headers: Request headers.

        Returns:
            The raw response.

        Raises:
            TransportError: On network failures.
        """

    async def close(self) -> None:
        """Release any resources held by the transport."""


class HTTPTransport(Transport):
    """Default transport using a requests session and a pooled aiohttp session.

    The aiohttp session is created lazily on the first asynchronous call, so
    the transport can be built outside of a running event loop.
    """

    def __init__(self, *, timeout: float = 60.0) -> None:
        """Initialize the transport.

        Args:
            timeout: Total request timeout in seconds.

        Raises:
            ValueError: If timeout is not positive.
        """
        if timeout <= 0:
            raise ValueError('timeout must be > 0.')

        self.timeout = timeout
        self._session = requests.Session()
        self._async_session: aiohttp.ClientSession | None = None

    def post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
    ) -> TransportResponse:
        try:
            response = self._session.post(
                url,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(
                f'Request timed out after {self.timeout}s',
                endpoint=url,
                operation='post',
                timeout=self.timeout,
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f'Request to {url} failed: {e}',
                endpoint=url,
                operation='post',
            ) from e

        return TransportResponse(
            status=response.status_code,
            headers=response.headers,
            body=response.content,
        )

    async def post_async(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
    ) -> TransportResponse:
        session = self._get_async_session()
        try:
            async with session.post(url, json=payload, headers=headers) as response:
                body = await response.read()
                return TransportResponse(
                    status=response.status,
                    headers=dict(response.headers),
                    body=body,
                )
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(
                f'Request timed out after {self.timeout}s',
                endpoint=url,
                operation='async_post',
                timeout=self.timeout,
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(
                f'Request to {url} failed: {e}',
                endpoint=url,
                operation='async_post',
            ) from e

    def _get_async_session(self) -> aiohttp.ClientSession:
        if self._async_session is None or self._async_session.closed:
            timeout_config: ClientTimeout = aiohttp.ClientTimeout(total=self.timeout)
            self._async_session = aiohttp.ClientSession(timeout=timeout_config)
            logging.debug('Opened aiohttp session (timeout=%ss)', self.timeout)
        return self._async_session

    async def close(self) -> None:
        """Close both the requests and the aiohttp sessions."""
        self._session.close()
        if self._async_session is not None and not self._async_session.closed:
            await self._async_session.close()
        self._async_session = None
