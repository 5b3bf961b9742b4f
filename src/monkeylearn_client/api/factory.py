"""Client factory for the MonkeyLearn client."""

from __future__ import annotations

import logging
from typing import Any

from ..config.settings import Settings
from .client import Client
from .exceptions import APIClientError


def create_client(
    token: str | None = None,
    base_url: str | None = None,
    **kwargs: Any,
) -> Client:
    """Factory function to create an API client from configuration.

    Explicit arguments take precedence over Settings.

    Args:
        token: API token; defaults to Settings.MONKEYLEARN_TOKEN.
        base_url: API base URL; defaults to Settings.MONKEYLEARN_BASE_URL.
        **kwargs: Additional arguments for client initialization.

    Returns:
        Initialized client.

    Raises:
        APIClientError: If the client cannot be created.
    """
    kwargs.setdefault('timeout', Settings.REQUEST_TIMEOUT)
    try:
        return Client(
            token or Settings.MONKEYLEARN_TOKEN,
            base_url or Settings.MONKEYLEARN_BASE_URL,
            **kwargs,
        )
    except Exception as e:
        logging.error('Unexpected error creating client: %s', e, exc_info=True)
        raise APIClientError(
            f'Failed to create client: {e}',
            operation='factory_creation',
        ) from e
