"""Request, response and quota data models for the MonkeyLearn API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from requests.structures import CaseInsensitiveDict


@dataclass(frozen=True)
class PendingRequest:
    """An outbound request waiting to be executed.

    Attributes:
        endpoint: Absolute URL of the model endpoint.
        payload: JSON-serializable request body.
        headers: Request headers, including authorization.
        batch_num: Sequence number of the originating batch (starting at 1).
        size: Number of documents in the payload.
    """
    endpoint: str
    payload: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    batch_num: int = 0
    size: int = 0


@dataclass(frozen=True)
class TransportResponse:
    """Raw response returned by a transport.

    Attributes:
        status: HTTP status code.
        headers: Response headers; lookups should be case-insensitive.
        body: Raw response body.
    """
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b''

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            object.__setattr__(self, 'headers', CaseInsensitiveDict(dict(self.headers)))

    @property
    def text(self) -> str:
        """Return the body decoded as UTF-8, replacing invalid bytes."""
        return self.body.decode('utf-8', errors='replace')


@dataclass(frozen=True)
class QuotaSnapshot:
    """Quota counters reported by the API.

    Attributes:
        limit: Total number of queries allowed in the current plan period.
        remaining: Number of queries still available.
    """
    limit: int
    remaining: int
