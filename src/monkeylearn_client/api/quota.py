"""Thread-safe tracking of the API query quota."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping

from ..processing.exceptions import ParseError
from .models import QuotaSnapshot

LIMIT_HEADER = 'X-Query-Limit-Limit'
REMAINING_HEADER = 'X-Query-Limit-Remaining'


class QuotaTracker:
    """Holds the latest quota counters reported by the API.

    Every read and write goes through a single lock, so concurrent request
    units can update and read the counters without tearing. Only the latest
    snapshot is kept; concurrent updates are last-writer-wins.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: QuotaSnapshot | None = None

    def update(self, limit: int | str | None, remaining: int | str | None) -> QuotaSnapshot:
        """Replace the current snapshot with new counter values.

        Both values are validated before anything is written, so a failed
        update leaves the previous snapshot unchanged.

        Args:
            limit: Quota limit, as an int or a numeric string.
            remaining: Remaining quota, as an int or a numeric string.

        Returns:
            The new snapshot.

        Raises:
            ParseError: If either value is not a non-negative integer.
        """
        snapshot = QuotaSnapshot(
            limit=self._parse_counter(limit, LIMIT_HEADER),
            remaining=self._parse_counter(remaining, REMAINING_HEADER),
        )
        with self._lock:
            self._snapshot = snapshot
        logging.debug('Quota updated: %d / %d remaining', snapshot.remaining, snapshot.limit)
        return snapshot

    def update_from_headers(self, headers: Mapping[str, str]) -> QuotaSnapshot:
        """Update the snapshot from response headers.

        Args:
            headers: Response headers (case-insensitive mapping).

        Returns:
            The new snapshot.

        Raises:
            ParseError: If a quota header is missing or malformed.
        """
        return self.update(headers.get(LIMIT_HEADER), headers.get(REMAINING_HEADER))

    def snapshot(self) -> QuotaSnapshot | None:
        """Return the latest snapshot, or None if no update happened yet."""
        with self._lock:
            return self._snapshot

    @staticmethod
    def _parse_counter(value: int | str | None, name: str) -> int:
        if isinstance(value, bool):
            value = None
        if isinstance(value, int):
            number = value
        else:
            text = '' if value is None else str(value).strip()
            if not text.isdigit() or not text.isascii():
                raise ParseError(
                    f'Invalid quota value for {name}: {value!r}',
                    parse_type='quota',
                    content=None if value is None else str(value),
                )
            number = int(text)

        if number < 0:
            raise ParseError(
                f'Quota value for {name} must be non-negative, got {number}',
                parse_type='quota',
                content=str(value),
            )
        return number
