"""Splitting of document lists into request-sized batches."""

from __future__ import annotations

import logging
import time
from typing import Sequence

from .entities import Batch, Document
from .exceptions import InvalidArgumentError


def split_in_batches(documents: Sequence[Document | str], batch_size: int) -> list[Batch]:
    """Split a list of documents into batches of batch_size documents.

    Order is preserved across and within batches. Every batch holds exactly
    batch_size documents except possibly the last one, which holds the
    remainder.

    Args:
        documents: Documents to split. Plain strings are wrapped as documents
            without an external identifier.
        batch_size: Number of documents per batch.

    Returns:
        List of batches; empty when there are no documents.

    Raises:
        InvalidArgumentError: If batch_size is not a positive integer.
    """
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
        raise InvalidArgumentError(
            f'Batch size must be a positive integer, got {batch_size!r}',
            argument='batch_size',
            value=batch_size,
        )

    start_time = time.perf_counter()
    docs = [Document.coerce(document) for document in documents]
    batches = [
        Batch(tuple(docs[i:i + batch_size]))
        for i in range(0, len(docs), batch_size)
    ]

    logging.debug(
        'Split %d documents in %d batches of size %d (took %.6fs)',
        len(docs), len(batches), batch_size, time.perf_counter() - start_time
    )
    return batches
