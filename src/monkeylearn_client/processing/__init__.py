"""Processing module for MonkeyLearn documents and results.

This package provides the document and result data models, batch splitting,
API response parsing and merging of results from several runs.
"""

# Data models
from .entities import Batch, Classification, Document, Extraction, Result

# Batching, parsing and merging
from .batcher import split_in_batches
from .parser import ResponseParser
from .merger import merge_result_lists

# Exceptions
from .exceptions import (
    DocumentError,
    InvalidArgumentError,
    ParseError,
    ProcessingError,
)

__all__ = [
    # Data models
    "Batch",
    "Classification",
    "Document",
    "Extraction",
    "Result",

    # Processing components
    "split_in_batches",
    "ResponseParser",
    "merge_result_lists",

    # Exceptions
    "DocumentError",
    "InvalidArgumentError",
    "ParseError",
    "ProcessingError",
]
