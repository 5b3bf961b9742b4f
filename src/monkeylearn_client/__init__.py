"""Rate-limited batch client for the MonkeyLearn text analysis API.

This package provides tools for sending documents to MonkeyLearn classifiers
and extractors in batches, without exceeding a requests-per-minute budget,
and for streaming back the results as they arrive.
"""

__version__ = "0.1.0"

# Import main classes and functions for easy access
from .api import Client, QuotaSnapshot, QuotaTracker, create_client
from .pipeline import BatchFailure, Pipeline, ResultStream
from .processing import (
    Batch,
    Classification,
    Document,
    Extraction,
    Result,
    merge_result_lists,
    split_in_batches,
)

__all__ = [
    "Client",
    "QuotaSnapshot",
    "QuotaTracker",
    "create_client",
    "BatchFailure",
    "Pipeline",
    "ResultStream",
    "Batch",
    "Classification",
    "Document",
    "Extraction",
    "Result",
    "merge_result_lists",
    "split_in_batches",
]
