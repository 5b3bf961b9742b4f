"""Input/Output operations for the MonkeyLearn client.

This package provides reading of document files and writing of results and
run statistics, with structured error handling.
"""

from .document_reader import DocumentReader
from .output_writers import ResultWriter
from .exceptions import DocumentFileError, IOError, OutputError

__all__ = [
    "DocumentReader",
    "ResultWriter",
    "DocumentFileError",
    "IOError",
    "OutputError",
]
