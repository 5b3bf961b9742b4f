"""Data models for MonkeyLearn documents and processing results.

This module provides the value objects sent to the API (documents and
batches) and the ones decoded from its responses (results with their
classifications and extractions).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from .exceptions import DocumentError


@dataclass(frozen=True)
class Document:
    """A single text document submitted for processing.

    Attributes:
        text: The document text.
        external_id: Caller-assigned identifier used to correlate results.
            Uniqueness is the caller's responsibility.
    """
    text: str
    external_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize the document the way the API expects it."""
        return {'text': self.text, 'external_id': self.external_id}

    @classmethod
    def coerce(cls, value: 'Document | str') -> 'Document':
        """Return value as a Document, wrapping plain strings."""
        if isinstance(value, Document):
            return value
        if isinstance(value, str):
            return cls(text=value)
        raise TypeError(f'Cannot build a Document from {type(value).__name__}')


@dataclass(frozen=True)
class Batch:
    """A group of documents processed together in a single request.

    Attributes:
        documents: Documents in submission order.
    """
    documents: tuple[Document, ...] = ()

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def add(self, *documents: Document | str) -> 'Batch':
        """Return a new batch with the given documents appended."""
        return Batch(self.documents + tuple(Document.coerce(d) for d in documents))

    def to_payload(self) -> dict[str, Any]:
        """Serialize the batch as a request body."""
        return {'data': [document.to_payload() for document in self.documents]}


@dataclass
class Classification:
    """A tag assigned to a document.

    Attributes:
        tag_name: Human readable tag name.
        tag_id: Numeric tag identifier.
        confidence: Confidence score in [0, 1].
    """
    tag_name: str
    tag_id: int
    confidence: float


@dataclass
class Extraction:
    """A span of text extracted from a document.

    Attributes:
        tag_name: Label of the extracted element.
        extracted_text: The extracted text.
        offset_span: Half-open [start, end) character span, if reported.
        parsed_value: Typed value as returned by the extractor.
    """
    tag_name: str
    extracted_text: str
    offset_span: tuple[int, int] | None = None
    parsed_value: Any = None


@dataclass
class Result:
    """Result of processing one document, be it a classification or an extraction.

    Attributes:
        text: Text of the processed document.
        external_id: External identifier of the document, if any.
        is_error: Whether the API failed to process this document.
        error_detail: Error description when is_error is set.
        classifications: Classifications in provider order.
        extractions: Extractions in provider order.
    """
    text: str = ''
    external_id: str | None = None
    is_error: bool = False
    error_detail: str = ''
    classifications: list[Classification] = field(default_factory=list)
    extractions: list[Extraction] = field(default_factory=list)

    def error(self) -> DocumentError | None:
        """Return the per-document error reported by the API, if any."""
        if self.is_error:
            return DocumentError(self.error_detail, external_id=self.external_id)
        return None
