"""Processing-related exceptions for the MonkeyLearn client."""

from __future__ import annotations

from typing import Any


class ProcessingError(Exception):
    """Base exception for processing-related errors."""

    def __init__(self, message: str, external_id: str | None = None) -> None:
        """Initialize ProcessingError.

        Args:
            message: Error message.
            external_id: Optional external identifier of the related document.
        """
        super().__init__(message)
        self.external_id = external_id


class InvalidArgumentError(ProcessingError):
    """Exception raised when a caller passes an invalid argument."""

    def __init__(
            self,
            message: str,
            argument: str | None = None,
            value: Any = None,
    ) -> None:
        """Initialize InvalidArgumentError.

        Args:
            message: Error message.
            argument: Optional name of the offending argument.
            value: Optional value that was rejected.
        """
        super().__init__(message)
        self.argument = argument
        self.value = value


class ParseError(ProcessingError):
    """Exception raised when parsing API response data fails."""

    def __init__(
            self,
            message: str,
            external_id: str | None = None,
            parse_type: str | None = None,
            content: str | None = None,
    ) -> None:
        """Initialize ParseError.

        Args:
            message: Error message.
            external_id: Optional document identifier.
            parse_type: Optional type of parsing that failed (e.g., 'json', 'quota').
            content: Optional content that failed to parse.
        """
        super().__init__(message, external_id)
        self.parse_type = parse_type
        self.content = content


class DocumentError(ProcessingError):
    """Error reported by the API for a single document of a batch."""
