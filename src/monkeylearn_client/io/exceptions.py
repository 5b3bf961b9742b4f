"""Input/Output exceptions for the MonkeyLearn client."""

from __future__ import annotations


class IOError(Exception):
    """Base class for all I/O related exceptions in the MonkeyLearn client."""

    def __init__(self, message: str, file_path: str | None = None) -> None:
        """Initialize IOError

        Args:
            message: Error message.
            file_path: Optional file path related to the error.
        """
        super().__init__(message)
        self.file_path = file_path


class DocumentFileError(IOError):
    """Exception raised when a document file cannot be read or decoded."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        index: int | None = None
    ) -> None:
        """Initialize DocumentFileError.

        Args:
            message: Error message.
            file_path: Optional document file path.
            index: Optional position of the offending entry in the file.
        """
        super().__init__(message, file_path)
        self.index = index


class OutputError(IOError):
    """Exception raised for output operations errors."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        output_type: str | None = None
    ) -> None:
        """Initialize OutputError.

        Args:
            message: Error message.
            file_path: Optional output file path.
            output_type: Optional type of output operation.
        """
        super().__init__(message, file_path)
        self.output_type = output_type
