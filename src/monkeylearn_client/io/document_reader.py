"""Document file reader for the MonkeyLearn client."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..processing.entities import Document
from .exceptions import DocumentFileError


class DocumentReader:
    """Reads the documents to process from a JSON file.

    The file holds a JSON array whose entries are either plain strings or
    objects with a ``text`` field and an optional ``external_id``.

    Attributes:
        file_path: Path to the JSON file.
        encoding: Encoding of the file.
    """

    def __init__(self, file_path: str | Path, encoding: str = 'utf-8') -> None:
        """Initialize the reader.

        Args:
            file_path: Path to the JSON file.
            encoding: Encoding of the file.

        Raises:
            DocumentFileError: If the path is not a readable file.
        """
        self.file_path = Path(file_path)
        self.encoding = encoding

        if not self.file_path.is_file():
            raise DocumentFileError(
                f'Document file does not exist: {self.file_path}',
                file_path=str(self.file_path),
            )

    def read(self) -> list[Document]:
        """Load every document in the file.

        Returns:
            Documents in file order.

        Raises:
            DocumentFileError: If the file cannot be read or has an invalid layout.
        """
        logging.info('Reading documents from %s', self.file_path)
        try:
            with open(self.file_path, 'r', encoding=self.encoding) as file:
                data = json.load(file)
        except UnicodeDecodeError as e:
            raise DocumentFileError(
                f'Encoding error while reading {self.file_path}: {e}',
                file_path=str(self.file_path),
            ) from e
        except json.JSONDecodeError as e:
            raise DocumentFileError(
                f'Invalid JSON in {self.file_path}: {e}',
                file_path=str(self.file_path),
            ) from e
        except OSError as e:
            raise DocumentFileError(
                f'Error reading {self.file_path}: {e}',
                file_path=str(self.file_path),
            ) from e

        if not isinstance(data, list):
            raise DocumentFileError(
                f'Document file must contain a JSON array: {self.file_path}',
                file_path=str(self.file_path),
            )

        documents = [self._to_document(entry, index) for index, entry in enumerate(data)]
        logging.info('Read %d documents from %s', len(documents), self.file_path)
        return documents

    def _to_document(self, entry: Any, index: int) -> Document:
        if isinstance(entry, str):
            return Document(text=entry)

        if isinstance(entry, dict) and isinstance(entry.get('text'), str):
            external_id = entry.get('external_id')
            return Document(
                text=entry['text'],
                external_id=None if external_id is None else str(external_id),
            )

        raise DocumentFileError(
            f'Entry {index} must be a string or an object with a "text" field',
            file_path=str(self.file_path),
            index=index,
        )
