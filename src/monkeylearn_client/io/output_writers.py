"""Output writing operations for the MonkeyLearn client.

Results are written as JSON lines, one object per document, with an atomic
replace of the target file. Run statistics are written as a JSON object.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, ClassVar, Iterable

from ..processing.entities import Result
from .exceptions import OutputError

Pathish = str | Path  # Type alias for path-like objects


class ResultWriter:
    """Writes results and statistics to files."""

    DEFAULT_ENCODING: ClassVar[str] = 'utf-8'

    def __init__(self, encoding: str = DEFAULT_ENCODING) -> None:
        self.encoding = encoding

    @staticmethod
    def result_to_dict(result: Result) -> dict[str, Any]:
        """Convert a result into a JSON-serializable dictionary."""
        data = dataclasses.asdict(result)
        for extraction in data['extractions']:
            span = extraction['offset_span']
            extraction['offset_span'] = list(span) if span is not None else None
        return data

    def write_results(self, file_path: Pathish, results: Iterable[Result]) -> int:
        """Write results as JSON lines (atomic).

        Args:
            file_path: Output file path.
            results: Results to write.

        Returns:
            Number of results written.

        Raises:
            OutputError: If writing fails.
        """
        lines = [
            json.dumps(self.result_to_dict(result), ensure_ascii=False, default=str)
            for result in results
        ]
        content = ''.join(f'{line}\n' for line in lines)
        self._atomic_write(self._ensure_output_directory(file_path), content, self.encoding)
        logging.info('Wrote %d results to %s', len(lines), file_path)
        return len(lines)

    def write_stats_output(self, file_path: Pathish, stats_data: dict[str, Any]) -> None:
        """Write run statistics to a JSON file (atomic).

        Raises:
            ValueError: If stats_data is not a dictionary.
            OutputError: If writing fails.
        """
        if not isinstance(stats_data, dict):
            raise ValueError('Stats data must be a dictionary.')
        try:
            content = json.dumps(stats_data, indent=2, ensure_ascii=False)
        except TypeError as e:
            raise OutputError(
                f'Failed to serialize stats for {file_path}: {e}',
                file_path=str(file_path),
                output_type='stats'
            ) from e
        self._atomic_write(self._ensure_output_directory(file_path), content, self.encoding)
        logging.info('Run statistics written to: %s', file_path)

    @staticmethod
    def _ensure_output_directory(file_path: Pathish) -> Path:
        path = Path(file_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(
                f'Failed to create output directory {path.parent}: {e}',
                file_path=str(file_path),
                output_type='directory'
            ) from e
        return path

    @staticmethod
    def _atomic_write(file_path: Path, content: str, encoding: str) -> None:
        """Atomically write content to a file.

        Raises:
            OutputError: If the atomic write fails.
        """
        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                    mode='w',
                    delete=False,
                    dir=file_path.parent,
                    encoding=encoding,
                    newline='',
                    suffix='.tmp'
            ) as temp_file:
                temp_path = Path(temp_file.name)
                temp_file.write(content)
            temp_path.replace(file_path)
            logging.debug('Atomic write completed for: %s', file_path)
        except (OSError, UnicodeEncodeError) as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise OutputError(
                f'Atomic write failed for {file_path}: {e}',
                file_path=str(file_path),
                output_type='atomic_write'
            ) from e
