"""Statistics for dispatcher runs.

This module provides the data class tracking how many requests were
released, completed and failed during a pipeline run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class DispatchStats:
    """Statistics for a dispatcher run.

    Attributes:
        released: Number of requests taken off the queue and executed.
        succeeded: Number of requests whose results were all delivered.
        failed: Number of requests reported on the error stream.
        skipped: Number of queued requests dropped by a shutdown.
        results_emitted: Number of results pushed to the result stream.
        quota_errors: Number of responses with malformed quota headers.
        release_times: Monotonic timestamps of every release.
        start_time: Run start time.
        end_time: Run end time (None while running).
    """
    released: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    results_emitted: int = 0
    quota_errors: int = 0
    release_times: List[float] = field(default_factory=list)
    start_time: float = 0.0
    end_time: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        """Check if the run has ended."""
        return self.end_time is not None

    @property
    def processing_time(self) -> float:
        """Total run time in seconds, 0 while running."""
        if self.end_time is None:
            return 0.0
        return self.end_time - self.start_time

    @property
    def success_rate(self) -> float:
        """Percentage of released requests that succeeded."""
        if self.released == 0:
            return 0.0
        return (self.succeeded / self.released) * 100.0

    def to_dict(self) -> Dict[str, Any]:
        """Summarize the run as a JSON-serializable dictionary."""
        return {
            'released': self.released,
            'succeeded': self.succeeded,
            'failed': self.failed,
            'skipped': self.skipped,
            'results_emitted': self.results_emitted,
            'quota_errors': self.quota_errors,
            'success_rate': round(self.success_rate, 2),
            'processing_time': round(self.processing_time, 3),
        }
