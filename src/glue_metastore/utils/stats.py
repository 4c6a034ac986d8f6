"""
Statistics tracking for partition retrieval.

Provides metrics and progress tracking for segmented listings and batch
lookups including page counts, throughput and error tracking.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class FetchStats:
    """
    Statistics tracker for a single partition retrieval call.

    Worker threads report through the ``record_*`` methods, which serialize
    updates on an internal lock.
    """

    operation: str = "list_partitions"
    pages_requested: int = 0
    segments_total: int = 0
    segments_completed: int = 0
    batches_requested: int = 0
    partitions_returned: int = 0
    truncated: bool = False
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    errors: List[BaseException] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_page(self) -> None:
        with self._lock:
            self.pages_requested += 1

    def record_segment_completed(self) -> None:
        with self._lock:
            self.segments_completed += 1

    def record_batch(self) -> None:
        with self._lock:
            self.batches_requested += 1

    def record_error(self, error: BaseException) -> None:
        with self._lock:
            self.errors.append(error)

    def finish(self, partitions_returned: int) -> None:
        """Mark the call finished with the number of partitions handed back."""
        self.partitions_returned = partitions_returned
        self.end_time = time.time()

    @property
    def duration_seconds(self) -> float:
        """
        Calculate call duration in seconds.

        Uses end_time if the call is finished, otherwise current time.
        """
        if self.end_time:
            return self.end_time - self.start_time
        return time.time() - self.start_time

    @property
    def partitions_per_second(self) -> float:
        duration = self.duration_seconds
        if duration > 0:
            return self.partitions_returned / duration
        return 0

    @property
    def progress_percentage(self) -> float:
        """
        Calculate completion percentage.

        Based on segments completed vs total segments; serial scans and batch
        lookups have no segments and report 0 until finished.
        """
        if self.segments_total > 0:
            return (self.segments_completed / self.segments_total) * 100
        return 100.0 if self.end_time else 0.0

    @property
    def is_complete(self) -> bool:
        """Check if every planned segment finished."""
        return self.segments_completed == self.segments_total

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def summary(self) -> str:
        """
        Generate human-readable summary of statistics.

        Returns:
            Formatted string with key metrics
        """
        parts = [
            f"{self.operation}: returned {self.partitions_returned} partitions",
            f"Pages: {self.pages_requested}",
        ]
        if self.segments_total:
            parts.append(f"Segments: {self.segments_completed}/{self.segments_total}")
        if self.batches_requested:
            parts.append(f"Batches: {self.batches_requested}")
        if self.truncated:
            parts.append("Truncated to budget")
        parts.append(f"Duration: {self.duration_seconds:.3f} seconds")

        if self.error_count > 0:
            parts.append(f"Errors: {self.error_count}")

        return " | ".join(parts)

    def as_dict(self) -> Dict[str, Any]:
        """
        Export statistics as dictionary.

        Useful for JSON serialization or structured logging.
        """
        return {
            "operation": self.operation,
            "pages_requested": self.pages_requested,
            "segments_total": self.segments_total,
            "segments_completed": self.segments_completed,
            "batches_requested": self.batches_requested,
            "partitions_returned": self.partitions_returned,
            "truncated": self.truncated,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_seconds": self.duration_seconds,
            "partitions_per_second": self.partitions_per_second,
            "progress_percentage": self.progress_percentage,
            "error_count": self.error_count,
            "is_complete": self.is_complete,
        }
