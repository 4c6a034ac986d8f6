"""
Segment utilities for partition listings.

Handles scan planning, segment construction and key chunking for
efficient parallel retrieval of a table's partitions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, TypeVar

from ..constants import (
    DEFAULT_NUM_PARTITION_SEGMENTS,
    GET_PARTITIONS_MAX_SIZE,
    MAX_NUM_PARTITION_SEGMENTS,
    NUM_PARTITION_SEGMENTS_CONF,
)
from ..exceptions import ConfigurationError

T = TypeVar("T")


@dataclass(frozen=True)
class Segment:
    """
    One of ``total_segments`` non-overlapping regions of a table's partitions.

    The Glue service decides which partitions belong to which segment; the
    client only names the region it wants.
    """

    segment_number: int
    total_segments: int

    def __post_init__(self) -> None:
        if self.total_segments < 1:
            raise ValueError(f"total_segments must be at least 1, got {self.total_segments}")
        if not 0 <= self.segment_number < self.total_segments:
            raise ValueError(
                f"segment_number must be in [0, {self.total_segments}), got {self.segment_number}"
            )

    def to_request(self) -> Dict[str, int]:
        """Render as the ``Segment`` member of a GetPartitions request."""
        return {"SegmentNumber": self.segment_number, "TotalSegments": self.total_segments}


class ScanMode(Enum):
    """How a partition listing is executed."""

    SERIAL = "serial"
    PARALLEL = "parallel"


@dataclass(frozen=True)
class ScanPlan:
    """Outcome of planning a listing: the mode and, when parallel, the segment count."""

    mode: ScanMode
    segment_count: int = 0


class SegmentPlanner:
    """
    Chooses between a serial scan and a segmented parallel scan.

    Small bounded requests fit in a single page walk, so coordinating
    segments would only add remote calls. Anything unbounded or larger than
    one Glue page is split into ``num_segments`` segments.
    """

    def __init__(self, num_segments: int = DEFAULT_NUM_PARTITION_SEGMENTS) -> None:
        """
        Initialize the planner.

        Args:
            num_segments: Segments used for parallel scans

        Raises:
            ConfigurationError: If num_segments is outside 1..MAX_NUM_PARTITION_SEGMENTS
        """
        if num_segments > MAX_NUM_PARTITION_SEGMENTS:
            raise ConfigurationError(
                f"Hive Config [{NUM_PARTITION_SEGMENTS_CONF}] can't exceed "
                f"{MAX_NUM_PARTITION_SEGMENTS}, got {num_segments}"
            )
        if num_segments < 1:
            raise ConfigurationError(
                f"Hive Config [{NUM_PARTITION_SEGMENTS_CONF}] must be at least 1, "
                f"got {num_segments}"
            )
        self.num_segments = num_segments

    def plan(self, max_results: int) -> ScanPlan:
        """
        Decide how to list up to ``max_results`` partitions.

        Args:
            max_results: Requested cap; zero or negative means unbounded

        Returns:
            SERIAL plan for 0 < max_results <= GET_PARTITIONS_MAX_SIZE,
            otherwise a PARALLEL plan over ``num_segments`` segments
        """
        if 0 < max_results <= GET_PARTITIONS_MAX_SIZE:
            return ScanPlan(mode=ScanMode.SERIAL)
        return ScanPlan(mode=ScanMode.PARALLEL, segment_count=self.num_segments)

    def build_segments(self, segment_count: Optional[int] = None) -> List[Segment]:
        """
        Build the disjoint, collectively exhaustive segments of a table.

        Args:
            segment_count: Number of segments (defaults to ``num_segments``)

        Returns:
            Segments numbered 0..segment_count-1

        Raises:
            ValueError: If segment_count is outside 1..MAX_NUM_PARTITION_SEGMENTS
        """
        total = self.num_segments if segment_count is None else segment_count
        if not 1 <= total <= MAX_NUM_PARTITION_SEGMENTS:
            raise ValueError(
                f"segment_count must be between 1 and {MAX_NUM_PARTITION_SEGMENTS}, got {total}"
            )
        return [Segment(segment_number=i, total_segments=total) for i in range(total)]


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """
    Split a sequence into consecutive chunks of at most ``size`` items.

    Every item lands in exactly one chunk and input order is kept.
    """
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def compact_request(**params: Any) -> Dict[str, Any]:
    """Drop ``None`` members; boto3 rejects them during parameter validation."""
    return {key: value for key, value in params.items() if value is not None}
