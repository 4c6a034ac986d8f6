"""
Test segment utilities.

What this tests:
---------------
1. Segment dataclass validation and request rendering
2. Serial vs parallel scan planning
3. Segment count bounds enforced at construction
4. Key chunking for batch lookups

Why this matters:
----------------
- Segments are the unit of parallelism for partition listings
- Wrong planning either wastes requests or serializes huge scans
- Chunking must respect the BatchGetPartition ceiling
"""

import pytest

from glue_metastore.constants import GET_PARTITIONS_MAX_SIZE, MAX_NUM_PARTITION_SEGMENTS
from glue_metastore.exceptions import ConfigurationError
from glue_metastore.utils.segment_utils import (
    ScanMode,
    ScanPlan,
    Segment,
    SegmentPlanner,
    chunked,
    compact_request,
)


class TestSegment:
    """Test Segment dataclass functionality."""

    def test_segment_stores_values(self):
        segment = Segment(segment_number=3, total_segments=5)

        assert segment.segment_number == 3
        assert segment.total_segments == 5

    def test_segment_renders_glue_request(self):
        """
        Test the Segment member of a GetPartitions request.

        What this tests:
        ---------------
        1. Keys use Glue's SegmentNumber/TotalSegments names
        2. Values passed through unchanged

        Why this matters:
        ----------------
        - Glue validates these member names strictly
        """
        assert Segment(0, 10).to_request() == {"SegmentNumber": 0, "TotalSegments": 10}

    @pytest.mark.parametrize("number,total", [(-1, 5), (5, 5), (0, 0)])
    def test_segment_rejects_out_of_range(self, number, total):
        with pytest.raises(ValueError):
            Segment(segment_number=number, total_segments=total)

    def test_segment_is_immutable(self):
        segment = Segment(1, 2)

        with pytest.raises(AttributeError):
            segment.segment_number = 0


class TestSegmentPlanner:
    """Test scan planning."""

    @pytest.mark.parametrize("max_results", [1, 2, 999, GET_PARTITIONS_MAX_SIZE])
    def test_small_bounded_requests_are_serial(self, max_results):
        """
        Test 0 < max_results <= 1000 plans a serial scan.

        What this tests:
        ---------------
        1. Mode is SERIAL
        2. No segment count attached

        Why this matters:
        ----------------
        - One page walk covers the whole request
        - Parallel segments would cost at least one request each
        """
        plan = SegmentPlanner(5).plan(max_results)

        assert plan == ScanPlan(mode=ScanMode.SERIAL)
        assert plan.segment_count == 0

    @pytest.mark.parametrize("max_results", [-1, 0, GET_PARTITIONS_MAX_SIZE + 1, 100_000])
    def test_unbounded_and_large_requests_are_parallel(self, max_results):
        plan = SegmentPlanner(7).plan(max_results)

        assert plan.mode is ScanMode.PARALLEL
        assert plan.segment_count == 7

    def test_default_segment_count(self):
        assert SegmentPlanner().num_segments == 5

    def test_segment_count_above_glue_limit_is_fatal(self):
        """
        Test more than 10 segments fails at construction.

        What this tests:
        ---------------
        1. ConfigurationError raised, not a silent clamp
        2. Message names the configuration key and the limit

        Why this matters:
        ----------------
        - Glue rejects TotalSegments above 10 on every request
        - Failing early points at the misconfiguration directly
        """
        with pytest.raises(ConfigurationError) as exc_info:
            SegmentPlanner(MAX_NUM_PARTITION_SEGMENTS + 1)

        assert "aws.glue.partition.num.segments" in str(exc_info.value)
        assert "can't exceed 10" in str(exc_info.value)

    def test_segment_count_at_limit_accepted(self):
        assert SegmentPlanner(MAX_NUM_PARTITION_SEGMENTS).num_segments == 10

    def test_zero_segments_rejected(self):
        with pytest.raises(ConfigurationError):
            SegmentPlanner(0)

    def test_build_segments_are_disjoint_and_exhaustive(self):
        segments = SegmentPlanner(4).build_segments()

        assert [s.segment_number for s in segments] == [0, 1, 2, 3]
        assert all(s.total_segments == 4 for s in segments)

    def test_build_segments_with_explicit_count(self):
        assert len(SegmentPlanner(4).build_segments(2)) == 2

    @pytest.mark.parametrize("segment_count", [0, -1, MAX_NUM_PARTITION_SEGMENTS + 1])
    def test_build_segments_rejects_count_outside_glue_range(self, segment_count):
        """
        Test an explicit segment count outside 1..10 is rejected.

        What this tests:
        ---------------
        1. Zero is an error, not a fallback to the planner's count
        2. Counts above the Glue limit never reach a request

        Why this matters:
        ----------------
        - Glue rejects TotalSegments above 10 on every request
        - A silent fallback would scan with a count the caller never asked for
        """
        with pytest.raises(ValueError):
            SegmentPlanner(4).build_segments(segment_count)


class TestChunking:
    """Test key chunking."""

    def test_chunks_cover_every_item_once(self):
        items = list(range(2500))

        chunks = list(chunked(items, 1000))

        assert [len(c) for c in chunks] == [1000, 1000, 500]
        assert [i for c in chunks for i in c] == items

    def test_exact_multiple(self):
        assert [len(c) for c in chunked(list(range(2000)), 1000)] == [1000, 1000]

    def test_empty_input_yields_nothing(self):
        assert list(chunked([], 1000)) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            list(chunked([1, 2], 0))


class TestCompactRequest:
    def test_none_members_dropped(self):
        assert compact_request(DatabaseName="db", NextToken=None, CatalogId=None) == {
            "DatabaseName": "db"
        }

    def test_falsy_values_kept(self):
        assert compact_request(Expression="", Segment={}) == {"Expression": "", "Segment": {}}
