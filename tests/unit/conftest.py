"""
Shared fixtures for unit tests.

Provides an in-memory stand-in for the boto3 Glue client that pages,
segments and batch-resolves partitions deterministically and records
every request it receives.
"""

import threading
import time
from typing import Any, Dict, List, Optional, Set

import pytest
from botocore.exceptions import ClientError

from glue_metastore import DirectExecutor


def make_partitions(count: int, database: str = "sales", table: str = "orders") -> List[Dict]:
    """Build ``count`` Glue-shaped partition dicts keyed by their index."""
    return [
        {
            "Values": [str(i)],
            "DatabaseName": database,
            "TableName": table,
            "StorageDescriptor": {"Location": f"s3://lake/{database}/{table}/part={i}"},
        }
        for i in range(count)
    ]


def client_error(code: str = "InternalServiceException", operation: str = "GetPartitions"):
    """Create a botocore ClientError like the Glue service raises."""
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)


class FakeGlueClient:
    """
    Deterministic in-memory Glue partition service.

    Segment ``n`` of ``k`` holds a contiguous block of the partitions, so
    merging segments in order reproduces the table order. Pages hold
    ``page_size`` partitions and carry a NextToken while more remain.
    """

    def __init__(
        self,
        partitions: List[Dict[str, Any]],
        page_size: int = 100,
        failing_segments: Optional[Dict[int, BaseException]] = None,
        segment_delays: Optional[Dict[int, float]] = None,
        unprocessed_keys: Optional[Set[tuple]] = None,
        batch_error: Optional[BaseException] = None,
    ) -> None:
        self.partitions = partitions
        self.page_size = page_size
        self.failing_segments = failing_segments or {}
        self.segment_delays = segment_delays or {}
        self.unprocessed_keys = unprocessed_keys or set()
        self.batch_error = batch_error
        self.get_partitions_calls: List[Dict[str, Any]] = []
        self.batch_get_partition_calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def _segment_slice(self, segment: Optional[Dict[str, int]]) -> List[Dict[str, Any]]:
        if segment is None:
            return self.partitions
        total = segment["TotalSegments"]
        number = segment["SegmentNumber"]
        start = number * len(self.partitions) // total
        end = (number + 1) * len(self.partitions) // total
        return self.partitions[start:end]

    def get_partitions(self, **request: Any) -> Dict[str, Any]:
        assert None not in request.values(), f"None passed to Glue: {request}"
        with self._lock:
            self.get_partitions_calls.append(dict(request))

        segment = request.get("Segment")
        if segment is not None:
            number = segment["SegmentNumber"]
            if number in self.segment_delays:
                time.sleep(self.segment_delays[number])
            if number in self.failing_segments:
                raise self.failing_segments[number]

        rows = self._segment_slice(segment)
        offset = int(request.get("NextToken", "0"))
        page = rows[offset : offset + self.page_size]
        response: Dict[str, Any] = {"Partitions": page}
        if offset + self.page_size < len(rows):
            response["NextToken"] = str(offset + self.page_size)
        return response

    def batch_get_partition(self, **request: Any) -> Dict[str, Any]:
        assert None not in request.values(), f"None passed to Glue: {request}"
        assert len(request["PartitionsToGet"]) <= 1000
        with self._lock:
            self.batch_get_partition_calls.append(dict(request))
        if self.batch_error is not None:
            raise self.batch_error

        by_values = {tuple(p["Values"]): p for p in self.partitions}
        found = []
        unprocessed = []
        for key in request["PartitionsToGet"]:
            values = tuple(key["Values"])
            if values in self.unprocessed_keys:
                unprocessed.append(key)
            elif values in by_values:
                found.append(by_values[values])
        return {"Partitions": found, "UnprocessedKeys": unprocessed}

    def pages_for_segment(self, segment_number: int) -> int:
        return sum(
            1
            for call in self.get_partitions_calls
            if call.get("Segment", {}).get("SegmentNumber") == segment_number
        )


@pytest.fixture
def direct_executor():
    """Inline executor making segment execution order deterministic."""
    executor = DirectExecutor()
    yield executor
    executor.shutdown()


@pytest.fixture
def glue_client():
    """Fake Glue table with 2500 partitions served 100 per page."""
    return FakeGlueClient(make_partitions(2500), page_size=100)
