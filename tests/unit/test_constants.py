"""
Unit tests for constants module.
"""

from glue_metastore.constants import (
    BATCH_GET_PARTITIONS_MAX_REQUEST_SIZE,
    DEFAULT_EXECUTOR_THREADS,
    DEFAULT_NUM_PARTITION_SEGMENTS,
    GET_PARTITIONS_MAX_SIZE,
    MAX_EXECUTOR_THREADS,
    MAX_NUM_PARTITION_SEGMENTS,
    MIN_EXECUTOR_THREADS,
    NUM_PARTITION_SEGMENTS_CONF,
)


class TestConstants:
    """Test all constants match the Glue API limits."""

    def test_glue_request_limits(self):
        """Test per-request ceilings of GetPartitions and BatchGetPartition."""
        assert GET_PARTITIONS_MAX_SIZE == 1000
        assert BATCH_GET_PARTITIONS_MAX_REQUEST_SIZE == 1000

    def test_segment_settings(self):
        assert DEFAULT_NUM_PARTITION_SEGMENTS == 5
        assert MAX_NUM_PARTITION_SEGMENTS == 10
        assert 1 <= DEFAULT_NUM_PARTITION_SEGMENTS <= MAX_NUM_PARTITION_SEGMENTS

    def test_thread_pool_settings(self):
        """Test thread pool settings are reasonable."""
        assert MIN_EXECUTOR_THREADS == 1
        assert MAX_EXECUTOR_THREADS == 128
        assert MIN_EXECUTOR_THREADS <= DEFAULT_EXECUTOR_THREADS <= MAX_EXECUTOR_THREADS

    def test_configuration_key(self):
        # Key name is shared with Hive deployments; renaming it breaks them
        assert NUM_PARTITION_SEGMENTS_CONF == "aws.glue.partition.num.segments"
