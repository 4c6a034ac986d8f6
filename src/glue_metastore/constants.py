"""
Constants used throughout glue-metastore-client.

Limits mirror the documented AWS Glue API ceilings; defaults are the values
used when no configuration is supplied.
"""

# Per-request ceiling of GetPartitions MaxResults. Requests for at most this
# many partitions are served by a single serial scan.
GET_PARTITIONS_MAX_SIZE = 1000

# BatchGetPartition accepts at most this many keys per request
BATCH_GET_PARTITIONS_MAX_REQUEST_SIZE = 1000

# Segments split a table's partitions into non-overlapping regions that can
# be scanned in parallel. Glue allows at most 10.
DEFAULT_NUM_PARTITION_SEGMENTS = 5
MAX_NUM_PARTITION_SEGMENTS = 10

# Worker pool sizing
DEFAULT_EXECUTOR_THREADS = 5
MIN_EXECUTOR_THREADS = 1
MAX_EXECUTOR_THREADS = 128
EXECUTOR_THREAD_NAME_PREFIX = "glue-metastore-delegate"

# Hive-style configuration keys
NUM_PARTITION_SEGMENTS_CONF = "aws.glue.partition.num.segments"
CATALOG_ID_CONF = "hive.metastore.glue.catalogid"
EXECUTOR_THREADS_CONF = "hive.metastore.executorservice.threads"
CUSTOM_EXECUTOR_FACTORY_CONF = "hive.metastore.executorservice.factory.class"

# Error codes reported in PartitionError entries of batch lookups
ENTITY_NOT_FOUND_ERROR = "EntityNotFoundException"
UNPROCESSED_KEY_ERROR = "UnprocessedKey"
