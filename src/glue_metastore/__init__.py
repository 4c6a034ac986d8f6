"""glue-metastore-client - Segmented parallel partition retrieval for the AWS Glue Data Catalog."""

from importlib.metadata import PackageNotFoundError, version

from .async_metastore import AsyncGlueMetastore
from .config import MetastoreConfig
from .exceptions import ConfigurationError, GlueMetastoreError, MetastoreClosedError
from .executors import DefaultExecutorFactory, DirectExecutor, ExecutorFactory
from .models import BatchGetResult, PartitionError, PartitionQuery
from .operators import GlueMetastore
from .parallel_fetch import ParallelPartitionFetcher
from .utils.segment_utils import ScanMode, ScanPlan, Segment, SegmentPlanner
from .utils.stats import FetchStats

try:
    __version__ = version("glue-metastore-client")
except PackageNotFoundError:
    # Package is not installed
    __version__ = "0.0.0+unknown"


__all__ = [
    "AsyncGlueMetastore",
    "BatchGetResult",
    "ConfigurationError",
    "DefaultExecutorFactory",
    "DirectExecutor",
    "ExecutorFactory",
    "FetchStats",
    "GlueMetastore",
    "GlueMetastoreError",
    "MetastoreClosedError",
    "MetastoreConfig",
    "ParallelPartitionFetcher",
    "PartitionError",
    "PartitionQuery",
    "ScanMode",
    "ScanPlan",
    "Segment",
    "SegmentPlanner",
    "__version__",
]
