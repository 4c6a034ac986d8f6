"""
Core GlueMetastore class for catalog access.

This provides the main entry point for talking to the Glue Data Catalog:
- Partition listings with segmented parallel retrieval
- Explicit-key partition lookups in request-sized batches
- Database, table, partition and function management
"""

import logging
import threading
from concurrent.futures import Executor
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from ..config import MetastoreConfig
from ..exceptions import MetastoreClosedError
from ..executors import ExecutorFactory
from ..models import BatchGetResult, PartitionError, PartitionQuery
from ..parallel_fetch import ParallelPartitionFetcher
from ..utils.segment_utils import SegmentPlanner, compact_request
from ..utils.stats import FetchStats

logger = logging.getLogger(__name__)


class GlueMetastore:
    """
    Metastore client on top of a boto3 Glue client.

    Owns one worker pool for its whole lifetime; every partition listing
    and batch lookup on this instance shares it. Instances are safe to use
    from many threads at once.
    """

    def __init__(
        self,
        glue_client: Any,
        config: Optional[MetastoreConfig] = None,
        executor: Optional[Executor] = None,
        executor_factory: Optional[ExecutorFactory] = None,
        stats_callback: Optional[Callable[[FetchStats], None]] = None,
    ) -> None:
        """
        Initialize GlueMetastore with a Glue client.

        Args:
            glue_client: boto3 Glue client, e.g. ``boto3.client("glue")``
            config: Client configuration (default: MetastoreConfig())
            executor: Pre-built worker pool; the caller keeps ownership
            executor_factory: Factory overriding the configured one
            stats_callback: Called with the statistics of each partition call

        Raises:
            ValueError: If glue_client is missing required methods
            ConfigurationError: If the configuration is invalid
        """
        if glue_client is None:
            raise ValueError("glue_client cannot be None")
        if not hasattr(glue_client, "get_partitions") or not hasattr(
            glue_client, "batch_get_partition"
        ):
            raise ValueError(
                "glue_client must have 'get_partitions' and 'batch_get_partition' methods. "
                "Please use a boto3 Glue client."
            )

        self.glue_client = glue_client
        self.config = config or MetastoreConfig()
        self.catalog_id = self.config.catalog_id
        self.stats_callback = stats_callback

        if executor is not None:
            self._executor = executor
            self._owns_executor = False
        else:
            factory = executor_factory or self.config.resolve_executor_factory()
            self._executor = factory.create_executor(self.config)
            self._owns_executor = True

        self._fetcher = ParallelPartitionFetcher(
            glue_client=glue_client,
            executor=self._executor,
            planner=SegmentPlanner(self.config.num_partition_segments),
            catalog_id=self.catalog_id,
        )
        self._closed = False
        self._close_lock = threading.Lock()

    @property
    def executor(self) -> Executor:
        return self._executor

    @property
    def is_closed(self) -> bool:
        return self._closed

    def close(self, wait: bool = True) -> None:
        """
        Release the worker pool.

        Only a pool created by this instance is shut down. Safe to call
        more than once.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        if self._owns_executor:
            self._executor.shutdown(wait=wait)
        logger.debug("GlueMetastore closed")

    def __enter__(self) -> "GlueMetastore":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise MetastoreClosedError("GlueMetastore is closed")

    def _request(self, **params: Any) -> Dict[str, Any]:
        return compact_request(CatalogId=self.catalog_id, **params)

    @contextmanager
    def _closed_during_call(self) -> Iterator[None]:
        """Report a pool shut down by a concurrent close() as MetastoreClosedError."""
        try:
            yield
        except RuntimeError as e:
            if self._closed:
                raise MetastoreClosedError("GlueMetastore was closed during the call") from e
            raise

    def _report(self, stats: FetchStats, partitions_returned: int) -> None:
        stats.finish(partitions_returned)
        logger.info(stats.summary())
        if self.stats_callback:
            # Callback failures must not replace the call's result or error
            try:
                self.stats_callback(stats)
            except Exception:
                logger.exception(f"stats_callback failed for {stats.operation}")

    # ======================= Partition listings =======================

    def list_partitions(
        self,
        database: str,
        table: str,
        expression: Optional[str] = None,
        max_results: int = -1,
    ) -> List[Dict[str, Any]]:
        """
        List partitions of a table, optionally filtered.

        Args:
            database: Database name
            table: Table name
            expression: Glue partition filter expression (e.g. "year > '2020'")
            max_results: Maximum partitions to return; zero or negative = all

        Returns:
            Partition dicts as returned by Glue, ordered by segment then page

        Raises:
            botocore.exceptions.ClientError: Any failed Glue request
            MetastoreClosedError: If the metastore is closed
        """
        self._check_open()
        query = PartitionQuery(
            database=database, table=table, expression=expression, max_results=max_results
        )
        stats = FetchStats(operation="list_partitions")
        partitions: List[Dict[str, Any]] = []
        try:
            with self._closed_during_call():
                partitions = self._fetcher.list_partitions(query, stats)
        finally:
            self._report(stats, len(partitions))
        return partitions

    def list_partitions_by_keys(
        self, database: str, table: str, keys: Sequence[Sequence[str]]
    ) -> List[Dict[str, Any]]:
        """
        Fetch the partitions named by explicit keys.

        Args:
            database: Database name
            table: Table name
            keys: Partition value lists, one per partition

        Returns:
            Found partitions; keys that do not exist are omitted

        Raises:
            botocore.exceptions.ClientError: Any failed batch request
        """
        self._check_open()
        stats = FetchStats(operation="list_partitions_by_keys")
        partitions: List[Dict[str, Any]] = []
        try:
            with self._closed_during_call():
                partitions = self._fetcher.fetch_by_keys(database, table, keys, stats)
        finally:
            self._report(stats, len(partitions))
        return partitions

    def batch_get_partitions_with_errors(
        self, database: str, table: str, keys: Sequence[Sequence[str]]
    ) -> BatchGetResult:
        """
        Fetch partitions by key, returning unresolved keys as PartitionError entries.

        Unlike ``list_partitions_by_keys`` a missing key is a normal outcome
        here; only a failed batch request raises.
        """
        self._check_open()
        stats = FetchStats(operation="batch_get_partitions")
        result = BatchGetResult()
        try:
            with self._closed_during_call():
                result = self._fetcher.fetch_by_keys_with_errors(database, table, keys, stats)
        finally:
            self._report(stats, len(result.partitions))
        return result

    # ======================= Database =======================

    def create_database(self, database_input: Dict[str, Any]) -> None:
        self.glue_client.create_database(**self._request(DatabaseInput=database_input))

    def get_database(self, name: str) -> Dict[str, Any]:
        return self.glue_client.get_database(**self._request(Name=name))["Database"]

    def get_all_databases(self) -> List[Dict[str, Any]]:
        return self._collect_pages(self.glue_client.get_databases, "DatabaseList")

    def update_database(self, name: str, database_input: Dict[str, Any]) -> None:
        self.glue_client.update_database(
            **self._request(Name=name, DatabaseInput=database_input)
        )

    def delete_database(self, name: str) -> None:
        self.glue_client.delete_database(**self._request(Name=name))

    # ======================= Table =======================

    def create_table(self, database: str, table_input: Dict[str, Any]) -> None:
        self.glue_client.create_table(
            **self._request(DatabaseName=database, TableInput=table_input)
        )

    def get_table(self, database: str, name: str) -> Dict[str, Any]:
        return self.glue_client.get_table(**self._request(DatabaseName=database, Name=name))[
            "Table"
        ]

    def get_tables(self, database: str, pattern: Optional[str] = None) -> List[Dict[str, Any]]:
        """List the tables of a database whose names match ``pattern``."""
        return self._collect_pages(
            self.glue_client.get_tables, "TableList", DatabaseName=database, Expression=pattern
        )

    def update_table(self, database: str, table_input: Dict[str, Any]) -> None:
        self.glue_client.update_table(
            **self._request(DatabaseName=database, TableInput=table_input)
        )

    def delete_table(self, database: str, name: str) -> None:
        self.glue_client.delete_table(**self._request(DatabaseName=database, Name=name))

    # ======================= Partition =======================

    def get_partition(self, database: str, table: str, values: Sequence[str]) -> Dict[str, Any]:
        return self.glue_client.get_partition(
            **self._request(DatabaseName=database, TableName=table, PartitionValues=list(values))
        )["Partition"]

    def update_partition(
        self,
        database: str,
        table: str,
        values: Sequence[str],
        partition_input: Dict[str, Any],
    ) -> None:
        self.glue_client.update_partition(
            **self._request(
                DatabaseName=database,
                TableName=table,
                PartitionValueList=list(values),
                PartitionInput=partition_input,
            )
        )

    def delete_partition(self, database: str, table: str, values: Sequence[str]) -> None:
        self.glue_client.delete_partition(
            **self._request(DatabaseName=database, TableName=table, PartitionValues=list(values))
        )

    def create_partitions(
        self, database: str, table: str, partition_inputs: List[Dict[str, Any]]
    ) -> List[PartitionError]:
        """
        Create partitions in one batch request.

        Returns:
            Per-partition failures reported by Glue (empty when all succeeded)
        """
        response = self.glue_client.batch_create_partition(
            **self._request(
                DatabaseName=database, TableName=table, PartitionInputList=partition_inputs
            )
        )
        return [PartitionError.from_glue(error) for error in response.get("Errors", [])]

    # ======================= User Defined Function =======================

    def create_user_defined_function(
        self, database: str, function_input: Dict[str, Any]
    ) -> None:
        self.glue_client.create_user_defined_function(
            **self._request(DatabaseName=database, FunctionInput=function_input)
        )

    def get_user_defined_function(self, database: str, name: str) -> Dict[str, Any]:
        return self.glue_client.get_user_defined_function(
            **self._request(DatabaseName=database, FunctionName=name)
        )["UserDefinedFunction"]

    def get_user_defined_functions(self, database: str, pattern: str) -> List[Dict[str, Any]]:
        return self._collect_pages(
            self.glue_client.get_user_defined_functions,
            "UserDefinedFunctions",
            DatabaseName=database,
            Pattern=pattern,
        )

    def update_user_defined_function(
        self, database: str, name: str, function_input: Dict[str, Any]
    ) -> None:
        self.glue_client.update_user_defined_function(
            **self._request(DatabaseName=database, FunctionName=name, FunctionInput=function_input)
        )

    def delete_user_defined_function(self, database: str, name: str) -> None:
        self.glue_client.delete_user_defined_function(
            **self._request(DatabaseName=database, FunctionName=name)
        )

    def _collect_pages(
        self, operation: Callable[..., Dict[str, Any]], result_key: str, **params: Any
    ) -> List[Dict[str, Any]]:
        """Follow NextToken until the listing is exhausted."""
        items: List[Dict[str, Any]] = []
        next_token: Optional[str] = None
        while True:
            response = operation(**self._request(NextToken=next_token, **params))
            items.extend(response.get(result_key, []))
            next_token = response.get("NextToken")
            if not next_token:
                return items
