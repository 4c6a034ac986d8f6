"""
Parallel partition retrieval.

Manages paginated scans of Glue partitions, fanning large listings out
over table segments and explicit-key lookups out over request-sized
batches, with budget truncation and error propagation.
"""

import logging
from concurrent.futures import Executor, Future
from typing import Any, Dict, List, Optional, Sequence

from .constants import (
    BATCH_GET_PARTITIONS_MAX_REQUEST_SIZE,
    ENTITY_NOT_FOUND_ERROR,
    UNPROCESSED_KEY_ERROR,
)
from .exceptions import is_remote_service_error
from .models import BatchGetResult, PartitionError, PartitionQuery, partition_value_list
from .utils.segment_utils import ScanMode, Segment, SegmentPlanner, chunked, compact_request
from .utils.stats import FetchStats

logger = logging.getLogger(__name__)


class ParallelPartitionFetcher:
    """
    Retrieves partitions from Glue using a shared worker pool.

    Small bounded listings walk the table serially. Everything else is
    split into segments that are scanned concurrently and merged in
    segment order, so repeated calls return partitions in the same order.
    """

    def __init__(
        self,
        glue_client: Any,
        executor: Executor,
        planner: Optional[SegmentPlanner] = None,
        catalog_id: Optional[str] = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            glue_client: boto3 Glue client (or anything with the same methods)
            executor: Worker pool for segment scans and batch lookups
            planner: Segment planner (default: DEFAULT_NUM_PARTITION_SEGMENTS)
            catalog_id: Glue catalog to address, None for the caller's account
        """
        self.glue_client = glue_client
        self.executor = executor
        self.planner = planner or SegmentPlanner()
        self.catalog_id = catalog_id

    def list_partitions(
        self, query: PartitionQuery, stats: Optional[FetchStats] = None
    ) -> List[Dict[str, Any]]:
        """
        List the partitions matching a query, up to its budget.

        Args:
            query: Table, filter expression and result cap
            stats: Optional statistics tracker for this call

        Returns:
            At most ``query.max_results`` partitions (all when unbounded)
        """
        stats = stats if stats is not None else FetchStats()
        plan = self.planner.plan(query.max_results)

        if plan.mode is ScanMode.SERIAL:
            logger.debug(
                f"Listing up to {query.max_results} partitions of "
                f"{query.database}.{query.table} serially"
            )
            return self.scan_segment(query, None, query.max_results, stats)

        return self.fetch_parallel(query, plan.segment_count, stats)

    def scan_segment(
        self,
        query: PartitionQuery,
        segment: Optional[Segment],
        budget: int,
        stats: Optional[FetchStats] = None,
    ) -> List[Dict[str, Any]]:
        """
        Walk one segment (or the whole table) page by page.

        Stops when the service returns no continuation token or, for a
        positive budget, as soon as ``budget`` partitions are collected.
        The page that crosses the budget is truncated and no further page
        is requested.

        Args:
            query: Table and filter expression to scan
            segment: Segment to scan, None for the unsegmented table
            budget: Maximum partitions to collect; zero or negative = all
            stats: Optional statistics tracker

        Returns:
            Partitions in page order

        Raises:
            botocore.exceptions.ClientError: Any failed page request
        """
        partitions: List[Dict[str, Any]] = []
        next_token: Optional[str] = None

        while True:
            request = compact_request(
                CatalogId=self.catalog_id,
                DatabaseName=query.database,
                TableName=query.table,
                Expression=query.expression,
                NextToken=next_token,
                Segment=segment.to_request() if segment else None,
            )
            response = self.glue_client.get_partitions(**request)
            if stats is not None:
                stats.record_page()

            page = response.get("Partitions", [])
            if budget > 0 and len(partitions) + len(page) >= budget:
                remaining = budget - len(partitions)
                partitions.extend(page[:remaining])
                break

            partitions.extend(page)
            next_token = response.get("NextToken")
            if not next_token:
                break

        return partitions

    def _scan_segment_task(
        self, query: PartitionQuery, segment: Segment, budget: int, stats: FetchStats
    ) -> List[Dict[str, Any]]:
        """Worker body: scan one segment and report completion."""
        partitions = self.scan_segment(query, segment, budget, stats)
        stats.record_segment_completed()
        logger.debug(
            f"Completed segment {segment.segment_number}/{segment.total_segments} of "
            f"{query.database}.{query.table}: {len(partitions)} partitions"
        )
        return partitions

    def fetch_parallel(
        self,
        query: PartitionQuery,
        segment_count: int,
        stats: Optional[FetchStats] = None,
    ) -> List[Dict[str, Any]]:
        """
        Scan ``segment_count`` segments concurrently and merge them in order.

        Every segment is scanned with the query's full budget. Results are
        awaited in submission order; once the budget is met the last
        segment is truncated and the remaining futures are not awaited.

        Args:
            query: Table, filter expression and result cap
            segment_count: Number of segments to split the table into
            stats: Optional statistics tracker

        Returns:
            Partitions ordered by segment, then by page

        Raises:
            botocore.exceptions.ClientError: The first failure in segment order
            ValueError: If segment_count is outside 1..MAX_NUM_PARTITION_SEGMENTS
        """
        stats = stats if stats is not None else FetchStats()
        segments = self.planner.build_segments(segment_count)
        stats.segments_total = len(segments)
        logger.debug(
            f"Listing partitions of {query.database}.{query.table} "
            f"across {len(segments)} segments (max_results={query.max_results})"
        )

        futures: List[Future] = []
        partitions: List[Dict[str, Any]] = []
        try:
            for segment in segments:
                futures.append(
                    self.executor.submit(
                        self._scan_segment_task, query, segment, query.max_results, stats
                    )
                )

            for index, future in enumerate(futures):
                segment_partitions = future.result()
                if query.is_bounded and (
                    len(partitions) + len(segment_partitions) >= query.max_results
                ):
                    remaining = query.max_results - len(partitions)
                    partitions.extend(segment_partitions[:remaining])
                    stats.truncated = (
                        remaining < len(segment_partitions) or index < len(futures) - 1
                    )
                    break
                partitions.extend(segment_partitions)
        except Exception as e:
            self._log_worker_failure(e, f"listing partitions of {query.database}.{query.table}")
            stats.record_error(e)
            raise
        except BaseException:
            logger.warning(
                f"Interrupted while listing partitions of {query.database}.{query.table}"
            )
            raise
        finally:
            self._cancel_pending(futures)

        return partitions

    def _batch_get_chunk(
        self,
        database: str,
        table: str,
        keys: List[Sequence[str]],
        stats: FetchStats,
    ) -> BatchGetResult:
        """Worker body: resolve one chunk of keys with a single BatchGetPartition call."""
        request = compact_request(
            CatalogId=self.catalog_id,
            DatabaseName=database,
            TableName=table,
            PartitionsToGet=[partition_value_list(key) for key in keys],
        )
        response = self.glue_client.batch_get_partition(**request)
        stats.record_batch()

        found = response.get("Partitions", [])
        unprocessed = {tuple(k.get("Values", [])) for k in response.get("UnprocessedKeys", [])}
        returned = {tuple(p.get("Values", [])) for p in found}

        errors: List[PartitionError] = []
        for key in keys:
            values = tuple(key)
            if values in returned:
                continue
            if values in unprocessed:
                errors.append(
                    PartitionError(
                        values=list(values),
                        error_code=UNPROCESSED_KEY_ERROR,
                        error_message="Key was not processed by the service",
                    )
                )
            else:
                errors.append(
                    PartitionError(
                        values=list(values),
                        error_code=ENTITY_NOT_FOUND_ERROR,
                        error_message=f"Partition {list(values)} not found in {database}.{table}",
                    )
                )

        return BatchGetResult(partitions=list(found), errors=errors)

    def fetch_by_keys_with_errors(
        self,
        database: str,
        table: str,
        keys: Sequence[Sequence[str]],
        stats: Optional[FetchStats] = None,
    ) -> BatchGetResult:
        """
        Resolve explicit partition keys, reporting unresolved keys as data.

        Keys are sent in chunks of BATCH_GET_PARTITIONS_MAX_REQUEST_SIZE,
        one worker task per chunk. Keys the service does not return (or
        leaves unprocessed) come back as PartitionError entries instead of
        failing the call.

        Returns:
            Found partitions and per-key errors

        Raises:
            botocore.exceptions.ClientError: A whole batch request failed
        """
        stats = stats if stats is not None else FetchStats(operation="batch_get_partitions")
        result = BatchGetResult()
        if not keys:
            return result

        futures: List[Future] = []
        try:
            for chunk in chunked(keys, BATCH_GET_PARTITIONS_MAX_REQUEST_SIZE):
                futures.append(
                    self.executor.submit(self._batch_get_chunk, database, table, chunk, stats)
                )
            logger.debug(
                f"Resolving {len(keys)} partition keys of {database}.{table} "
                f"in {len(futures)} batches"
            )

            for future in futures:
                result.extend(future.result())
        except Exception as e:
            self._log_worker_failure(e, f"resolving partition keys of {database}.{table}")
            stats.record_error(e)
            raise
        except BaseException:
            logger.warning(f"Interrupted while resolving partition keys of {database}.{table}")
            raise
        finally:
            self._cancel_pending(futures)

        return result

    def fetch_by_keys(
        self,
        database: str,
        table: str,
        keys: Sequence[Sequence[str]],
        stats: Optional[FetchStats] = None,
    ) -> List[Dict[str, Any]]:
        """
        Resolve explicit partition keys, failing on any remote error.

        Keys that do not exist are simply absent from the result.
        """
        return self.fetch_by_keys_with_errors(database, table, keys, stats).partitions

    def _cancel_pending(self, futures: List[Future]) -> None:
        """Cancel futures that have not started; running ones finish in the background."""
        cancelled = sum(1 for future in futures if not future.done() and future.cancel())
        if cancelled:
            logger.debug(f"Cancelled {cancelled} pending tasks")

    def _log_worker_failure(self, error: Exception, action: str) -> None:
        if is_remote_service_error(error):
            logger.error(f"Glue request failed while {action}: {error}")
        else:
            logger.error(f"Unexpected {type(error).__name__} while {action}: {error}")
