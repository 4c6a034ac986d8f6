"""
Async facade over GlueMetastore.

boto3 is blocking, so each call runs in the event loop's default executor
while the metastore's own worker pool does the fan-out. The event loop is
never blocked by a Glue request.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from .base import AsyncContextManageable
from .models import BatchGetResult
from .operators.metastore import GlueMetastore

logger = logging.getLogger(__name__)

R = TypeVar("R")


class AsyncGlueMetastore(AsyncContextManageable):
    """
    Asyncio wrapper for a GlueMetastore.

    Cancelling an awaiting task abandons the result but does not stop the
    Glue requests already in flight; they complete on their worker threads.
    """

    def __init__(self, metastore: GlueMetastore) -> None:
        if metastore is None:
            raise ValueError("metastore cannot be None")
        self._metastore = metastore

    @property
    def metastore(self) -> GlueMetastore:
        return self._metastore

    @property
    def is_closed(self) -> bool:
        return self._metastore.is_closed

    async def _run(self, func: Callable[..., R], *args: Any) -> R:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    async def list_partitions(
        self,
        database: str,
        table: str,
        expression: Optional[str] = None,
        max_results: int = -1,
    ) -> List[Dict[str, Any]]:
        return await self._run(
            self._metastore.list_partitions, database, table, expression, max_results
        )

    async def list_partitions_by_keys(
        self, database: str, table: str, keys: Sequence[Sequence[str]]
    ) -> List[Dict[str, Any]]:
        return await self._run(self._metastore.list_partitions_by_keys, database, table, keys)

    async def batch_get_partitions_with_errors(
        self, database: str, table: str, keys: Sequence[Sequence[str]]
    ) -> BatchGetResult:
        return await self._run(
            self._metastore.batch_get_partitions_with_errors, database, table, keys
        )

    async def get_database(self, name: str) -> Dict[str, Any]:
        return await self._run(self._metastore.get_database, name)

    async def get_table(self, database: str, name: str) -> Dict[str, Any]:
        return await self._run(self._metastore.get_table, database, name)

    async def close(self) -> None:
        """Close the wrapped metastore without blocking the event loop."""
        if self._metastore.is_closed:
            return
        await self._run(self._metastore.close)
        logger.debug("AsyncGlueMetastore closed")
