"""
Base classes for glue-metastore-client.
"""

from typing import Any, TypeVar

T = TypeVar("T", bound="AsyncContextManageable")


class AsyncContextManageable:
    """
    Mixin for async context manager support.

    Subclasses implement ``close()``; leaving the ``async with`` block
    always calls it, including when the block raises.
    """

    async def __aenter__(self: T) -> T:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        raise NotImplementedError
