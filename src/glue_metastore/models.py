"""
Request and result types for partition retrieval.

Partitions themselves are passed through exactly as the Glue API returns
them (plain dictionaries); only the request side and batch errors get
dedicated types here.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class PartitionQuery:
    """
    Parameters of a single partition listing.

    A non-positive ``max_results`` means the listing is unbounded and every
    matching partition is returned.
    """

    database: str
    table: str
    expression: Optional[str] = None
    max_results: int = -1

    def __post_init__(self) -> None:
        if not self.database:
            raise ValueError("database cannot be empty")
        if not self.table:
            raise ValueError("table cannot be empty")

    @property
    def is_bounded(self) -> bool:
        """Whether the listing stops after ``max_results`` partitions."""
        return self.max_results > 0


@dataclass(frozen=True)
class PartitionError:
    """
    A single key that could not be resolved by a batch lookup.

    Attributes:
        values: Partition column values of the failed key
        error_code: Glue-style error code (e.g. EntityNotFoundException)
        error_message: Human-readable description
    """

    values: List[str]
    error_code: str
    error_message: str = ""

    @classmethod
    def from_glue(cls, error: Dict[str, Any]) -> "PartitionError":
        """Build from a Glue ``PartitionError`` response element."""
        detail = error.get("ErrorDetail") or {}
        return cls(
            values=list(error.get("PartitionValues", [])),
            error_code=detail.get("ErrorCode", ""),
            error_message=detail.get("ErrorMessage", ""),
        )


@dataclass
class BatchGetResult:
    """Found partitions plus per-key errors of a batch lookup."""

    partitions: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[PartitionError] = field(default_factory=list)

    def extend(self, other: "BatchGetResult") -> None:
        self.partitions.extend(other.partitions)
        self.errors.extend(other.errors)


def partition_value_list(values: Sequence[str]) -> Dict[str, List[str]]:
    """Render a partition key the way BatchGetPartition expects it."""
    return {"Values": list(values)}
