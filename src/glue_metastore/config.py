"""
Configuration for the Glue metastore client.

Settings can be given directly or read from a Hive-style property mapping
(string keys and string values), which is how metastore clients are
usually configured.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .constants import (
    CATALOG_ID_CONF,
    CUSTOM_EXECUTOR_FACTORY_CONF,
    DEFAULT_EXECUTOR_THREADS,
    DEFAULT_NUM_PARTITION_SEGMENTS,
    EXECUTOR_THREADS_CONF,
    MAX_EXECUTOR_THREADS,
    MAX_NUM_PARTITION_SEGMENTS,
    MIN_EXECUTOR_THREADS,
    NUM_PARTITION_SEGMENTS_CONF,
)
from .exceptions import ConfigurationError
from .executors import DefaultExecutorFactory, ExecutorFactory, load_executor_factory


@dataclass(frozen=True)
class MetastoreConfig:
    """
    Effective configuration of a GlueMetastore.

    Attributes:
        num_partition_segments: Segments used by parallel partition listings
        catalog_id: Glue catalog to address (None = the caller's account)
        executor_threads: Worker threads of the default pool
        executor_factory: Factory instance or dotted path building the pool
    """

    num_partition_segments: int = DEFAULT_NUM_PARTITION_SEGMENTS
    catalog_id: Optional[str] = None
    executor_threads: int = DEFAULT_EXECUTOR_THREADS
    executor_factory: Union[ExecutorFactory, str, None] = None

    def __post_init__(self) -> None:
        if self.num_partition_segments > MAX_NUM_PARTITION_SEGMENTS:
            raise ConfigurationError(
                f"Hive Config [{NUM_PARTITION_SEGMENTS_CONF}] can't exceed "
                f"{MAX_NUM_PARTITION_SEGMENTS}"
            )
        if self.num_partition_segments < 1:
            raise ConfigurationError(
                f"Hive Config [{NUM_PARTITION_SEGMENTS_CONF}] must be at least 1"
            )
        if not MIN_EXECUTOR_THREADS <= self.executor_threads <= MAX_EXECUTOR_THREADS:
            raise ConfigurationError(
                f"Hive Config [{EXECUTOR_THREADS_CONF}] must be between "
                f"{MIN_EXECUTOR_THREADS} and {MAX_EXECUTOR_THREADS}, got {self.executor_threads}"
            )
        if self.catalog_id is not None and not self.catalog_id.strip():
            raise ConfigurationError(f"Hive Config [{CATALOG_ID_CONF}] cannot be blank")

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "MetastoreConfig":
        """
        Build a configuration from Hive-style properties.

        Unknown keys are ignored so a full Hive configuration can be passed.

        Raises:
            ConfigurationError: If a numeric setting is not an integer or a
                value is out of range
        """
        return cls(
            num_partition_segments=_get_int(
                properties, NUM_PARTITION_SEGMENTS_CONF, DEFAULT_NUM_PARTITION_SEGMENTS
            ),
            catalog_id=properties.get(CATALOG_ID_CONF) or None,
            executor_threads=_get_int(properties, EXECUTOR_THREADS_CONF, DEFAULT_EXECUTOR_THREADS),
            executor_factory=properties.get(CUSTOM_EXECUTOR_FACTORY_CONF) or None,
        )

    def resolve_executor_factory(self) -> ExecutorFactory:
        """Return the configured factory, loading it if given by path."""
        if self.executor_factory is None:
            return DefaultExecutorFactory()
        if isinstance(self.executor_factory, ExecutorFactory):
            return self.executor_factory
        return load_executor_factory(self.executor_factory)


def _get_int(properties: Mapping[str, Any], key: str, default: int) -> int:
    value = properties.get(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Hive Config [{key}] must be an integer, got: {value!r}") from e
