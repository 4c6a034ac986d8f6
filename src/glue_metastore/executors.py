"""
Worker pool construction.

The metastore runs segment scans and batch lookups on a
``concurrent.futures.Executor`` built once per client by an
``ExecutorFactory``. Deployments that need a different pool (bounded
queues, instrumented threads, ...) supply their own factory, either as an
instance or by dotted path in the configuration.
"""

import importlib
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable

from .constants import CUSTOM_EXECUTOR_FACTORY_CONF, EXECUTOR_THREAD_NAME_PREFIX
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .config import MetastoreConfig

logger = logging.getLogger(__name__)


class ExecutorFactory(ABC):
    """Builds the worker pool used by a metastore instance."""

    @abstractmethod
    def create_executor(self, config: "MetastoreConfig") -> Executor:
        """
        Create the executor for one metastore.

        Args:
            config: Effective metastore configuration

        Returns:
            Executor safe for concurrent submission from many threads
        """
        pass


class DefaultExecutorFactory(ExecutorFactory):
    """Fixed-size thread pool sized by ``config.executor_threads``."""

    def create_executor(self, config: "MetastoreConfig") -> Executor:
        logger.debug(f"Creating thread pool with {config.executor_threads} workers")
        return ThreadPoolExecutor(
            max_workers=config.executor_threads,
            thread_name_prefix=EXECUTOR_THREAD_NAME_PREFIX,
        )


class DirectExecutor(Executor):
    """
    Executor that runs every task inline in the submitting thread.

    Results are deterministic, which makes it the pool of choice for tests
    and for embedding the client where extra threads are unwanted. Segments
    then run one after another in submission order.
    """

    def __init__(self) -> None:
        self._shutdown = False
        self._lock = threading.Lock()

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        with self._lock:
            if self._shutdown:
                raise RuntimeError("cannot schedule new futures after shutdown")

        future: Future = Future()
        if not future.set_running_or_notify_cancel():
            return future
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        with self._lock:
            self._shutdown = True


class DirectExecutorFactory(ExecutorFactory):
    """Factory for ``DirectExecutor``; usable from configuration by dotted path."""

    def create_executor(self, config: "MetastoreConfig") -> Executor:
        return DirectExecutor()


def load_executor_factory(path: str) -> ExecutorFactory:
    """
    Instantiate an executor factory from a dotted path.

    Accepts ``package.module.ClassName`` or ``package.module:ClassName``.

    Raises:
        ConfigurationError: If the path cannot be imported or does not name
            an ExecutorFactory subclass
    """
    module_name, sep, attr = path.rpartition(":")
    if not sep:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ConfigurationError(
            f"Hive Config [{CUSTOM_EXECUTOR_FACTORY_CONF}] must be a dotted class path, got: {path}"
        )

    try:
        module = importlib.import_module(module_name)
        factory_class = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Unable to load executor factory '{path}': {e}") from e

    if not (isinstance(factory_class, type) and issubclass(factory_class, ExecutorFactory)):
        raise ConfigurationError(f"'{path}' is not an ExecutorFactory subclass")

    return factory_class()
