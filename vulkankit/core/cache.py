"""
Fetch-once cache for remote documents.

Version documents are fetched lazily on first need and then reused for the
rest of the process. Every caller receives the identical result object.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheState(Enum):
    """Lifecycle states of a LazyCache."""

    NOT_FETCHED = "not-fetched"
    IN_FLIGHT = "in-flight"
    RESOLVED = "resolved"


class LazyCache(Generic[T]):
    """
    Cache a single value produced by a fetch function.

    The fetch runs at most once successfully. A failed fetch leaves the
    cache in NOT_FETCHED so the error reaches the caller and a later call
    may try again.

    Example:
        >>> cache = LazyCache(lambda: client.get_json(url), name="versions")
        >>> first = cache.get()
        >>> first is cache.get()
        True
    """

    def __init__(self, fetch: Callable[[], T], name: str = "value"):
        self._fetch = fetch
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self.name = name
        self.state = CacheState.NOT_FETCHED

    def get(self) -> T:
        """Return the cached value, fetching it on first use."""
        with self._lock:
            if self.state is CacheState.RESOLVED:
                return self._value  # type: ignore[return-value]

            logger.debug(f"Fetching {self.name}")
            self.state = CacheState.IN_FLIGHT
            try:
                value = self._fetch()
            except Exception:
                self.state = CacheState.NOT_FETCHED
                raise

            self._value = value
            self.state = CacheState.RESOLVED
            return value

    @property
    def is_resolved(self) -> bool:
        """True once a value has been fetched."""
        return self.state is CacheState.RESOLVED
