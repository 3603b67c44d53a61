"""Single-entry TTL cache with single-flight population."""

import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="status_cache")

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the monotonic instant after which it is stale."""
    value: T
    expires_at: float


class StatusCache(Generic[T]):
    """
    Hold one value produced by `loader`, refreshed at most once per TTL.

    Callers that arrive while a population is running wait for it and get
    the same value or the same exception. A failed population caches
    nothing; the next call starts over.
    """

    def __init__(
        self,
        loader: Callable[[], T],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self.ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: Optional[CacheEntry[T]] = None
        self._inflight: Optional[Future] = None

    def _fresh_entry(self) -> Optional[CacheEntry[T]]:
        """Return the entry if it has not expired. Caller holds the lock."""
        if self._entry is not None and self._clock() < self._entry.expires_at:
            return self._entry
        return None

    def get(self) -> T:
        """Return the cached value, populating it first if missing or stale."""
        with self._lock:
            entry = self._fresh_entry()
            if entry is not None:
                logger.debug("Status cache hit")
                return entry.value
            inflight = self._inflight
            owner = inflight is None
            if owner:
                inflight = self._inflight = Future()

        if not owner:
            logger.debug("Waiting on in-flight status population")
            return inflight.result()

        logger.info("Status cache miss; populating")
        try:
            value = self._loader()
        except BaseException as exc:
            # waiters must be released even on KeyboardInterrupt/SystemExit
            with self._lock:
                self._inflight = None
            logger.warning(f"Status population failed: {exc}")
            inflight.set_exception(exc)
            raise

        with self._lock:
            self._entry = CacheEntry(value=value, expires_at=self._clock() + self.ttl)
            self._inflight = None
        inflight.set_result(value)
        return value

    def invalidate(self) -> None:
        """Drop the cached entry; an in-flight population is left alone."""
        with self._lock:
            self._entry = None
