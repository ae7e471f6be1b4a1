# app/cache.py
import logging
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

LOG = logging.getLogger("app.cache")


class CacheBackend(Protocol):
    """Anything the meme service can cache results in (in-process dict, Redis, ...)."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class SimpleTTLCache:
    """Process-local cache; entries expire lazily once `ttl` seconds have passed.

    No size limit: expired entries are only dropped when they are looked up again.
    """

    def __init__(self, ttl: int = 300, clock: Callable[[], float] = time.time):
        self.ttl = int(ttl)
        self.clock = clock
        self.store: Dict[str, Tuple[Any, float]] = {}  # key -> (value, timestamp)

    def get(self, key: str) -> Optional[Any]:
        v = self.store.get(key)
        if not v:
            return None
        val, ts = v
        if self.clock() - ts >= self.ttl:
            LOG.debug(f"cache entry {key} expired")
            # pop: another thread may have evicted it already
            self.store.pop(key, None)
            return None
        return val

    def set(self, key: str, value: Any) -> None:
        self.store[key] = (value, self.clock())

    def clear(self) -> None:
        self.store.clear()

    def __len__(self) -> int:
        return len(self.store)
