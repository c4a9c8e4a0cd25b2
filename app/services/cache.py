import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

POSTS_TAG = "posts"
DEFAULT_TTL_SECONDS = 60 * 60
_PRUNE_THRESHOLD = 512

_MISSING = object()


def post_tag(slug: str) -> str:
    return f"post-{slug}"


class TagCache(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(
        self, key: str, value: Any, *, tags: Iterable[str], ttl: float
    ) -> None: ...

    def invalidate(self, tag: str) -> int: ...


class InMemoryTagCache:
    """Process-wide cache with per-key TTL and tag-based eviction."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._entries: Dict[str, Tuple[Any, float, frozenset]] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        now = self.clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            value, expires_at, _tags = entry
            if now >= expires_at:
                self._entries.pop(key, None)
                return default
            return value

    def set(self, key: str, value: Any, *, tags: Iterable[str], ttl: float) -> None:
        now = self.clock()
        with self._lock:
            self._entries[key] = (value, now + ttl, frozenset(tags))
            if len(self._entries) > _PRUNE_THRESHOLD:
                self._prune(now)

    def invalidate(self, tag: str) -> int:
        with self._lock:
            stale_keys = [
                key for key, (_v, _e, tags) in self._entries.items() if tag in tags
            ]
            for key in stale_keys:
                self._entries.pop(key, None)
        logger.info(f"Invalidated {len(stale_keys)} cache entries tagged {tag!r}")
        return len(stale_keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _prune(self, now: float) -> None:
        expired = [key for key, (_v, exp, _t) in self._entries.items() if now >= exp]
        for key in expired:
            self._entries.pop(key, None)


def cached_call(
    cache: TagCache,
    key: str,
    loader: Callable[[], Any],
    *,
    tags: Iterable[str],
    ttl: float = DEFAULT_TTL_SECONDS,
    should_cache: Optional[Callable[[Any], bool]] = None,
) -> Any:
    """Return the cached value for ``key``, loading and storing it on a miss.

    Exceptions from ``loader`` propagate and nothing is stored.
    """
    value = cache.get(key, _MISSING)
    if value is not _MISSING:
        return value

    value = loader()
    if should_cache is None or should_cache(value):
        cache.set(key, value, tags=tags, ttl=ttl)
    return value
