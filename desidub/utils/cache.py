import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from desidub.config.settings import settings
from desidub.utils.logger import cache_logger

Producer = Callable[[], Awaitable[Any]]

# ===========================
# Cache Entry
# ===========================
@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl

# ===========================
# Single-Flight Result Cache
# ===========================
class ResultCache:
    """In-memory TTL cache that collapses concurrent misses for a key.

    A key is either idle (no entry), in flight (a shared task is producing its
    value) or fresh (an unexpired entry exists). All bookkeeping runs on the
    event loop between suspension points, so the in-flight map is only ever
    mutated by one coroutine at a time and unrelated keys never wait on each
    other.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._inflight: Dict[str, asyncio.Task] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry.value

    async def get_or_set(self, key: str, ttl: float, producer: Producer) -> Any:
        entry = self._entries.get(key)
        if entry is not None and not entry.is_expired(self._clock()):
            self.hits += 1
            cache_logger.debug(f"Hit: {key}")
            return entry.value

        flight = self._inflight.get(key)
        if flight is None:
            self.misses += 1
            cache_logger.debug(f"Miss: {key}")
            flight = asyncio.ensure_future(self._populate(key, ttl, producer))
            flight.add_done_callback(self._consume_exception)
            self._inflight[key] = flight
        else:
            cache_logger.debug(f"Joining in-flight: {key}")

        # shield: a cancelled caller must not cancel the flight other callers share
        return await asyncio.shield(flight)

    async def _populate(self, key: str, ttl: float, producer: Producer) -> Any:
        try:
            value = await producer()
            self._entries[key] = CacheEntry(key=key, value=value, stored_at=self._clock(), ttl=ttl)
            cache_logger.debug(f"Saved: {key} ({ttl}s)")
            return value
        except Exception as e:
            cache_logger.debug(f"Not cached: {key} ({type(e).__name__})")
            raise
        finally:
            self._inflight.pop(key, None)

    @staticmethod
    def _consume_exception(task: asyncio.Task):
        if not task.cancelled():
            task.exception()

    def invalidate(self, key: str):
        self._entries.pop(key, None)

    def clear(self):
        self._entries.clear()

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def stats(self) -> Dict[str, int]:
        return {
            "entries": len(self._entries),
            "inflight": len(self._inflight),
            "hits": self.hits,
            "misses": self.misses,
        }

# ===========================
# Cleanup Expired Entries
# ===========================
async def cleanup_expired_cache(cache: "ResultCache"):
    while True:
        try:
            purged = cache.purge_expired()
            if purged:
                cache_logger.debug(f"Cleanup: {purged} expired entries")
        except Exception as e:
            cache_logger.error(f"Cleanup error: {type(e).__name__}")

        await asyncio.sleep(settings.CLEANUP_INTERVAL)

# ===========================
# Global Cache Instance
# ===========================
result_cache = ResultCache()
