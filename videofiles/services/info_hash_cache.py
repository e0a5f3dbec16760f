"""
Info Hash Existence Cache

Memoizes "does a video file with this info hash exist" lookups.

The lookup is triggered by BitTorrent trackers checking hashes announced by
untrusted peers, so it runs at high volume with many duplicates. The cache:
- Coalesces concurrent lookups of the same hash into one backend query
- Keeps at most max_size results, evicting the least recently used
- Expires each result ttl_seconds after it was stored

Construct one cache per process and share it:

    cache = build_info_hash_cache(AsyncSessionLocal)
    if await cache.exists(info_hash):
        ...
"""

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Awaitable, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from videofiles.core.config import Settings, get_settings
from videofiles.services.video_file_repository import VideoFileRepository

logger = logging.getLogger(__name__)


InfoHashLookup = Callable[[str], Awaitable[bool]]


class InfoHashExistenceCache:
    """
    Single flight, size and time bounded cache in front of an info hash lookup.

    Failed lookups are not cached: the error is raised to every caller
    waiting on that lookup and the next call queries again.
    """

    def __init__(
        self,
        lookup: InfoHashLookup,
        max_size: int,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            lookup: Coroutine function returning whether an info hash exists
            max_size: Maximum number of memoized results
            ttl_seconds: Lifetime of a memoized result
            clock: Monotonic time source, in seconds
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self._lookup = lookup
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock

        # info_hash -> (exists, expires_at), least recently used first
        self._entries: "OrderedDict[str, tuple[bool, float]]" = OrderedDict()
        self._in_flight: dict[str, asyncio.Task] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def exists(self, info_hash: str) -> bool:
        """
        Check whether a video file with this info hash exists.

        Raises:
            Whatever the lookup raises
        """
        async with self._lock:
            cached = self._get_fresh(info_hash)
            if cached is not None:
                return cached

            task = self._in_flight.get(info_hash)
            if task is None:
                task = asyncio.ensure_future(self._resolve(info_hash))
                task.add_done_callback(_retrieve_exception)
                self._in_flight[info_hash] = task

        # Shielded so that a cancelled caller does not cancel the shared lookup
        return await asyncio.shield(task)

    def clear(self) -> None:
        self._entries.clear()

    def _get_fresh(self, info_hash: str) -> Optional[bool]:
        entry = self._entries.get(info_hash)
        if entry is None:
            return None

        exists, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[info_hash]
            return None

        self._entries.move_to_end(info_hash)
        return exists

    async def _resolve(self, info_hash: str) -> bool:
        try:
            exists = await self._lookup(info_hash)
        finally:
            self._in_flight.pop(info_hash, None)

        self._store(info_hash, exists)
        return exists

    def _store(self, info_hash: str, exists: bool) -> None:
        self._entries[info_hash] = (exists, self._clock() + self.ttl_seconds)
        self._entries.move_to_end(info_hash)

        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted info hash {evicted} from existence cache")


def _retrieve_exception(task: asyncio.Task) -> None:
    # Every waiter may have been cancelled, the failure is still marked as seen
    if not task.cancelled():
        task.exception()

def build_info_hash_cache(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Optional[Settings] = None,
    clock: Callable[[], float] = time.monotonic,
) -> InfoHashExistenceCache:
    """
    Build the existence cache backed by the video_files table.

    Each cold lookup runs in its own short lived session.
    """
    settings = settings or get_settings()

    async def lookup(info_hash: str) -> bool:
        async with session_factory() as session:
            return await VideoFileRepository(session).info_hash_exists(info_hash)

    return InfoHashExistenceCache(
        lookup,
        max_size=settings.info_hash_cache_max_size,
        ttl_seconds=settings.info_hash_cache_ttl_seconds,
        clock=clock,
    )
