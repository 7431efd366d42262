"""
In-process cache backend

Dict of entries with monotonic-clock expiry. Expired entries are dropped
lazily on read; a background sweeper reclaims the rest periodically.
Data does not survive a restart and is not shared across processes.
"""

import asyncio
import re
import time
from typing import Any, Dict, List, Optional

import anyio
import attrs

from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.interface.i_cache_handler import ICacheHandler


def compile_key_pattern(pattern: str) -> re.Pattern[str]:
    """`*` matches any substring, anchored to the full key"""
    return re.compile('.*'.join(re.escape(part) for part in pattern.split('*')), re.DOTALL)


@attrs.define
class CacheEntry:
    value: Any
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class InMemoryCacheHandlerImpl(ICacheHandler):
    def __init__(self, *, sweep_interval: float = 60.0) -> None:
        self._store: Dict[str, CacheEntry] = {}
        self._sweep_interval = sweep_interval
        self._sweeper: Optional[asyncio.Task] = None

    def start_sweeper(self) -> None:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_forever())

    async def _sweep_forever(self) -> None:
        while True:
            await anyio.sleep(self._sweep_interval)
            removed = self.sweep()
            if removed:
                Logger.base.debug(f'🧹 [CACHE] Swept {removed} expired entries')

    def sweep(self) -> int:
        now = time.monotonic()
        expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired(time.monotonic()):
            del self._store[key]
            return None
        return entry

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        expires_at = time.monotonic() + ttl_seconds if ttl_seconds else None
        self._store[key] = CacheEntry(value=value, expires_at=expires_at)

    async def get(self, key: str) -> Any | None:
        entry = self._live_entry(key)
        return entry.value if entry else None

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def clear(self) -> None:
        self._store.clear()

    async def keys(self, pattern: str = '*') -> List[str]:
        self.sweep()
        matcher = compile_key_pattern(pattern)
        return [key for key in self._store if matcher.fullmatch(key)]

    def stats(self) -> dict:
        return {'size': len(self._store), 'keys': list(self._store)}

    async def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            try:
                await self._sweeper
            except asyncio.CancelledError:
                pass
            self._sweeper = None
        self._store.clear()
