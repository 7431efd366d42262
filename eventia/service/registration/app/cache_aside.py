"""
Cache-aside helper shared by every read and mutation path

Reads: bounded cache read -> decode -> hit, otherwise load from storage and
populate the cache in the background. Mutations: invalidate keys in the
background after commit. Cache problems are logged and absorbed; they never
change a result, only its latency.

A load that overlaps an invalidation of its key in this process does not
populate: the loader may have read rows from before the change. Loads in
other processes, or a populate racing a delete inside redis, can still park
a stale entry; it lives at most one TTL.
"""

import asyncio
from typing import Any, Awaitable, Callable, Coroutine, Dict, Optional, Set, TypeVar

import anyio

from eventia.platform.exception.exceptions import CacheUnavailableError, DomainError
from eventia.platform.logging.loguru_io import Logger
from eventia.platform.metrics.eventia_metrics import metrics
from eventia.service.registration.app.interface.i_cache_handler import ICacheHandler


T = TypeVar('T')


class CacheAside:
    def __init__(self, *, cache: ICacheHandler, read_timeout: float = 0.2) -> None:
        self._cache = cache
        self._read_timeout = read_timeout
        self._tasks: Set[asyncio.Task] = set()
        # Per key: loads in flight, and invalidations seen while they run
        self._loads: Dict[str, int] = {}
        self._generations: Dict[str, int] = {}

    async def get_or_load(
        self,
        *,
        key: str,
        loader: Callable[[], Awaitable[Optional[T]]],
        ttl: float,
        encode: Callable[[T], Any],
        decode: Callable[[Any], T],
    ) -> Optional[T]:
        cached = await self._read(key)
        if cached is not None:
            try:
                value = decode(cached)
            except (KeyError, TypeError, ValueError, DomainError) as e:
                metrics.record_cache_lookup(result='error')
                Logger.base.warning(f'⚠️ [CACHE] Undecodable entry {key}, reloading | {e}')
            else:
                metrics.record_cache_lookup(result='hit')
                Logger.base.debug(f'🎯 [CACHE] Hit {key}')
                return value
        else:
            metrics.record_cache_lookup(result='miss')
            Logger.base.debug(f'💨 [CACHE] Miss {key}')

        started = self._generations.get(key, 0)
        self._loads[key] = self._loads.get(key, 0) + 1
        try:
            value = await loader()
        finally:
            stale = self._generations.get(key, 0) != started
            self._loads[key] -= 1
            if not self._loads[key]:
                del self._loads[key]
                self._generations.pop(key, None)

        if value is None:
            return value
        if stale:
            Logger.base.debug(f'🚫 [CACHE] Invalidated during load, not caching {key}')
        else:
            self._spawn(self._write(key, encode(value), ttl))
        return value

    def invalidate(self, *keys: str) -> None:
        """Delete keys in the background; returns immediately"""
        for key in keys:
            if key in self._loads:
                self._generations[key] = self._generations.get(key, 0) + 1
        if keys:
            self._spawn(self._delete(keys))

    async def drain(self) -> None:
        """Wait for outstanding background cache work"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _read(self, key: str) -> Any | None:
        try:
            with anyio.fail_after(self._read_timeout):
                return await self._cache.get(key)
        except TimeoutError:
            metrics.record_cache_failure(operation='get')
            Logger.base.warning(f'⏱️ [CACHE] Read timed out for {key}, treating as miss')
        except CacheUnavailableError as e:
            metrics.record_cache_failure(operation='get')
            Logger.base.warning(f'⚠️ [CACHE] Read failed for {key}, treating as miss | {e}')
        return None

    async def _write(self, key: str, value: Any, ttl: float) -> None:
        try:
            await self._cache.set(key, value, ttl)
        except Exception as e:
            metrics.record_cache_failure(operation='set')
            Logger.base.warning(f'⚠️ [CACHE] Write skipped for {key} | {e}')

    async def _delete(self, keys: tuple[str, ...]) -> None:
        for key in keys:
            try:
                await self._cache.delete(key)
            except Exception as e:
                metrics.record_cache_failure(operation='delete')
                Logger.base.warning(f'⚠️ [CACHE] Invalidation skipped for {key} | {e}')
        Logger.base.debug(f'🗑️ [CACHE] Invalidated {", ".join(keys)}')
