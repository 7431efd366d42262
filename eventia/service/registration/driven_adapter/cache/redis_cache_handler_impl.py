"""
Redis cache backend

Values are orjson-encoded, keys are namespaced with a prefix, TTLs are whole
seconds. Every backend failure surfaces as CacheUnavailableError.
"""

from contextlib import asynccontextmanager
import math
import re
from typing import Any, AsyncIterator, List, Optional

import orjson
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from eventia.platform.exception.exceptions import CacheUnavailableError
from eventia.service.registration.app.interface.i_cache_handler import ICacheHandler


_GLOB_SPECIALS = re.compile(r'([\\?\[\]^])')


def escape_glob(text: str) -> str:
    """Escape redis glob metacharacters except `*`"""
    return _GLOB_SPECIALS.sub(r'\\\1', text)


def ttl_to_seconds(ttl_seconds: Optional[float]) -> Optional[int]:
    if not ttl_seconds:
        return None
    return max(1, math.ceil(ttl_seconds))


class RedisCacheHandlerImpl(ICacheHandler):
    def __init__(self, *, client: AsyncRedis, key_prefix: str = '') -> None:
        self._client = client
        self._prefix = key_prefix

    def _key(self, key: str) -> str:
        return f'{self._prefix}{key}'

    def _strip(self, raw_key: bytes | str) -> str:
        key = raw_key.decode() if isinstance(raw_key, bytes) else raw_key
        return key[len(self._prefix) :]

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except (RedisError, OSError, TimeoutError) as e:
            raise CacheUnavailableError(f'Redis {operation} failed: {e}') from e

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        payload = orjson.dumps(value)
        async with self._guard('set'):
            await self._client.set(self._key(key), payload, ex=ttl_to_seconds(ttl_seconds))

    async def get(self, key: str) -> Any | None:
        async with self._guard('get'):
            raw = await self._client.get(self._key(key))
        if raw is None:
            return None
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise CacheUnavailableError(f'Corrupt cache payload for {key}') from e

    async def delete(self, key: str) -> bool:
        async with self._guard('delete'):
            return bool(await self._client.delete(self._key(key)))

    async def exists(self, key: str) -> bool:
        async with self._guard('exists'):
            return bool(await self._client.exists(self._key(key)))

    async def clear(self) -> None:
        async with self._guard('clear'):
            batch: List[bytes | str] = []
            async for raw_key in self._client.scan_iter(match=f'{escape_glob(self._prefix)}*'):
                batch.append(raw_key)
                if len(batch) >= 500:
                    await self._client.delete(*batch)
                    batch.clear()
            if batch:
                await self._client.delete(*batch)

    async def keys(self, pattern: str = '*') -> List[str]:
        match = escape_glob(self._prefix) + escape_glob(pattern)
        async with self._guard('keys'):
            return [self._strip(raw_key) async for raw_key in self._client.scan_iter(match=match)]

    async def close(self) -> None:
        async with self._guard('close'):
            await self._client.aclose()
