from typing import Any, List, Optional

from redis.asyncio import ConnectionPool as AsyncConnectionPool, Redis as AsyncRedis

from eventia.platform.config.core_setting import Settings
from eventia.platform.exception.exceptions import CacheUnavailableError
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.interface.i_cache_handler import ICacheHandler
from eventia.service.registration.driven_adapter.cache.in_memory_cache_handler_impl import (
    InMemoryCacheHandlerImpl,
)
from eventia.service.registration.driven_adapter.cache.redis_cache_handler_impl import (
    RedisCacheHandlerImpl,
)


class CacheClient(ICacheHandler):
    """
    Cache backend selection with in-memory fallback.

    Delegates the cache contract to whichever backend came up. Before
    initialize() every operation raises CacheUnavailableError, which callers
    already treat as a miss.

    Usage:
        await cache_client.initialize()  # In startup
        await cache_client.get('event:...')
    """

    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._handler: Optional[ICacheHandler] = None
        self._backend: Optional[str] = None

    @property
    def backend(self) -> Optional[str]:
        return self._backend

    async def initialize(self) -> ICacheHandler:
        """Bring up the configured backend (idempotent, never raises)"""
        if self._handler is not None:
            return self._handler

        if self._settings.CACHE_BACKEND == 'redis':
            try:
                self._handler = await self._initialize_redis()
                self._backend = 'redis'
                Logger.base.info(
                    f'✅ [CACHE] Redis connected at {self._settings.REDIS_HOST}:{self._settings.REDIS_PORT}'
                )
                return self._handler
            except Exception as e:
                Logger.base.warning(f'⚠️ [CACHE] Redis unavailable, falling back to memory | {e}')

        self._handler = self._initialize_memory()
        self._backend = 'memory'
        Logger.base.info('✅ [CACHE] In-memory cache ready')
        return self._handler

    async def _initialize_redis(self) -> RedisCacheHandlerImpl:
        pool = AsyncConnectionPool.from_url(
            self._settings.REDIS_URL,
            password=self._settings.REDIS_PASSWORD or None,
            max_connections=self._settings.REDIS_POOL_MAX_CONNECTIONS,
            socket_timeout=self._settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=self._settings.REDIS_SOCKET_CONNECT_TIMEOUT,
        )
        client = AsyncRedis.from_pool(pool)
        try:
            await client.ping()  # Fail-fast
        except Exception:
            await client.aclose()
            raise
        return RedisCacheHandlerImpl(client=client, key_prefix=self._settings.REDIS_KEY_PREFIX)

    def _initialize_memory(self) -> InMemoryCacheHandlerImpl:
        handler = InMemoryCacheHandlerImpl(sweep_interval=self._settings.CACHE_SWEEP_INTERVAL)
        handler.start_sweeper()
        return handler

    def get_handler(self) -> ICacheHandler:
        if self._handler is None:
            raise CacheUnavailableError(
                'Cache client not initialized. Call await cache_client.initialize() during startup.'
            )
        return self._handler

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        await self.get_handler().set(key, value, ttl_seconds)

    async def get(self, key: str) -> Any | None:
        return await self.get_handler().get(key)

    async def delete(self, key: str) -> bool:
        return await self.get_handler().delete(key)

    async def exists(self, key: str) -> bool:
        return await self.get_handler().exists(key)

    async def clear(self) -> None:
        await self.get_handler().clear()

    async def keys(self, pattern: str = '*') -> List[str]:
        return await self.get_handler().keys(pattern)

    async def close(self) -> None:
        if self._handler is not None:
            handler, self._handler = self._handler, None
            self._backend = None
            try:
                await handler.close()
            except CacheUnavailableError as e:
                Logger.base.warning(f'⚠️ [CACHE] Error while closing cache | {e}')
