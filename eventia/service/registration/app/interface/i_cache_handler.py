"""
Cache Handler Interface

Key/value store with per-entry TTL used as an advisory accelerator.
Implementations may raise CacheUnavailableError; callers absorb it.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional


class ICacheHandler(ABC):
    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        pass

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Returns True if the key was present"""
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass

    @abstractmethod
    async def keys(self, pattern: str = '*') -> List[str]:
        """
        Keys matching pattern, anchored to the full key

        `*` matches any substring; every other character is literal.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        pass
