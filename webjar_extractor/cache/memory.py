"""In-process cache implementations."""

from typing import Dict, Optional

from .base import Cache
from ..models.resource import Cacheable


class MemoryCache(Cache):
    """Dict-backed cache, valid for the lifetime of the process."""

    def __init__(self):
        self._entries: Dict[str, Cacheable] = {}

    def get(self, key: str) -> Optional[Cacheable]:
        return self._entries.get(key)

    def put(self, key: str, value: Cacheable) -> None:
        self._entries[key] = value

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


class NoOpCache(Cache):
    """Cache that never reports anything as up to date."""

    def get(self, key: str) -> Optional[Cacheable]:
        return None

    def put(self, key: str, value: Cacheable) -> None:
        pass
