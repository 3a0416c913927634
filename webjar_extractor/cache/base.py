"""Cache contract for WebJar Extractor."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models.resource import Cacheable


class Cache(ABC):
    """Maps destination keys to the fingerprint recorded at last extraction.

    Keys are destination paths relative to the extraction root, '/'-separated,
    e.g. 'jquery/jquery.js'.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Cacheable]:
        """Get the recorded fingerprint for a key, or None."""
        pass

    @abstractmethod
    def put(self, key: str, value: Cacheable) -> None:
        """Record the fingerprint of a file that was just written or confirmed."""
        pass

    def is_up_to_date(self, key: str, candidate: Cacheable) -> bool:
        """Check whether a candidate fingerprint matches the recorded one.

        A missing key is never up to date.
        """
        recorded = self.get(key)
        return recorded is not None and recorded == candidate

    def load(self) -> None:
        """Load persisted state. No-op for in-memory caches."""

    def save(self) -> None:
        """Persist state. No-op for in-memory caches."""

    def close(self) -> None:
        """Release resources held by the cache."""
