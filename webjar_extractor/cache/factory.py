"""Cache construction from configuration."""

from .base import Cache
from .file_cache import FileCache
from .manager import DuckDBCache
from .memory import MemoryCache, NoOpCache
from ..config import CacheConfig


def get_cache(config: CacheConfig) -> Cache:
    """Create the cache selected by the configuration.

    Args:
        config: Cache configuration

    Returns:
        Cache instance (not yet loaded)
    """
    if config.backend == "file":
        return FileCache(config.file_path)
    if config.backend == "duckdb":
        return DuckDBCache(config.db_path)
    if config.backend == "none":
        return NoOpCache()
    return MemoryCache()
