"""Change-detection caches for WebJar Extractor.

Provides fingerprint stores that decide whether a resource must be
re-extracted:
- MemoryCache: valid for one process
- NoOpCache: always extract
- FileCache: one line per file in a text file
- DuckDBCache: persistent DuckDB database
"""

from .base import Cache
from .memory import MemoryCache, NoOpCache
from .file_cache import FileCache
from .manager import DuckDBCache
from .factory import get_cache

__all__ = [
    "Cache",
    "MemoryCache",
    "NoOpCache",
    "FileCache",
    "DuckDBCache",
    "get_cache",
]
