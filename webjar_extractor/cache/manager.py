"""DuckDB-backed cache for WebJar Extractor.

Keeps fingerprints in memory during an extraction and writes the changed
ones back to the database on save().
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Set

import duckdb

from .memory import MemoryCache
from .schema import CacheSchema
from ..models.resource import Cacheable
from ..utils.paths import get_default_cache_path

logger = logging.getLogger(__name__)


class DuckDBCache(MemoryCache):
    """Cache persisted in a DuckDB database."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize DuckDB cache.

        Args:
            db_path: Path to DuckDB database file
                (default: ~/.cache/webjar-extractor/cache.duckdb)
        """
        super().__init__()
        if db_path:
            self.db_path = Path(db_path).expanduser()
        else:
            self.db_path = get_default_cache_path("cache.duckdb")

        self._conn: Optional[duckdb.DuckDBPyConnection] = None
        self._dirty: Set[str] = set()

    def _get_connection(self) -> duckdb.DuckDBPyConnection:
        """Get or create database connection, migrating the schema if needed."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = duckdb.connect(str(self.db_path))
            if CacheSchema.needs_migration(self._conn):
                CacheSchema.migrate(self._conn)
        return self._conn

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "DuckDBCache":
        self._get_connection()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def put(self, key: str, value: Cacheable) -> None:
        super().put(key, value)
        self._dirty.add(key)

    def load(self) -> None:
        """Replace the in-memory entries with the database contents."""
        conn = self._get_connection()
        rows = conn.execute(
            "SELECT key, size, last_modified FROM extracted_files"
        ).fetchall()

        self._entries = {
            row[0]: Cacheable(size=row[1], last_modified=row[2]) for row in rows
        }
        self._dirty.clear()
        logger.debug("Loaded %d cache entries from %s", len(rows), self.db_path)

    def save(self) -> None:
        """Write entries recorded since the last load or save."""
        if not self._dirty:
            return

        conn = self._get_connection()
        conn.executemany(
            """
            INSERT OR REPLACE INTO extracted_files (key, size, last_modified, updated_at)
            VALUES (?, ?, ?, CURRENT_TIMESTAMP)
            """,
            [
                [key, self._entries[key].size, self._entries[key].last_modified]
                for key in sorted(self._dirty)
            ],
        )
        logger.debug("Saved %d cache entries to %s", len(self._dirty), self.db_path)
        self._dirty.clear()

    def clear(self) -> None:
        """Delete all cached fingerprints."""
        conn = self._get_connection()
        CacheSchema.drop_all_tables(conn)
        CacheSchema.create_schema(conn)
        self._entries.clear()
        self._dirty.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with cache statistics
        """
        conn = self._get_connection()

        files_count, total_bytes = conn.execute(
            "SELECT COUNT(*), COALESCE(SUM(size), 0) FROM extracted_files"
        ).fetchone()

        packages = conn.execute(
            """
            SELECT split_part(key, '/', 1) AS package, COUNT(*)
            FROM extracted_files GROUP BY package ORDER BY package
            """
        ).fetchall()

        last_update = conn.execute(
            "SELECT MAX(updated_at) FROM extracted_files"
        ).fetchone()[0]

        db_size = self.db_path.stat().st_size if self.db_path.exists() else 0

        return {
            "files": files_count,
            "total_bytes": total_bytes,
            "packages": {row[0]: row[1] for row in packages},
            "last_update": last_update,
            "db_size_bytes": db_size,
            "db_path": str(self.db_path),
        }
