"""Plain text file cache.

Stores one line per extracted file:

    <key>\t<size>\t<last_modified>
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from .memory import MemoryCache
from ..models.resource import Cacheable
from ..utils.error_handling import IOFailure
from ..utils.paths import get_default_cache_path

logger = logging.getLogger(__name__)


class FileCache(MemoryCache):
    """Cache persisted to a text file between runs."""

    def __init__(self, file_path: Optional[Union[str, Path]] = None):
        """Initialize file cache.

        Args:
            file_path: Cache file (default: ~/.cache/webjar-extractor/cache.txt)
        """
        super().__init__()
        if file_path:
            self.file_path = Path(file_path).expanduser()
        else:
            self.file_path = get_default_cache_path("cache.txt")

    def load(self) -> None:
        """Replace the in-memory entries with the file's contents.

        A missing file loads as an empty cache. Malformed lines are skipped.
        """
        self._entries.clear()
        if not self.file_path.exists():
            return

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.rstrip("\n")
                    if not line:
                        continue
                    try:
                        key, size, last_modified = line.split("\t")
                        self._entries[key] = Cacheable(
                            size=int(size), last_modified=float(last_modified)
                        )
                    except ValueError:
                        logger.warning(
                            "Skipping malformed line %d in %s", line_number, self.file_path
                        )
        except OSError as e:
            raise IOFailure(self.file_path, e) from e

        logger.debug("Loaded %d cache entries from %s", len(self._entries), self.file_path)

    def save(self) -> None:
        """Write all entries, replacing the file atomically."""
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.file_path.parent, prefix=".cache-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    for key in sorted(self._entries):
                        value = self._entries[key]
                        f.write(f"{key}\t{value.size}\t{value.last_modified!r}\n")
                os.replace(tmp_name, self.file_path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            raise IOFailure(self.file_path, e) from e

        logger.debug("Saved %d cache entries to %s", len(self._entries), self.file_path)
