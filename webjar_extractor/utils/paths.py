"""Default filesystem locations for WebJar Extractor."""

import os
from pathlib import Path

APP_DIR_NAME = "webjar-extractor"


def get_default_cache_path(filename: str) -> Path:
    """Get the default path of a cache file.

    Uses %LOCALAPPDATA% on Windows and $XDG_CACHE_HOME (or ~/.cache)
    elsewhere.

    Args:
        filename: Name of the file inside the cache directory

    Returns:
        Path to the cache file
    """
    if os.name == "nt":
        cache_base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    else:
        cache_base = Path(os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache")

    return cache_base / APP_DIR_NAME / filename
