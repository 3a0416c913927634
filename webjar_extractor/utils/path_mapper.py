"""Mapping between archive resource paths and destination paths."""

from pathlib import Path, PurePosixPath

from .error_handling import InvalidPathError

WEBJARS_PATH_PREFIX = "META-INF/resources/webjars"


class PathMapper:
    """Strips the WebJars prefix from archive paths and re-roots them."""

    def __init__(self, prefix: str = WEBJARS_PATH_PREFIX):
        """Initialize path mapper.

        Args:
            prefix: Archive directory that holds the packages
        """
        self.prefix = prefix.rstrip("/") + "/"

    def to_relative(self, archive_path: str) -> str:
        """Strip the prefix from an archive path.

        Args:
            archive_path: '/'-separated path inside the archive

        Returns:
            Remaining path, e.g. 'jquery/jquery.js'

        Raises:
            InvalidPathError: If the path is not strictly below the prefix
        """
        if not archive_path.startswith(self.prefix):
            raise InvalidPathError(archive_path, self.prefix)

        relative = archive_path[len(self.prefix):]
        parts = PurePosixPath(relative).parts
        # Entries must not escape the destination root
        if not parts or relative.startswith("/") or ".." in parts:
            raise InvalidPathError(archive_path, self.prefix)
        return relative

    def to_destination(self, destination_root: Path, archive_path: str) -> Path:
        """Map an archive path to its file under a destination directory."""
        relative = self.to_relative(archive_path)
        return Path(destination_root).joinpath(*PurePosixPath(relative).parts)
