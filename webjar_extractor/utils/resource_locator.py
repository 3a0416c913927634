"""Resource location for WebJar Extractor.

Finds the archives that carry WebJar resources:
- Jar/zip archives (the usual packaging of a WebJar)
- Exploded directories (e.g. an unpacked jar or a build output folder)
- Directories holding jar/zip archives, scanned one level deep

Callers only see ArchiveLocation objects and never need to know which kind
of location supplied a resource.
"""

import logging
import os
import time
import zipfile
from abc import ABC, abstractmethod
from functools import partial
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, List, Optional, Set, Union

from ..models.resource import ResourceEntry
from .error_handling import IOFailure

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIXES = (".jar", ".zip")


def _zip_timestamp(info: zipfile.ZipInfo) -> float:
    """Convert a zip entry's DOS date_time to epoch seconds."""
    try:
        return time.mktime(info.date_time + (0, 0, -1))
    except (OverflowError, ValueError):
        return 0.0


def _child_names(paths: Iterable[str], path: str) -> Set[str]:
    """Names of the immediate sub-directories of ``path`` among ``paths``."""
    children = set()
    for name in paths:
        if not name.startswith(path):
            continue
        rest = name[len(path):].split("/")
        # Only count names that have something below them
        if len(rest) > 1 and rest[0]:
            children.add(rest[0])
    return children


class ArchiveLocation(ABC):
    """A jar, zip or directory that may hold resources."""

    def __init__(self, path: Path):
        self.path = path

    @property
    def name(self) -> str:
        """Display name of this location."""
        return str(self.path)

    @abstractmethod
    def names(self) -> List[str]:
        """List all file paths in this location, '/'-separated."""
        pass

    @abstractmethod
    def iter_entries(self, path: str) -> Iterator[ResourceEntry]:
        """Lazily yield the files under ``path``.

        Args:
            path: Directory inside the location, ending with '/'
        """
        pass

    def has_entries(self, path: str) -> bool:
        """Check whether any file lives under ``path``."""
        return any(name.startswith(path) for name in self.names())

    def contains(self, file_path: str) -> bool:
        """Check whether ``file_path`` is a file in this location."""
        return file_path in self.names()

    def list_children(self, path: str) -> Set[str]:
        """Immediate sub-directory names under ``path``."""
        return _child_names(self.names(), path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ZipArchiveLocation(ArchiveLocation):
    """A jar or zip archive."""

    def __init__(self, path: Path):
        super().__init__(path)
        self._names: Optional[List[str]] = None

    def names(self) -> List[str]:
        if self._names is None:
            try:
                with zipfile.ZipFile(self.path) as archive:
                    self._names = [
                        info.filename for info in archive.infolist() if not info.is_dir()
                    ]
            except (OSError, zipfile.BadZipFile) as e:
                raise IOFailure(self.path, e) from e
        return self._names

    def iter_entries(self, path: str) -> Iterator[ResourceEntry]:
        try:
            archive = zipfile.ZipFile(self.path)
        except (OSError, zipfile.BadZipFile) as e:
            raise IOFailure(self.path, e) from e

        with archive:
            for info in archive.infolist():
                if info.is_dir() or not info.filename.startswith(path):
                    continue
                yield ResourceEntry(
                    path=info.filename,
                    size=info.file_size,
                    last_modified=_zip_timestamp(info),
                    opener=partial(archive.open, info),
                    location=self.name,
                )


class DirectoryLocation(ArchiveLocation):
    """An exploded directory tree."""

    def names(self) -> List[str]:
        return sorted(
            PurePosixPath(*p.relative_to(self.path).parts).as_posix()
            for p in self.path.rglob("*")
            if p.is_file()
        )

    def has_entries(self, path: str) -> bool:
        base = self.path.joinpath(*PurePosixPath(path).parts)
        if not base.is_dir():
            return False
        return any(p.is_file() for p in base.rglob("*"))

    def contains(self, file_path: str) -> bool:
        return self.path.joinpath(*PurePosixPath(file_path).parts).is_file()

    def list_children(self, path: str) -> Set[str]:
        base = self.path.joinpath(*PurePosixPath(path).parts)
        if not base.is_dir():
            return set()
        return {
            d.name
            for d in base.iterdir()
            if d.is_dir() and any(p.is_file() for p in d.rglob("*"))
        }

    def iter_entries(self, path: str) -> Iterator[ResourceEntry]:
        base = self.path.joinpath(*PurePosixPath(path).parts)
        if not base.is_dir():
            return

        for file_path in sorted(p for p in base.rglob("*") if p.is_file()):
            try:
                stat = file_path.stat()
            except OSError as e:
                raise IOFailure(file_path, e) from e

            yield ResourceEntry(
                path=PurePosixPath(*file_path.relative_to(self.path).parts).as_posix(),
                size=stat.st_size,
                last_modified=stat.st_mtime,
                opener=partial(open, file_path, "rb"),
                location=self.name,
            )


class ResourceLocator(ABC):
    """Abstract base class for resource locators."""

    @abstractmethod
    def find_locations(self, path: str) -> List[ArchiveLocation]:
        """Find every location with at least one file under ``path``.

        Args:
            path: Directory inside the archives, ending with '/'

        Returns:
            Locations without duplicates, in search order
        """
        pass

    def refresh(self) -> None:
        """Forget anything learned about the locations since the last refresh."""
        pass

    def list_packages(self, prefix: str) -> Set[str]:
        """Names of the top-level packages under ``prefix``."""
        packages: Set[str] = set()
        for location in self.find_locations(prefix):
            packages |= location.list_children(prefix)
        return packages

    def iter_entries(
        self, prefix: str, package: Optional[str] = None
    ) -> Iterator[ResourceEntry]:
        """Lazily yield every file under ``prefix``.

        Args:
            prefix: Directory inside the archives, ending with '/'
            package: Restrict to this immediate child of ``prefix``
        """
        path = f"{prefix}{package}/" if package else prefix
        for location in self.find_locations(path):
            logger.debug("Reading %s from %s", path, location.name)
            yield from location.iter_entries(path)


class SearchPathLocator(ResourceLocator):
    """Locates resources on a list of search roots, like a classpath.

    A search root may be a jar/zip archive, an exploded directory, or a
    directory holding jar/zip archives.
    """

    def __init__(self, roots: Iterable[Union[str, Path]]):
        """Initialize locator.

        Args:
            roots: Search roots, searched in order
        """
        self.roots = [Path(os.path.expandvars(str(r))).expanduser() for r in roots]
        self._locations: Optional[List[ArchiveLocation]] = None

    def refresh(self) -> None:
        """Rescan the search roots on next use.

        Archive listings are kept between calls, so archives added, removed
        or rewritten since the last scan are only seen after a refresh.
        """
        self._locations = None

    def candidate_locations(self) -> List[ArchiveLocation]:
        """Expand the search roots into locations, without duplicates."""
        if self._locations is None:
            self._locations = self._scan_roots()
        return self._locations

    def _scan_roots(self) -> List[ArchiveLocation]:
        seen: Set[Path] = set()
        locations: List[ArchiveLocation] = []

        def add(location: ArchiveLocation) -> None:
            key = location.path.resolve()
            if key not in seen:
                seen.add(key)
                locations.append(location)

        for root in self.roots:
            if root.is_file():
                if root.suffix.lower() in ARCHIVE_SUFFIXES or zipfile.is_zipfile(root):
                    add(ZipArchiveLocation(root))
                else:
                    logger.debug("Ignoring search root %s: not an archive", root)
            elif root.is_dir():
                add(DirectoryLocation(root))
                for child in sorted(root.iterdir()):
                    if child.is_file() and child.suffix.lower() in ARCHIVE_SUFFIXES:
                        add(ZipArchiveLocation(child))
            else:
                logger.debug("Ignoring missing search root %s", root)

        return locations

    def find_locations(self, path: str) -> List[ArchiveLocation]:
        return [loc for loc in self.candidate_locations() if loc.has_entries(path)]
