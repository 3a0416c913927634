"""WebJar extraction service.

Copies WebJar resources from archives to a destination directory, skipping
files whose source fingerprint matches the cache and which still exist on
disk. Re-running an unchanged extraction writes nothing.
"""

import logging
import shutil
import zipfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Set, Union

from ..cache import Cache, MemoryCache
from ..models.resource import ExtractionRequest, ExtractionResult, ResourceEntry
from ..utils.error_handling import IOFailure, NotFoundError
from ..utils.path_mapper import WEBJARS_PATH_PREFIX, PathMapper
from ..utils.resource_locator import ResourceLocator

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"


def is_package_name(name: str) -> bool:
    """Check that ``name`` is a single directory name below the prefix."""
    return bool(name) and name not in (".", "..") and not any(
        sep in name for sep in ("/", "\\")
    )


class WebJarExtractor:
    """Extracts WebJars found by a resource locator onto the filesystem."""

    def __init__(
        self,
        locator: ResourceLocator,
        cache: Optional[Cache] = None,
        prefix: str = WEBJARS_PATH_PREFIX,
    ):
        """Initialize extractor.

        Args:
            locator: Locator for the archives to extract from
            cache: Fingerprint cache (default: in-memory cache)
            prefix: Archive directory that holds the packages
        """
        self.locator = locator
        self.cache = cache if cache is not None else MemoryCache()
        self.mapper = PathMapper(prefix)

    @property
    def prefix(self) -> str:
        """Archive prefix, ending with '/'."""
        return self.mapper.prefix

    @contextmanager
    def cached_run(self) -> Iterator["WebJarExtractor"]:
        """Load the cache before a run and save it afterwards.

        The cache is saved even if extraction fails part way, so files that
        were already written are not rewritten on retry.
        """
        self.cache.load()
        try:
            yield self
        finally:
            self.cache.save()

    def list_webjars(self) -> List[str]:
        """List the names of all WebJars visible to the locator."""
        return sorted(self.locator.list_packages(self.prefix))

    def list_node_modules(self) -> List[str]:
        """List the WebJars laid out as node modules (with a package.json)."""
        modules = []
        for name in self.list_webjars():
            package_path = f"{self.prefix}{name}/"
            if any(
                location.contains(package_path + PACKAGE_JSON)
                for location in self.locator.find_locations(package_path)
            ):
                modules.append(name)
        return modules

    def extract_webjar_to(
        self,
        package_name: str,
        destination: Union[str, Path],
        subpath: Optional[str] = None,
    ) -> ExtractionResult:
        """Extract a single WebJar.

        Args:
            package_name: WebJar name, e.g. 'jquery'
            destination: Directory to extract into
            subpath: Only extract files under this path inside the WebJar

        Returns:
            Summary of written and skipped files

        Raises:
            NotFoundError: If no search root has the WebJar
            IOFailure: If reading or writing a file fails
        """
        request = ExtractionRequest(
            destination=Path(destination), package_name=package_name, subpath=subpath
        )
        return self.extract(request)

    def extract_all_webjars_to(self, destination: Union[str, Path]) -> ExtractionResult:
        """Extract every WebJar visible to the locator."""
        return self.extract(ExtractionRequest(destination=Path(destination)))

    def extract_all_node_modules_to(
        self, destination: Union[str, Path]
    ) -> ExtractionResult:
        """Extract only the WebJars laid out as node modules."""
        return self.extract(
            ExtractionRequest(destination=Path(destination), node_modules_only=True)
        )

    def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """Run an extraction request.

        Args:
            request: What to extract and where

        Returns:
            Summary of written and skipped files
        """
        self.locator.refresh()

        if request.package_name is not None:
            if not is_package_name(request.package_name) or not (
                self.locator.find_locations(f"{self.prefix}{request.package_name}/")
            ):
                raise NotFoundError(request.package_name)
            packages = [request.package_name]
        elif request.node_modules_only:
            packages = self.list_node_modules()
        else:
            packages = self.list_webjars()

        result = ExtractionResult(destination=request.destination)
        seen: Set[str] = set()

        for name in packages:
            search_path = self.prefix + request.package_search_path(name)
            for entry in self.locator.iter_entries(search_path):
                self._extract_entry(entry, request.destination, result, seen)

        if request.subpath and not result.total:
            logger.warning(
                "No files under %s in WebJar %s", request.subpath, request.package_name
            )

        result.completed_at = datetime.now()
        logger.info(
            "Extracted %d files to %s (%d up to date)",
            len(result.written),
            request.destination,
            len(result.skipped),
        )
        return result

    def _extract_entry(
        self,
        entry: ResourceEntry,
        destination: Path,
        result: ExtractionResult,
        seen: Set[str],
    ) -> None:
        """Copy one entry unless the cache and the filesystem say it is current."""
        key = self.mapper.to_relative(entry.path)
        if key in seen:
            logger.debug("Skipping %s from %s: already extracted", key, entry.location)
            return
        seen.add(key)

        target = self.mapper.to_destination(destination, entry.path)
        fingerprint = entry.fingerprint()

        if self.cache.is_up_to_date(key, fingerprint) and target.is_file():
            logger.debug("Up to date: %s", key)
            result.skipped.append(key)
            return

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with entry.open() as source, open(target, "wb") as out:
                shutil.copyfileobj(source, out)
        except (OSError, zipfile.BadZipFile) as e:
            raise IOFailure(target, e) from e

        self.cache.put(key, fingerprint)
        result.written.append(key)
        logger.debug("Extracted %s to %s", key, target)
