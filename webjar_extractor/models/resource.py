"""Resource data models for WebJar Extractor."""

from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Cacheable(BaseModel):
    """Fingerprint of one resource at extraction time."""

    model_config = ConfigDict(frozen=True)

    size: int = Field(ge=0, description="Content length in bytes")
    last_modified: float = Field(
        description="Source modification time in seconds since the epoch"
    )


class ResourceEntry(BaseModel):
    """A single file found under the WebJars prefix of an archive location.

    Entries are produced lazily while walking a location and are only valid
    while that walk is in progress: for zip archives, ``open`` reads from the
    archive handle held open by the walk.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: str = Field(description="Archive-relative path, '/'-separated")
    size: int = Field(ge=0)
    last_modified: float
    opener: Callable[[], BinaryIO] = Field(exclude=True, repr=False)
    location: str = Field(default="", description="Archive or directory it came from")

    def open(self) -> BinaryIO:
        """Open a readable binary stream over the entry's bytes."""
        return self.opener()

    def fingerprint(self) -> Cacheable:
        """Build the cache fingerprint for this entry."""
        return Cacheable(size=self.size, last_modified=self.last_modified)


class ExtractionRequest(BaseModel):
    """Parameters of a single extraction call."""

    destination: Path
    package_name: Optional[str] = Field(
        default=None, description="Package to extract, or None for all packages"
    )
    subpath: Optional[str] = Field(
        default=None, description="Only extract entries under this package sub-path"
    )
    node_modules_only: bool = Field(default=False)

    @computed_field
    @property
    def search_path(self) -> str:
        """Path below the prefix that entries must start with ('' for all)."""
        if self.package_name is None:
            return ""
        return self.package_search_path(self.package_name)

    def package_search_path(self, package_name: str) -> str:
        """Path below the prefix for ``package_name`` and the sub-path filter."""
        parts = [p.strip("/") for p in (package_name, self.subpath) if p]
        if not parts:
            return ""
        return "/".join(parts) + "/"


class ExtractionResult(BaseModel):
    """Summary of an extraction call."""

    destination: Path
    written: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @computed_field
    @property
    def total(self) -> int:
        """Number of entries considered."""
        return len(self.written) + len(self.skipped)

    @computed_field
    @property
    def duration_seconds(self) -> Optional[float]:
        """Elapsed time of the extraction."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()
