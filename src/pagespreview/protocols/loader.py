"""Protocol for archive loaders."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from pagespreview.models import ArchiveSnapshot


@runtime_checkable
class SnapshotLoader(Protocol):
    """Protocol for turning an artifact on disk into a snapshot."""

    @property
    def source_type(self) -> str:
        """Return identifier for this source type (e.g., 'zip+tar')."""
        ...

    def can_handle(self, source: Path) -> bool:
        """Check if this loader can process the given source."""
        ...

    def load(self, source: Path, inner_name: str) -> ArchiveSnapshot:
        """Read the whole source and return a complete snapshot.

        Raises an ``ArchiveLoadError`` subclass on any failure; no partial
        snapshot is ever returned.
        """
        ...
