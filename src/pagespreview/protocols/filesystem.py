"""Protocol for read-only site trees."""

from typing import Protocol, runtime_checkable

from pagespreview.models import DirectoryMarker


@runtime_checkable
class SiteFileSystem(Protocol):
    """Read-only access to a site tree by absolute path.

    Uses structural subtyping - no inheritance required.
    """

    def open(self, path: str) -> bytes | DirectoryMarker:
        """Return file content, or ``DIRECTORY`` for a directory path.

        Directory paths end with ``/``. Unknown paths raise
        ``EntryNotFoundError``.
        """
        ...
