"""Protocol definitions for extensible components."""

from pagespreview.protocols.filesystem import SiteFileSystem
from pagespreview.protocols.loader import SnapshotLoader

__all__ = ["SiteFileSystem", "SnapshotLoader"]
