"""Data models for pages-preview."""

from pagespreview.models.snapshot import (
    DIRECTORY,
    ArchiveEntry,
    ArchiveSnapshot,
    DirectoryMarker,
    EntryKind,
    build_snapshot,
)

__all__ = [
    "ArchiveEntry",
    "ArchiveSnapshot",
    "DIRECTORY",
    "DirectoryMarker",
    "EntryKind",
    "build_snapshot",
]
