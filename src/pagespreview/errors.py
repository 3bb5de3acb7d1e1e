"""Exception hierarchy for pages-preview."""

from typing import Optional


class PreviewError(Exception):
    """Base class for every error raised by pages-preview."""


class ConfigError(PreviewError):
    """Invalid startup configuration (listen address, names)."""


class ArchiveLoadError(PreviewError):
    """The nested archive could not be turned into a snapshot."""


class OuterArchiveError(ArchiveLoadError):
    """The outer zip container is unreadable or malformed."""


class InnerMemberNotFoundError(ArchiveLoadError):
    """The named inner archive is not a member of the outer container."""

    def __init__(self, outer: str, member: str):
        super().__init__(f"{member!r} not found in {outer}")
        self.outer = outer
        self.member = member


class TruncatedEntryError(ArchiveLoadError):
    """A regular file entry holds fewer bytes than its header declares."""

    def __init__(self, path: str, declared: int, actual: Optional[int] = None):
        got = "fewer" if actual is None else str(actual)
        super().__init__(f"truncated entry {path!r}: expected {declared} bytes, got {got}")
        self.path = path
        self.declared = declared
        self.actual = actual


class InnerArchiveReadError(ArchiveLoadError):
    """The inner tar stream failed before a clean end-of-archive."""


class EntryNotFoundError(PreviewError, LookupError):
    """No file or directory exists at the requested path."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path


class ArtifactFetchError(PreviewError):
    """The workflow artifact could not be located or downloaded."""
