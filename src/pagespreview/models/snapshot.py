"""In-memory snapshot of a site tree and the entries it is built from."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from pagespreview.errors import EntryNotFoundError


class EntryKind(Enum):
    """Kind of a record read from the inner archive."""

    REGULAR_FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


class DirectoryMarker(Enum):
    """Returned by ``open`` when the path names a directory."""

    DIRECTORY = "directory"


DIRECTORY = DirectoryMarker.DIRECTORY


@dataclass(frozen=True)
class ArchiveEntry:
    """One record from the inner archive, already normalized."""

    kind: EntryKind
    path: str
    size: int = 0
    payload: Optional[bytes] = None  # Only set for regular files


@dataclass(frozen=True)
class ArchiveSnapshot:
    """Immutable index of every directory and file in a loaded archive.

    Directory keys end with ``/``; file keys never do, so the two
    namespaces cannot collide.
    """

    directories: frozenset[str] = frozenset()
    files: Mapping[str, bytes] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        # Detach from the caller's containers
        object.__setattr__(self, "directories", frozenset(self.directories))
        object.__setattr__(self, "files", MappingProxyType(dict(self.files)))

    def open(self, path: str) -> bytes | DirectoryMarker:
        """Look up a path.

        Args:
            path: Normalized path starting with ``/``

        Returns:
            The file content, or ``DIRECTORY`` for a directory key

        Raises:
            EntryNotFoundError: If neither a file nor a directory matches
        """
        content = self.files.get(path)
        if content is not None:
            return content
        if path in self.directories:
            return DIRECTORY
        raise EntryNotFoundError(path)

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def directory_count(self) -> int:
        return len(self.directories)

    @property
    def total_bytes(self) -> int:
        return sum(len(content) for content in self.files.values())

    def iter_files(self) -> Iterator[tuple[str, int]]:
        """Yield ``(path, size)`` for every file in path order."""
        for path in sorted(self.files):
            yield path, len(self.files[path])


def build_snapshot(entries: Iterable[ArchiveEntry]) -> ArchiveSnapshot:
    """Index entries into a snapshot; later entries replace earlier ones."""
    directories: set[str] = set()
    files: dict[str, bytes] = {}

    for entry in entries:
        if entry.kind is EntryKind.REGULAR_FILE:
            files[entry.path] = entry.payload or b""
        elif entry.kind is EntryKind.DIRECTORY:
            directories.add(entry.path)

    return ArchiveSnapshot(directories=frozenset(directories), files=files)
