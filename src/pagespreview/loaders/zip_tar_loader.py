"""Loader for Pages artifacts: a tar file stored inside a zip file."""

import logging
import tarfile
import zipfile
import zlib
from pathlib import Path
from typing import IO, Iterator

from pagespreview.config import DEFAULT_INNER_NAME
from pagespreview.errors import (
    ArchiveLoadError,
    InnerArchiveReadError,
    InnerMemberNotFoundError,
    OuterArchiveError,
    TruncatedEntryError,
)
from pagespreview.models import ArchiveEntry, ArchiveSnapshot, EntryKind, build_snapshot
from pagespreview.utils.paths import normalize_entry_path

logger = logging.getLogger(__name__)

# Failures that can surface while walking the inner stream
_STREAM_ERRORS = (tarfile.TarError, zipfile.BadZipFile, zlib.error, EOFError, OSError)

# Tar reads ahead by at most a record; keep a few to look behind the last header
_TAIL_SIZE = 4 * tarfile.RECORDSIZE


class _TrackingReader:
    """Forward-only reader that counts bytes and keeps the most recent ones."""

    def __init__(self, raw: IO[bytes]):
        self.raw = raw
        self.position = 0
        self.tail = bytearray()
        self.tail_start = 0

    def read(self, size: int = -1) -> bytes:
        data = self.raw.read(size)
        self.position += len(data)
        self.tail += data
        excess = len(self.tail) - _TAIL_SIZE
        if excess > 0:
            del self.tail[:excess]
            self.tail_start += excess
        return data

    def check_clean_end(self, offset: int) -> None:
        """Verify everything from ``offset`` (where tar stopped) is zero padding.

        Raises:
            InnerArchiveReadError: On a partial header, trailing data or a
                length that is not a whole number of blocks
        """
        if any(self.tail[max(offset - self.tail_start, 0):]):
            raise InnerArchiveReadError(
                f"failed to read inner archive: unexpected data at offset {offset}"
            )

        while True:
            chunk = self.raw.read(tarfile.RECORDSIZE)
            if not chunk:
                break
            if any(chunk):
                raise InnerArchiveReadError(
                    f"failed to read inner archive: unexpected data after offset {offset}"
                )
            self.position += len(chunk)

        if self.position % tarfile.BLOCKSIZE:
            raise InnerArchiveReadError(
                f"failed to read inner archive: unexpected end of data at {self.position} bytes"
            )


class ZipTarLoader:
    """Loader for zip containers holding a single tar member."""

    source_type = "zip+tar"

    def can_handle(self, source: Path) -> bool:
        """Check if the source is an existing file."""
        return source.is_file()

    def load(self, source: Path, inner_name: str = DEFAULT_INNER_NAME) -> ArchiveSnapshot:
        """Read the whole nested archive into an immutable snapshot.

        The zip file is closed before this returns, whether loading
        succeeded or not.

        Args:
            source: Path to the outer zip file
            inner_name: Name of the tar member inside the zip

        Returns:
            The complete snapshot

        Raises:
            OuterArchiveError: The zip cannot be opened or read
            InnerMemberNotFoundError: ``inner_name`` is not in the zip
            TruncatedEntryError: A file entry is shorter than declared
            InnerArchiveReadError: The tar stream is malformed
        """
        try:
            outer = zipfile.ZipFile(source)
        except (zipfile.BadZipFile, OSError) as exc:
            raise OuterArchiveError(f"cannot open {source}: {exc}") from exc

        with outer:
            try:
                stream = outer.open(inner_name)
            except KeyError as exc:
                raise InnerMemberNotFoundError(str(source), inner_name) from exc
            except (zipfile.BadZipFile, NotImplementedError, OSError) as exc:
                raise OuterArchiveError(f"cannot read {inner_name!r} in {source}: {exc}") from exc

            with stream:
                snapshot = build_snapshot(self.iter_entries(stream))

        logger.info(
            f"Loaded {snapshot.file_count} files, {snapshot.directory_count} directories "
            f"({snapshot.total_bytes} bytes) from {source}"
        )
        return snapshot

    def iter_entries(self, stream: IO[bytes]) -> Iterator[ArchiveEntry]:
        """Yield normalized entries from a forward-only tar stream.

        The stream must end cleanly: after the last header only zero
        blocks may follow, and its length must be a whole number of tar
        blocks. A stream cut inside a header is an error, not an empty
        tail.

        Args:
            stream: Readable byte stream positioned at the start of the tar

        Yields:
            ArchiveEntry objects in archive order, payloads read in full
        """
        reader = _TrackingReader(stream)
        try:
            with tarfile.open(fileobj=reader, mode="r|") as tar:
                for member in tar:
                    yield self._read_entry(tar, member)
                reader.check_clean_end(tar.offset)
        except ArchiveLoadError:
            raise
        except _STREAM_ERRORS as exc:
            raise InnerArchiveReadError(f"failed to read inner archive: {exc}") from exc

    def _read_entry(self, tar: tarfile.TarFile, member: tarfile.TarInfo) -> ArchiveEntry:
        if member.isdir():
            return ArchiveEntry(
                kind=EntryKind.DIRECTORY,
                path=normalize_entry_path(member.name, is_dir=True),
            )

        if not member.isreg():
            # Links, devices and fifos are not part of the site
            logger.debug(f"Skipping {member.name} (type {member.type!r})")
            return ArchiveEntry(kind=EntryKind.OTHER, path=member.name)

        path = normalize_entry_path(member.name)
        fileobj = tar.extractfile(member)
        try:
            payload = fileobj.read() if fileobj is not None else b""
        except tarfile.ReadError as exc:
            raise TruncatedEntryError(path, member.size) from exc

        if len(payload) < member.size:
            raise TruncatedEntryError(path, member.size, len(payload))

        return ArchiveEntry(
            kind=EntryKind.REGULAR_FILE,
            path=path,
            size=member.size,
            payload=payload,
        )


def load_snapshot(outer: Path | str, inner_name: str = DEFAULT_INNER_NAME) -> ArchiveSnapshot:
    """Load ``inner_name`` from the zip at ``outer`` into a snapshot."""
    return ZipTarLoader().load(Path(outer), inner_name)
