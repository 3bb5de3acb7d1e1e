"""Host-like path resolution over a site tree."""

from dataclasses import dataclass
from typing import Union

from pagespreview.errors import EntryNotFoundError
from pagespreview.models import DirectoryMarker
from pagespreview.protocols import SiteFileSystem

INDEX_DOCUMENT = "index.html"


@dataclass(frozen=True)
class Found:
    """A file to deliver; ``serve_path`` drives content-type inference."""

    content: bytes
    serve_path: str


@dataclass(frozen=True)
class Redirect:
    """The path names a directory; the client should retry at ``location``."""

    location: str


@dataclass(frozen=True)
class NotFound:
    path: str


Resolution = Union[Found, Redirect, NotFound]


def _open_file(fs: SiteFileSystem, path: str) -> bytes | None:
    try:
        entry = fs.open(path)
    except EntryNotFoundError:
        return None
    return None if isinstance(entry, DirectoryMarker) else entry


def _is_directory(fs: SiteFileSystem, path: str) -> bool:
    try:
        return isinstance(fs.open(path), DirectoryMarker)
    except EntryNotFoundError:
        return False


def resolve(fs: SiteFileSystem, path: str) -> Resolution:
    """Resolve a request path the way a static host would.

    1. An exact file match is served as is.
    2. A path without a trailing ``/`` that names a directory redirects
       to the slashed form; anything else is not found.
    3. A path with a trailing ``/`` serves its ``index.html`` if present.

    Matching is exact; there is no case folding or fuzzy fallback.
    """
    content = _open_file(fs, path)
    if content is not None:
        return Found(content=content, serve_path=path)

    if not path.endswith("/"):
        if _is_directory(fs, path + "/"):
            return Redirect(location=path + "/")
        return NotFound(path)

    index_path = path + INDEX_DOCUMENT
    content = _open_file(fs, index_path)
    if content is not None:
        return Found(content=content, serve_path=index_path)
    return NotFound(path)
