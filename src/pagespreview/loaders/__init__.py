"""Archive loaders that build site snapshots."""

from pathlib import Path
from typing import Optional

from pagespreview.loaders.zip_tar_loader import ZipTarLoader, load_snapshot
from pagespreview.protocols import SnapshotLoader

# Registry of available loaders
_LOADERS: list[SnapshotLoader] = [
    ZipTarLoader(),
]


def get_loader(source: Path | str) -> Optional[SnapshotLoader]:
    """Find a loader that can handle the given source.

    Args:
        source: Path to the downloaded artifact

    Returns:
        A SnapshotLoader instance that can handle the source, or None
    """
    source_path = Path(source)
    for loader in _LOADERS:
        if loader.can_handle(source_path):
            return loader
    return None


__all__ = ["get_loader", "load_snapshot", "ZipTarLoader"]
