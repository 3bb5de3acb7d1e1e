from __future__ import annotations

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Sequence

import pytest

# (name, kind, payload) where kind is "file", "dir", "symlink" or "hardlink"
TarSpec = Sequence[tuple[str, str, bytes]]

INDEX_HTML = b"<h1>hi</h1>\n"
SITE_CSS = b"0123456789abcdefghijklmnopqrstuvwxyzABCD"

SCENARIO_ENTRIES: TarSpec = [
    ("./", "dir", b""),
    ("./css/", "dir", b""),
    ("./index.html", "file", INDEX_HTML),
    ("./css/site.css", "file", SITE_CSS),
]


def build_tar(entries: TarSpec, mode: str = "w") -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=mode) as tar:
        for name, kind, payload in entries:
            info = tarfile.TarInfo(name=name)
            if kind == "dir":
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            elif kind == "symlink":
                info.type = tarfile.SYMTYPE
                info.linkname = payload.decode()
                tar.addfile(info)
            elif kind == "hardlink":
                info.type = tarfile.LNKTYPE
                info.linkname = payload.decode()
                tar.addfile(info)
            else:
                info.size = len(payload)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(payload))
    return buffer.getvalue()


def build_zip(path: Path, members: dict[str, bytes]) -> Path:
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return path


@pytest.fixture
def make_artifact(tmp_path: Path) -> Callable[..., Path]:
    def factory(
        entries: TarSpec = SCENARIO_ENTRIES,
        inner_name: str = "artifact.tar",
        tar_bytes: bytes | None = None,
    ) -> Path:
        data = build_tar(entries) if tar_bytes is None else tar_bytes
        return build_zip(tmp_path / "github-pages.zip", {inner_name: data})

    return factory


@pytest.fixture
def scenario_artifact(make_artifact: Callable[..., Path]) -> Path:
    return make_artifact()
