from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from pagespreview.errors import ArtifactFetchError
from pagespreview.github import (
    Artifact,
    fetch_artifact,
    get_artifact,
    github_headers,
    parse_action_url,
)

RUN_URL = "https://github.com/octo/site/actions/runs/12345"


def _listing(*artifacts: dict[str, object]) -> MagicMock:
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {"total_count": len(artifacts), "artifacts": list(artifacts)}
    return response


def _artifact_json(name: str, url: str, expired: bool = False) -> dict[str, object]:
    return {
        "id": 1,
        "name": name,
        "size_in_bytes": 11,
        "archive_download_url": url,
        "expired": expired,
    }


def _download(chunks: list[bytes], status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.headers = {"content-length": str(sum(len(c) for c in chunks))}
    response.iter_content.return_value = iter(chunks)
    response.__enter__.return_value = response
    return response


def test_parse_action_url() -> None:
    assert parse_action_url(RUN_URL) == ("octo", "site", "12345")
    assert parse_action_url(RUN_URL + "/job/9") == ("octo", "site", "12345")


def test_parse_action_url_rejects_other_urls() -> None:
    with pytest.raises(ArtifactFetchError, match="invalid actions URL"):
        parse_action_url("https://github.com/octo/site/pull/1")


def test_headers_include_token_when_set(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    headers = github_headers()

    assert headers["Authorization"] == "Bearer secret"
    assert headers["Accept"] == "application/vnd.github+json"
    assert headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_headers_without_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    assert "Authorization" not in github_headers()


def test_get_artifact_matches_name_and_extension() -> None:
    listing = _listing(
        _artifact_json("github-pages", "https://api/a/1/zip", expired=True),
        _artifact_json("other", "https://api/a/2/zip"),
        _artifact_json("github-pages", "https://api/a/3/zip"),
    )

    with patch("requests.get", return_value=listing) as get:
        artifact = get_artifact("octo", "site", "12345", "github-pages.zip")

    assert artifact.archive_download_url == "https://api/a/3/zip"
    assert get.call_args.args[0] == "https://api.github.com/repos/octo/site/actions/runs/12345/artifacts"


def test_get_artifact_without_match() -> None:
    listing = _listing(_artifact_json("github-pages", "https://api/a/1/tar"))

    with patch("requests.get", return_value=listing):
        with pytest.raises(ArtifactFetchError, match="no artifacts found"):
            get_artifact("octo", "site", "12345", "github-pages.zip")


def test_get_artifact_api_failure() -> None:
    with patch("requests.get", side_effect=requests.exceptions.ConnectionError("down")):
        with pytest.raises(ArtifactFetchError, match="GitHub API request failed"):
            get_artifact("octo", "site", "12345", "github-pages.zip")


def test_download_writes_all_chunks(tmp_path: Path) -> None:
    artifact = Artifact(1, "github-pages", 11, "https://api/a/1/zip", False)
    dest = tmp_path / "github-pages.zip"

    with patch("requests.get", return_value=_download([b"hello ", b"world"])):
        artifact.download(dest, show_progress=False)

    assert dest.read_bytes() == b"hello world"


def test_download_non_200(tmp_path: Path) -> None:
    artifact = Artifact(1, "github-pages", 11, "https://api/a/1/zip", False)

    with patch("requests.get", return_value=_download([], status_code=410)):
        with pytest.raises(ArtifactFetchError, match="status=410"):
            artifact.download(tmp_path / "x.zip", show_progress=False)


def test_fetch_artifact_removes_temporary_directory() -> None:
    listing = _listing(_artifact_json("github-pages", "https://api/a/3/zip"))
    download = _download([b"PK"])

    with patch("requests.get", side_effect=[listing, download]):
        with fetch_artifact(RUN_URL, show_progress=False) as path:
            assert path.name == "github-pages.zip"
            assert path.read_bytes() == b"PK"
            tmp_dir = path.parent

    assert not tmp_dir.exists()


def test_fetch_artifact_cleans_up_on_error() -> None:
    listing = _listing(_artifact_json("github-pages", "https://api/a/3/zip"))
    download = _download([b"PK"])
    seen: list[Path] = []

    with patch("requests.get", side_effect=[listing, download]):
        with pytest.raises(KeyboardInterrupt):
            with fetch_artifact(RUN_URL, show_progress=False) as path:
                seen.append(path.parent)
                raise KeyboardInterrupt

    assert seen and not seen[0].exists()


def test_download_local_write_failure(tmp_path: Path) -> None:
    artifact = Artifact(1, "github-pages", 11, "https://api/a/1/zip", False)
    dest = tmp_path / "no-such-dir" / "github-pages.zip"

    with patch("requests.get", return_value=_download([b"hello"])):
        with pytest.raises(ArtifactFetchError, match="download failed"):
            artifact.download(dest, show_progress=False)
