"""GitHub Actions artifact lookup and download."""

import logging
import os
import re
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Iterator

import requests

from pagespreview import __version__
from pagespreview.config import DEFAULT_OUTER_NAME
from pagespreview.errors import ArtifactFetchError
from pagespreview.utils.progress import ProgressBar

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
USER_AGENT = f"pages-preview/{__version__}"
DEFAULT_TIMEOUT = 30
CHUNK_SIZE = 64 * 1024

ACTION_URL_RE = re.compile(r"https://github\.com/([^/]+)/([^/]+)/actions/runs/(\d+)")


def github_headers() -> dict[str, str]:
    """Headers for the GitHub REST API, with a token from $GITHUB_TOKEN if set."""
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": USER_AGENT,
    }
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def parse_action_url(url: str) -> tuple[str, str, str]:
    """Extract ``(owner, repo, run_id)`` from a workflow run URL."""
    match = ACTION_URL_RE.search(url)
    if match is None:
        raise ArtifactFetchError(f"invalid actions URL: {url}")
    owner, repo, run_id = match.groups()
    return owner, repo, run_id


@dataclass(frozen=True)
class Artifact:
    """One artifact entry from a workflow run."""

    id: int
    name: str
    size_in_bytes: int
    archive_download_url: str
    expired: bool

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Artifact":
        return cls(
            id=int(data.get("id", 0)),
            name=str(data.get("name", "")),
            size_in_bytes=int(data.get("size_in_bytes", 0)),
            archive_download_url=str(data.get("archive_download_url", "")),
            expired=bool(data.get("expired", False)),
        )

    def download(self, dest: Path, show_progress: bool = True) -> None:
        """Stream the artifact archive to ``dest``.

        Args:
            dest: File to create
            show_progress: Draw a progress bar on stderr

        Raises:
            ArtifactFetchError: On any HTTP or network failure
        """
        try:
            with requests.get(
                self.archive_download_url,
                headers=github_headers(),
                stream=True,
                timeout=DEFAULT_TIMEOUT,
            ) as response:
                if response.status_code != 200:
                    raise ArtifactFetchError(
                        f"download request failed: status={response.status_code}"
                    )

                total = int(response.headers.get("content-length", 0) or self.size_in_bytes)
                progress = ProgressBar(f"downloading {self.name}", total if show_progress else 0)
                with open(dest, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
                            progress.proceed(len(chunk))
        except (requests.exceptions.RequestException, OSError) as exc:
            raise ArtifactFetchError(f"download failed: {exc}") from exc


def get_artifact(owner: str, repo: str, run_id: str, artifact_name: str) -> Artifact:
    """Find a live artifact of a run by its file name.

    ``github-pages.zip`` matches an artifact named ``github-pages`` whose
    download URL ends in ``/zip``.

    Raises:
        ArtifactFetchError: If the API call fails or nothing matches
    """
    suffix = PurePosixPath(artifact_name).suffix
    name = artifact_name[: -len(suffix)] if suffix else artifact_name
    url_suffix = "/" + suffix.lstrip(".") if suffix else ""

    url = f"{API_ROOT}/repos/{owner}/{repo}/actions/runs/{run_id}/artifacts"
    try:
        response = requests.get(url, headers=github_headers(), timeout=DEFAULT_TIMEOUT)
        response.raise_for_status()
        listing = response.json()
    except requests.exceptions.RequestException as exc:
        raise ArtifactFetchError(f"GitHub API request failed: {exc}") from exc
    except ValueError as exc:
        raise ArtifactFetchError(f"unexpected GitHub API response: {exc}") from exc

    for item in listing.get("artifacts", []):
        artifact = Artifact.from_json(item)
        if (
            not artifact.expired
            and artifact.name == name
            and artifact.archive_download_url.endswith(url_suffix)
        ):
            return artifact

    raise ArtifactFetchError("no artifacts found")


@contextmanager
def fetch_artifact(
    action_url: str,
    artifact_name: str = DEFAULT_OUTER_NAME,
    show_progress: bool = True,
) -> Iterator[Path]:
    """Download a run's artifact into a temporary directory.

    The directory and everything in it is removed when the context exits,
    including on KeyboardInterrupt.

    Args:
        action_url: ``https://github.com/<owner>/<repo>/actions/runs/<id>``
        artifact_name: Artifact file name, e.g. ``github-pages.zip``
        show_progress: Draw a progress bar while downloading

    Yields:
        Path to the downloaded archive
    """
    owner, repo, run_id = parse_action_url(action_url)
    artifact = get_artifact(owner, repo, run_id, artifact_name)

    tmp_dir = Path(tempfile.mkdtemp(prefix="pages-preview"))
    try:
        dest = tmp_dir / artifact_name
        logger.info(f"downloading an artifact to: {dest}")
        artifact.download(dest, show_progress=show_progress)
        yield dest
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)
