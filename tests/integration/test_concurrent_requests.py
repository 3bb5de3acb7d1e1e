from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from starlette.testclient import TestClient

from pagespreview.loaders import load_snapshot
from pagespreview.server import create_preview_app
from tests.conftest import INDEX_HTML, SITE_CSS

EXPECTED = {
    "/": (200, INDEX_HTML),
    "/index.html": (200, INDEX_HTML),
    "/css/site.css": (200, SITE_CSS),
    "/css/": (404, None),
    "/missing.js": (404, None),
}


def test_many_concurrent_requests_see_a_complete_snapshot(scenario_artifact: Path) -> None:
    app = create_preview_app(load_snapshot(scenario_artifact))
    paths = list(EXPECTED) * 40

    def fetch(path: str) -> tuple[str, int, bytes]:
        with TestClient(app) as client:
            response = client.get(path, follow_redirects=False)
        return path, response.status_code, response.content

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(fetch, paths))

    assert len(results) == len(paths)
    for path, status, body in results:
        expected_status, expected_body = EXPECTED[path]
        assert status == expected_status, path
        if expected_body is not None:
            assert body == expected_body


def test_redirects_under_concurrency(scenario_artifact: Path) -> None:
    app = create_preview_app(load_snapshot(scenario_artifact))

    def fetch(_: int) -> tuple[int, str]:
        with TestClient(app) as client:
            response = client.get("/css", follow_redirects=False)
        return response.status_code, response.headers["location"]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = set(pool.map(fetch, range(50)))

    assert results == {(301, "/css/")}
