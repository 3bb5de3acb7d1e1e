from __future__ import annotations

import pytest

from pagespreview.utils.paths import normalize_entry_path


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("./assets/app.js", "/assets/app.js"),
        ("assets/app.js", "/assets/app.js"),
        ("/assets/app.js", "/assets/app.js"),
        ("./index.html", "/index.html"),
        (".well-known/security.txt", "/.well-known/security.txt"),
        ("./.nojekyll", "/.nojekyll"),
    ],
)
def test_file_names_become_absolute_keys(name: str, expected: str) -> None:
    assert normalize_entry_path(name) == expected


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        (".", "/"),
        ("./", "/"),
        ("./css", "/css/"),
        ("./css/", "/css/"),
        ("css", "/css/"),
        ("", "/"),
    ],
)
def test_directory_names_end_with_separator(name: str, expected: str) -> None:
    assert normalize_entry_path(name, is_dir=True) == expected


def test_dot_prefixed_and_bare_names_share_a_key() -> None:
    assert normalize_entry_path("./a/b.txt") == normalize_entry_path("a/b.txt") == "/a/b.txt"


def test_normalization_is_idempotent() -> None:
    once = normalize_entry_path("./a/b.txt")
    assert normalize_entry_path(once) == once
    directory = normalize_entry_path("./a", is_dir=True)
    assert normalize_entry_path(directory, is_dir=True) == directory
