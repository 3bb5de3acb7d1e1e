"""Acquisition of Pages artifacts from GitHub Actions runs."""

from pagespreview.github.artifacts import (
    Artifact,
    fetch_artifact,
    get_artifact,
    github_headers,
    parse_action_url,
)

__all__ = ["Artifact", "fetch_artifact", "get_artifact", "github_headers", "parse_action_url"]
