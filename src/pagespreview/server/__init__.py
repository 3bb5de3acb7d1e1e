"""HTTP serving of archive snapshots."""

from pagespreview.server.app import create_preview_app, serve_snapshot
from pagespreview.server.content import serve_content
from pagespreview.server.resolver import Found, NotFound, Redirect, resolve

__all__ = [
    "create_preview_app",
    "serve_snapshot",
    "serve_content",
    "resolve",
    "Found",
    "NotFound",
    "Redirect",
]
