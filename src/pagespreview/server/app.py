"""ASGI application serving an archive snapshot."""

import logging
from datetime import datetime, timezone

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response
from starlette.routing import Route

from pagespreview.config import PreviewConfig
from pagespreview.models import ArchiveSnapshot
from pagespreview.server.content import serve_content
from pagespreview.server.resolver import Found, Redirect, resolve

logger = logging.getLogger(__name__)


def create_preview_app(snapshot: ArchiveSnapshot) -> Starlette:
    """Create an ASGI app for a fully loaded snapshot.

    Design: 1 process = 1 snapshot. The snapshot is never modified after
    this call, so request handlers share it without locking.

    Args:
        snapshot: The loaded site tree

    Returns:
        Configured Starlette application
    """

    async def serve_path(request: Request) -> Response:
        path = request.scope["path"]
        result = resolve(snapshot, path)

        if isinstance(result, Found):
            return serve_content(
                request,
                result.serve_path,
                result.content,
                modtime=datetime.now(timezone.utc),
            )

        if isinstance(result, Redirect):
            location = result.location
            if request.url.query:
                location += "?" + request.url.query
            return RedirectResponse(location, status_code=301)

        return PlainTextResponse("404 page not found\n", status_code=404)

    routes = [Route("/{path:path}", serve_path, methods=["GET", "HEAD"])]
    app = Starlette(routes=routes)
    app.state.snapshot = snapshot
    return app


def serve_snapshot(app: Starlette, config: PreviewConfig) -> None:
    """Serve ``app`` until interrupted.

    uvicorn handles requests concurrently and shuts down gracefully on
    SIGINT/SIGTERM.
    """
    logger.info(f"hosting {config.outer_path} now. please open {config.url} with your browser")
    uvicorn.run(app, host=config.host, port=config.port, log_level="info")
