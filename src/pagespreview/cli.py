"""CLI entry point for pages-preview."""

import argparse
import logging
import sys
from pathlib import Path

from pagespreview.config import (
    DEFAULT_ADDR,
    DEFAULT_INNER_NAME,
    DEFAULT_OUTER_NAME,
    PreviewConfig,
)
from pagespreview.errors import PreviewError
from pagespreview.loaders import get_loader
from pagespreview.models import ArchiveSnapshot

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def load(config: PreviewConfig) -> ArchiveSnapshot:
    """Load the configured archive, or exit if nothing can read it."""
    loader = get_loader(config.outer_path)
    if loader is None:
        logger.error(f"Cannot process: {config.outer_path}")
        logger.error("Expected a zip file containing a tar archive")
        sys.exit(1)
    return loader.load(config.outer_path, config.inner_name)


def serve(config: PreviewConfig) -> None:
    """Load the archive in full, then serve it until interrupted.

    Args:
        config: Startup configuration
    """
    # Import here to avoid loading the web stack for `info`
    from pagespreview.server import create_preview_app, serve_snapshot

    snapshot = load(config)
    app = create_preview_app(snapshot)
    serve_snapshot(app, config)


def run(action_url: str, addr: str, outer_name: str, inner_name: str) -> None:
    """Download a workflow run's artifact and serve it (convenience command).

    Args:
        action_url: GitHub Actions run URL
        addr: Listen address
        outer_name: Artifact file name
        inner_name: Tar member inside the artifact
    """
    from pagespreview.github import fetch_artifact

    # Validate the address before spending time on the download
    PreviewConfig.from_values(outer_name, addr, inner_name)
    with fetch_artifact(action_url, outer_name) as outer_path:
        serve(PreviewConfig.from_values(outer_path, addr, inner_name))


def info(config: PreviewConfig) -> None:
    """Show what an artifact contains.

    Args:
        config: Startup configuration; only the archive names are used
    """
    snapshot = load(config)

    print(f"Artifact: {config.outer_path.name} ({config.inner_name})")
    print(f"  Size: {snapshot.total_bytes / 1024:.1f} KB")
    print(f"")
    print(f"Contents:")
    print(f"  Directories: {snapshot.directory_count}")
    print(f"  Files: {snapshot.file_count}")
    print(f"")
    for path, size in snapshot.iter_files():
        print(f"  {path:<60} {size:>10}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pages-preview",
        description="Preview a GitHub Pages artifact locally",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve a downloaded Pages artifact",
    )
    serve_parser.add_argument(
        "outer",
        nargs="?",
        default=DEFAULT_OUTER_NAME,
        help=f"Path to the artifact zip (default: {DEFAULT_OUTER_NAME})",
    )
    serve_parser.add_argument(
        "--addr",
        default=DEFAULT_ADDR,
        help=f"HTTP server listen address (default: {DEFAULT_ADDR})",
    )
    serve_parser.add_argument(
        "--inner",
        default=DEFAULT_INNER_NAME,
        help=f"Name of inner archive (default: {DEFAULT_INNER_NAME})",
    )

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Download the artifact of a workflow run and serve it",
    )
    run_parser.add_argument(
        "action_url",
        help="https://github.com/<owner>/<repo>/actions/runs/<id>",
    )
    run_parser.add_argument(
        "--addr",
        default=DEFAULT_ADDR,
        help=f"HTTP server listen address (default: {DEFAULT_ADDR})",
    )
    run_parser.add_argument(
        "--outer",
        default=DEFAULT_OUTER_NAME,
        help=f"Name of outer archive (default: {DEFAULT_OUTER_NAME})",
    )
    run_parser.add_argument(
        "--inner",
        default=DEFAULT_INNER_NAME,
        help=f"Name of inner archive (default: {DEFAULT_INNER_NAME})",
    )

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show the contents of a Pages artifact",
    )
    info_parser.add_argument(
        "outer",
        nargs="?",
        default=DEFAULT_OUTER_NAME,
        help=f"Path to the artifact zip (default: {DEFAULT_OUTER_NAME})",
    )
    info_parser.add_argument(
        "--inner",
        default=DEFAULT_INNER_NAME,
        help=f"Name of inner archive (default: {DEFAULT_INNER_NAME})",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        if args.command == "serve":
            serve(PreviewConfig.from_values(Path(args.outer), args.addr, args.inner))
        elif args.command == "run":
            run(args.action_url, args.addr, args.outer, args.inner)
        elif args.command == "info":
            info(PreviewConfig.from_values(Path(args.outer), inner_name=args.inner))
    except PreviewError as exc:
        logger.error(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
