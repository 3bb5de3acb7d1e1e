"""Utility functions for pages-preview."""

from pagespreview.utils.content_type import guess_content_type, is_text_content
from pagespreview.utils.paths import normalize_entry_path
from pagespreview.utils.progress import ProgressBar

__all__ = ["guess_content_type", "is_text_content", "normalize_entry_path", "ProgressBar"]
