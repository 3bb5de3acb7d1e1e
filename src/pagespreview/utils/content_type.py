"""Content-type inference for served files."""

import mimetypes
from pathlib import PurePosixPath

# Types the platform tables get wrong or lack
EXTRA_TYPES = {
    ".css": "text/css; charset=utf-8",
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".mjs": "text/javascript; charset=utf-8",
    ".json": "application/json",
    ".map": "application/json",
    ".svg": "image/svg+xml",
    ".wasm": "application/wasm",
    ".webmanifest": "application/manifest+json",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".xml": "text/xml; charset=utf-8",
}

TEXT_FALLBACK = "text/plain; charset=utf-8"
BINARY_FALLBACK = "application/octet-stream"


def is_text_content(content: bytes, sample_size: int = 512) -> bool:
    """Detect whether content looks like text.

    Args:
        content: Raw file content
        sample_size: Number of bytes to sample from the start

    Returns:
        True if the sample has no null bytes and is mostly printable
    """
    sample = content[:sample_size]
    if not sample:
        return True

    # Null bytes never appear in text
    if b"\x00" in sample:
        return False

    text_chars = set(range(32, 127)) | {9, 10, 12, 13, 27}
    non_text = sum(1 for byte in sample if byte not in text_chars and byte < 128)
    return (non_text / len(sample)) <= 0.30


def guess_content_type(path: str, content: bytes) -> str:
    """Pick a Content-Type from the path's extension, sniffing as a last resort."""
    suffix = PurePosixPath(path).suffix.lower()
    if suffix in EXTRA_TYPES:
        return EXTRA_TYPES[suffix]

    guessed, _ = mimetypes.guess_type(path, strict=False)
    if guessed:
        if guessed.startswith("text/"):
            return f"{guessed}; charset=utf-8"
        return guessed

    return TEXT_FALLBACK if is_text_content(content) else BINARY_FALLBACK
