"""Delivery of in-memory content with conditional and range support."""

import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Optional

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from pagespreview.utils.content_type import guess_content_type

# Byte offsets are plain ASCII digits
_OFFSET_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class ByteRange:
    """Inclusive-start, exclusive-end slice of the content."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def content_range(self, size: int) -> str:
        return f"bytes {self.start}-{self.end - 1}/{size}"


class InvalidRangeError(ValueError):
    """The Range header is malformed."""


class NoOverlapError(ValueError):
    """Every requested range starts beyond the end of the content."""


def _parse_offset(text: str, part: str) -> int:
    if _OFFSET_RE.fullmatch(text) is None:
        raise InvalidRangeError(part)
    return int(text)


def parse_range(header: str, size: int) -> list[ByteRange]:
    """Parse a ``Range`` header against content of ``size`` bytes.

    Ranges starting past the end are dropped; if that leaves nothing,
    ``NoOverlapError`` is raised. An empty header yields no ranges.
    """
    if not header:
        return []
    if not header.startswith("bytes="):
        raise InvalidRangeError(header)

    ranges: list[ByteRange] = []
    no_overlap = False
    for part in header[len("bytes="):].split(","):
        part = part.strip()
        if not part:
            continue
        start_text, sep, end_text = part.partition("-")
        start_text, end_text = start_text.strip(), end_text.strip()
        if not sep:
            raise InvalidRangeError(part)

        if not start_text:
            # Suffix range: the last N bytes
            suffix = min(_parse_offset(end_text, part), size)
            ranges.append(ByteRange(start=size - suffix, length=suffix))
            continue

        start = _parse_offset(start_text, part)
        if start >= size:
            no_overlap = True
            continue

        if not end_text:
            ranges.append(ByteRange(start=start, length=size - start))
            continue
        end = _parse_offset(end_text, part)
        if start > end:
            raise InvalidRangeError(part)
        end = min(end, size - 1)
        ranges.append(ByteRange(start=start, length=end - start + 1))

    if no_overlap and not ranges:
        raise NoOverlapError(header)
    return ranges


def _parse_http_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _range_applies(request: Request, modtime: datetime) -> bool:
    if_range = request.headers.get("if-range")
    if not if_range:
        return True
    if if_range.startswith(('"', "W/")):
        # No entity tags are issued, so none can match
        return False
    return _parse_http_date(if_range) == modtime


def _multipart_body(
    content: bytes, ranges: list[ByteRange], content_type: str, boundary: str
) -> bytes:
    size = len(content)
    parts = []
    for byte_range in ranges:
        head = (
            f"--{boundary}\r\n"
            f"Content-Type: {content_type}\r\n"
            f"Content-Range: {byte_range.content_range(size)}\r\n"
            "\r\n"
        )
        parts.append(head.encode("latin-1"))
        parts.append(content[byte_range.start:byte_range.end])
        parts.append(b"\r\n")
    parts.append(f"--{boundary}--\r\n".encode("latin-1"))
    return b"".join(parts)


def serve_content(request: Request, name: str, content: bytes, modtime: datetime) -> Response:
    """Build the response for ``content`` served under the path ``name``.

    Honors If-Unmodified-Since, If-Modified-Since, If-Range and Range the
    way a static file server does. HEAD requests get headers only.

    Args:
        request: The incoming request
        name: Path used for content-type inference
        content: Bytes to deliver, never modified
        modtime: Last-Modified time; truncated to whole seconds

    Returns:
        A 200, 206, 304, 412 or 416 response
    """
    modtime = modtime.astimezone(timezone.utc).replace(microsecond=0)
    last_modified = format_datetime(modtime, usegmt=True)
    method = request.method.upper()

    unmodified_since = _parse_http_date(request.headers.get("if-unmodified-since"))
    if unmodified_since is not None and modtime > unmodified_since:
        return Response(status_code=412, headers={"Last-Modified": last_modified})

    if method in ("GET", "HEAD"):
        modified_since = _parse_http_date(request.headers.get("if-modified-since"))
        if modified_since is not None and modtime <= modified_since:
            return Response(status_code=304, headers={"Last-Modified": last_modified})

    size = len(content)
    content_type = guess_content_type(name, content)
    headers = {
        "Accept-Ranges": "bytes",
        "Last-Modified": last_modified,
    }

    ranges: list[ByteRange] = []
    range_header = request.headers.get("range", "")
    if range_header and method in ("GET", "HEAD") and _range_applies(request, modtime):
        try:
            ranges = parse_range(range_header, size)
        except NoOverlapError:
            headers["Content-Range"] = f"bytes */{size}"
            return PlainTextResponse(
                "invalid range: failed to overlap\n", status_code=416, headers=headers
            )
        except InvalidRangeError:
            return PlainTextResponse("invalid range\n", status_code=416, headers=headers)

    if sum(r.length for r in ranges) > size:
        # Asking for more than the whole thing; send the whole thing
        ranges = []

    status_code = 200
    body = content
    if len(ranges) == 1:
        status_code = 206
        byte_range = ranges[0]
        headers["Content-Range"] = byte_range.content_range(size)
        body = content[byte_range.start:byte_range.end]
    elif len(ranges) > 1:
        status_code = 206
        boundary = secrets.token_hex(16)
        body = _multipart_body(content, ranges, content_type, boundary)
        content_type = f"multipart/byteranges; boundary={boundary}"

    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    if method == "HEAD":
        body = b""
    return Response(content=body, status_code=status_code, headers=headers)
