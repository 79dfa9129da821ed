"""Request body parsing — URL-encoded forms, multipart uploads, and JSON.

The body is parsed once, when the ``Request`` is built, into two
plain structures: ``parsed_body`` (field name -> value) and ``files``
(a list of :class:`UploadedFile`). Repeated fields become lists.

URL-encoded forms use stdlib ``urllib.parse``; multipart bodies use
``python-multipart``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

from python_multipart.multipart import MultipartParser, parse_options_header

logger = logging.getLogger("larvatus.server")

FORM_URLENCODED = "application/x-www-form-urlencoded"
FORM_MULTIPART = "multipart/form-data"


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """A file received in a ``multipart/form-data`` body.

    Content is held in memory; suitable for typical web uploads.
    """

    field_name: str
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def save(self, path: str | Path) -> None:
        """Write the file content to *path*. Parent directories must exist."""
        Path(path).write_bytes(self.content)

    def __repr__(self) -> str:
        return f"UploadedFile({self.field_name!r}, {self.filename!r}, {self.size} bytes)"


def media_type(content_type: str | None) -> str:
    """``"text/html; charset=utf-8"`` -> ``"text/html"``."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def parse_body(
    body: bytes,
    content_type: str | None,
) -> tuple[dict[str, Any], tuple[UploadedFile, ...]]:
    """Parse *body* according to *content_type*.

    Returns ``(parsed_body, files)``. Unknown content types and
    malformed bodies yield ``({}, ())``; the raw bytes stay available
    on the request.
    """
    if not body:
        return {}, ()

    kind = media_type(content_type)
    try:
        if kind == FORM_URLENCODED:
            return _flatten(parse_qs(body.decode("utf-8"), keep_blank_values=True)), ()
        if kind == FORM_MULTIPART:
            return _parse_multipart(body, content_type or "")
        if kind == "application/json" or kind.endswith("+json"):
            decoded = json.loads(body)
            return (decoded if isinstance(decoded, dict) else {}), ()
    except (ValueError, UnicodeDecodeError) as exc:
        logger.debug("Ignoring malformed %s body: %s", kind, exc)
    return {}, ()


def _flatten(data: dict[str, list[str]]) -> dict[str, Any]:
    """Single values become ``str``; repeated fields stay ``list[str]``."""
    return {key: values[0] if len(values) == 1 else values for key, values in data.items()}


def _parse_multipart(
    body: bytes,
    content_type: str,
) -> tuple[dict[str, Any], tuple[UploadedFile, ...]]:
    """Parse multipart form data using python-multipart."""
    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    fields: dict[str, list[str]] = {}
    files: list[UploadedFile] = []

    # Per-part state
    headers: dict[str, str] = {}
    header_field = bytearray()
    header_value = bytearray()
    data = bytearray()

    def on_part_begin() -> None:
        headers.clear()
        data.clear()

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        header_field.extend(chunk[start:end])

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        header_value.extend(chunk[start:end])

    def on_header_end() -> None:
        headers[header_field.decode("latin-1").lower()] = header_value.decode("latin-1")
        header_field.clear()
        header_value.clear()

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        data.extend(chunk[start:end])

    def on_part_end() -> None:
        _, params = parse_options_header(headers.get("content-disposition", "").encode("latin-1"))
        name = params.get(b"name")
        if name is None:
            return
        field_name = name.decode("utf-8")
        filename = params.get(b"filename")
        if filename is not None:
            files.append(
                UploadedFile(
                    field_name=field_name,
                    filename=filename.decode("utf-8"),
                    content_type=headers.get("content-type", "application/octet-stream"),
                    content=bytes(data),
                )
            )
        else:
            fields.setdefault(field_name, []).append(data.decode("utf-8", errors="replace"))

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return _flatten(fields), tuple(files)
