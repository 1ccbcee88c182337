"""
MIME lookup - extension/alias to media type, and default charsets.

``lookup`` accepts a file path, a bare extension, a short alias or a full
MIME string. Extension lookup is backed by the stdlib ``mimetypes`` table.
"""

from __future__ import annotations

import mimetypes
import re
from typing import Optional

DEFAULT_TYPE = "application/octet-stream"

# Short names used when classifying response bodies
ALIASES = {
    "html": "text/html",
    "text": "text/plain",
    "txt": "text/plain",
    "json": "application/json",
    "js": "application/javascript",
    "bin": "application/octet-stream",
    "xml": "application/xml",
    "css": "text/css",
    "csv": "text/csv",
}

_CHARSET_TYPES = re.compile(r"^text/|^application/(javascript|json)")

# "type/subtype" with a registered top-level type, e.g. "application/vnd.ms-excel"
_MIME_STRING = re.compile(
    r"^(application|audio|font|image|message|model|multipart|text|video)/[\w.+-]+$",
    re.IGNORECASE,
)


def lookup(name: str, fallback: Optional[str] = None) -> Optional[str]:
    """
    Resolve a media type.

    Args:
        name: File path, extension (``.txt``/``txt``), alias or MIME string
        fallback: Returned when nothing matches

    Returns:
        MIME type string, or ``fallback``
    """
    if not name:
        return fallback
    if _MIME_STRING.match(name):
        return name.lower()
    candidate = name.rsplit("/", 1)[-1].rsplit("\\", 1)[-1]
    ext = candidate.rsplit(".", 1)[-1].lower()
    if ext in ALIASES:
        return ALIASES[ext]
    guessed, _ = mimetypes.guess_type(f"file.{ext}", strict=False)
    return guessed or fallback


def charset(mime_type: Optional[str], fallback: Optional[str] = None) -> Optional[str]:
    """
    Default charset for a base media type.

    ``text/*``, ``application/javascript`` and ``application/json`` are
    UTF-8; everything else has no default.
    """
    if not mime_type:
        return fallback
    base = mime_type.split(";", 1)[0].strip().lower()
    return "UTF-8" if _CHARSET_TYPES.match(base) else fallback


__all__ = ["DEFAULT_TYPE", "ALIASES", "lookup", "charset"]
