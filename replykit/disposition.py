"""
Content-Disposition formatting (RFC 6266 / RFC 5987).
"""

from __future__ import annotations

import ntpath
import posixpath
import re
from urllib.parse import quote

_TOKEN = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+$")
_TEXT = re.compile(r"^[\x20-\x7e\x80-\xff]+$")
_NON_LATIN1 = re.compile(r"[^\x20-\x7e\xa0-\xff]")
_HEX_ESCAPE = re.compile(r"%[0-9A-Fa-f]{2}")
_QUOTE_ESCAPE = re.compile(r'([\\"])')

# RFC 5987 attr-char beyond the characters quote() always keeps
_ATTR_SAFE = "!#$&+^`|"


def _basename(path: str) -> str:
    return posixpath.basename(ntpath.basename(path))


def _quote_string(value: str) -> str:
    return '"' + _QUOTE_ESCAPE.sub(r"\\\1", value) + '"'


def _ext_value(value: str) -> str:
    return "UTF-8''" + quote(value, safe=_ATTR_SAFE, encoding="utf-8")


def content_disposition(filename: str | None = None, type: str = "attachment") -> str:
    """
    Build a Content-Disposition header value.

    Args:
        filename: File name or path; only the basename is used
        type: Disposition type, ``attachment`` or ``inline``

    Returns:
        Header value, e.g. ``attachment; filename="report.pdf"``

    Raises:
        ValueError: If ``type`` is not a valid token
    """
    if not isinstance(type, str) or not _TOKEN.match(type):
        raise ValueError(f"invalid disposition type: {type!r}")

    disposition = type.lower()
    if not filename:
        return disposition

    name = _basename(filename)
    fallback = _NON_LATIN1.sub("?", name)
    has_fallback = fallback != name

    params = [f"filename={_quote_string(fallback)}"]
    if has_fallback or not _TEXT.match(name) or _HEX_ESCAPE.search(name):
        params.append(f"filename*={_ext_value(name)}")

    return "; ".join([disposition, *params])


__all__ = ["content_disposition"]
