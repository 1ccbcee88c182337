"""
ETag generation - deterministic content fingerprints.

Strong validators of the form ``"<hex byte length>-<base64 sha1 prefix>"``.
"""

from __future__ import annotations

import hashlib
from base64 import b64encode
from typing import Union

EMPTY_ETAG = '"0-2jmj7l5rSw0yVb/vlWAYkK/YBwk"'


def generate_etag(content: Union[bytes, bytearray, memoryview, str], weak: bool = False) -> str:
    """
    Generate a quoted ETag from response bytes.

    Args:
        content: Response body bytes (str is hashed as UTF-8)
        weak: Prefix with ``W/``

    Returns:
        Quoted ETag header value
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    content = bytes(content)

    if not content:
        tag = EMPTY_ETAG
    else:
        digest = b64encode(hashlib.sha1(content).digest()).decode("ascii")[:27]
        tag = f'"{len(content):x}-{digest}"'

    return f"W/{tag}" if weak else tag


__all__ = ["EMPTY_ETAG", "generate_etag"]
