"""
Vary header merging.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Union

_FIELD_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def _parse(header: str) -> List[str]:
    return [part.strip() for part in header.split(",") if part.strip()]


def merge_vary(existing: Optional[str], field: Union[str, Iterable[str]]) -> str:
    """
    Merge ``field`` into an existing Vary header value.

    Names are compared case-insensitively and kept in first-seen order;
    ``*`` absorbs every other field.

    Raises:
        ValueError: If a field is not a valid header name
    """
    fields = _parse(field) if isinstance(field, str) else [f.strip() for f in field]
    for name in fields:
        if not _FIELD_NAME.match(name):
            raise ValueError(f"field argument contains an invalid header name: {name!r}")

    value = existing or ""
    if value == "*":
        return value

    merged = _parse(value)
    seen = {name.lower() for name in merged}

    if "*" in fields or "*" in merged:
        return "*"

    for name in fields:
        key = name.lower()
        if key not in seen:
            merged.append(name)
            seen.add(key)

    return ", ".join(merged)


__all__ = ["merge_vary"]
