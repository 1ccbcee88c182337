"""
HTTP status names.

Lookup tables built from ``http.HTTPStatus``: reason phrases by code, and the
snake_case shortcut names (``too_many_requests`` -> 429) exposed as
ResponseWriter methods. Informational (1xx) statuses carry no body and get
no shortcut.
"""

from __future__ import annotations

import keyword
from http import HTTPStatus
from typing import Dict

STATUS_NAMES: Dict[int, str] = {status.value: status.phrase for status in HTTPStatus}

SHORTCUTS: Dict[str, int] = {
    status.name.lower(): status.value
    for status in HTTPStatus
    if status.value >= 200 and not keyword.iskeyword(status.name.lower())
}

NO_BODY_STATUSES = frozenset({204, 304})


def reason_phrase(code: int) -> str:
    """Reason phrase for ``code``, empty when unknown."""
    return STATUS_NAMES.get(code, "")


__all__ = ["STATUS_NAMES", "SHORTCUTS", "NO_BODY_STATUSES", "reason_phrase"]
