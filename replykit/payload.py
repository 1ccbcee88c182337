"""
Body payloads - classification of response bodies.

A body is classified once, on entry to ``send``, into one variant:

- TextPayload: ``str``
- ScalarPayload: ``int``/``float``/``bool`` (stringified)
- BinaryPayload: ``bytes``/``bytearray``/``memoryview``
- JsonPayload: anything else, encoded with orjson

Each variant knows its default MIME alias and how to produce its bytes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Union

import orjson


def _json_default_serializer(o):
    """Default JSON serializer for non-standard types."""
    if isinstance(o, (set, frozenset, tuple)):
        return list(o)
    if hasattr(o, "isoformat"):
        return o.isoformat()
    raise TypeError(f"Type is not JSON serializable: {type(o).__name__}")


def encode_json(obj: Any) -> bytes:
    """
    Compact JSON bytes; non-str dict keys are stringified.

    Raises ``TypeError`` (``orjson.JSONEncodeError``) for unsupported values,
    circular structures and integers outside the 64-bit range.
    """
    return orjson.dumps(obj, default=_json_default_serializer, option=orjson.OPT_NON_STR_KEYS)


def _format_number(value: float) -> str:
    """Number text as browsers print it: ``1.0`` is ``1``, ``nan`` is ``NaN``."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class TextPayload:
    text: str
    alias: str = "text"

    def encode(self) -> bytes:
        return self.text.encode("utf-8")


@dataclass(frozen=True)
class ScalarPayload:
    value: Union[int, float, bool]
    alias: str = "text"

    def encode(self) -> bytes:
        if isinstance(self.value, bool):
            return b"true" if self.value else b"false"
        if isinstance(self.value, float):
            return _format_number(self.value).encode("utf-8")
        return str(self.value).encode("utf-8")


@dataclass(frozen=True)
class BinaryPayload:
    data: bytes
    alias: str = "bin"

    def encode(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class JsonPayload:
    value: Any
    alias: str = "json"

    def encode(self) -> bytes:
        return encode_json(self.value)


Payload = Union[TextPayload, ScalarPayload, BinaryPayload, JsonPayload]


def classify(body: Any, string_type: str = "text") -> Payload:
    """
    Classify a body into its payload variant.

    ``None`` becomes an empty text payload.
    """
    if body is None:
        return TextPayload("", alias=string_type)
    if isinstance(body, str):
        return TextPayload(body, alias=string_type)
    if isinstance(body, (bool, int, float)):
        return ScalarPayload(body)
    if isinstance(body, (bytes, bytearray, memoryview)):
        return BinaryPayload(bytes(body))
    return JsonPayload(body)


__all__ = [
    "TextPayload",
    "ScalarPayload",
    "BinaryPayload",
    "JsonPayload",
    "Payload",
    "classify",
    "encode_json",
]
