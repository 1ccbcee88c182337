"""
Core data structures for replykit response channels.

Provides:
- HeaderMap: Case-insensitive, mutable response header store
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple, Union

HeaderValue = Union[str, List[str]]


# ============================================================================
# HeaderMap
# ============================================================================

class HeaderMap:
    """
    Case-insensitive header store with original-case preservation.

    Each name maps to a single string or a list of strings. Setting a
    name always replaces the previous value.
    """

    __slots__ = ("_data",)

    def __init__(self, items: Optional[Dict[str, HeaderValue]] = None):
        # lowercase name -> (original name, value)
        self._data: Dict[str, Tuple[str, HeaderValue]] = {}
        if items:
            for name, value in items.items():
                self.set(name, value)

    def set(self, name: str, value: HeaderValue) -> None:
        """Set header (replaces existing)."""
        if isinstance(value, (list, tuple)):
            value = [str(v) for v in value]
        else:
            value = str(value)
        self._data[name.lower()] = (name, value)

    def get(self, name: str, default: Optional[HeaderValue] = None) -> Optional[HeaderValue]:
        """Get header value (case-insensitive)."""
        entry = self._data.get(name.lower())
        return entry[1] if entry else default

    def remove(self, name: str) -> None:
        """Remove header if present."""
        self._data.pop(name.lower(), None)

    def has(self, name: str) -> bool:
        """Check if header exists."""
        return name.lower() in self._data

    def items(self) -> Iterator[Tuple[str, HeaderValue]]:
        """Iterate over (original name, value) pairs."""
        for original, value in self._data.values():
            yield original, value

    def raw(self) -> List[Tuple[bytes, bytes]]:
        """
        Flatten headers to ASGI byte pairs.

        Lowercases names; list values become one pair per value.
        """
        pairs = []
        _append = pairs.append
        for key, (_, value) in self._data.items():
            name_bytes = key.encode("latin-1")
            if isinstance(value, list):
                for v in value:
                    _append((name_bytes, v.encode("latin-1")))
            else:
                _append((name_bytes, value.encode("latin-1")))
        return pairs

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __repr__(self) -> str:
        return f"HeaderMap({list(self.items())})"
