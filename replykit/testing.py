"""
replykit testing - in-memory channel for asserting on responses.

``MemoryChannel`` records what a transport would have put on the wire:
the committed status and headers, every body chunk and each end signal.
It can also simulate a client that disconnects after N body writes.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .channel import BaseChannel
from .faults import ClientDisconnectFault


class MemoryChannel(BaseChannel):
    """
    Recording channel.

    Usage::

        channel = MemoryChannel()
        await writer.send(channel, "hello")

        assert channel.sent_status == 200
        assert channel.body == b"hello"
        assert channel.sent_headers["content-length"] == "5"
    """

    def __init__(
        self,
        method: str = "GET",
        status_code: int = 200,
        *,
        disconnect_after: Optional[int] = None,
    ):
        super().__init__(method=method, status_code=status_code)
        self.sent_status: Optional[int] = None
        self.sent_headers: Dict[str, str] = {}
        self.chunks: List[bytes] = []
        self.end_calls = 0
        self._disconnect_after = disconnect_after

    @property
    def body(self) -> bytes:
        return b"".join(self.chunks)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    async def _emit_start(self, status: int, headers: list) -> None:
        self.sent_status = status
        for name, value in headers:
            key = name.decode("latin-1")
            text = value.decode("latin-1")
            # Repeated names are folded the way HTTP clients fold them
            self.sent_headers[key] = f"{self.sent_headers[key]}, {text}" if key in self.sent_headers else text

    async def _emit_body(self, body: bytes, more_body: bool) -> None:
        if more_body:
            if self._disconnect_after is not None and len(self.chunks) >= self._disconnect_after:
                raise ClientDisconnectFault(bytes_sent=len(self.body), reason="simulated disconnect")
            self.chunks.append(body)
        else:
            self.end_calls += 1


__all__ = ["MemoryChannel"]
