"""
Response channels - the transport side of a single in-flight response.

A channel accepts headers, a status code, body writes and one end-of-response
signal. Headers are buffered until the first body write (or the end), then
committed in one start message; after that, header and status mutations are
rejected, and after ``end()`` nothing more may be written.

Provides:
- ResponseChannel: structural protocol consumed by ResponseWriter/FileDelivery
- BaseChannel: header/status bookkeeping shared by concrete channels
- ASGIChannel: channel over an ASGI 3 ``send`` callable
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol, runtime_checkable

from ._datastructures import HeaderMap, HeaderValue
from .faults import ClientDisconnectFault, HeadersCommittedFault, ResponseFinalizedFault

logger = logging.getLogger("replykit.channel")


@runtime_checkable
class ResponseChannel(Protocol):
    """Structural interface every transport channel satisfies."""

    status_code: int

    @property
    def headers_sent(self) -> bool: ...

    @property
    def finished(self) -> bool: ...

    def set_header(self, name: str, value: HeaderValue) -> None: ...

    def get_header(self, name: str) -> Optional[HeaderValue]: ...

    def remove_header(self, name: str) -> None: ...

    async def write(self, data: bytes) -> None: ...

    async def end(self) -> None: ...


class BaseChannel:
    """
    Header/status state machine shared by concrete channels.

    Subclasses implement ``_emit_start`` and ``_emit_body``.
    """

    def __init__(self, method: str = "GET", status_code: int = 200):
        self.method = method.upper()
        self.headers = HeaderMap()
        self._status_code = status_code
        self._headers_sent = False
        self._finished = False
        self.bytes_sent = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def headers_sent(self) -> bool:
        return self._headers_sent

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def status_code(self) -> int:
        return self._status_code

    @status_code.setter
    def status_code(self, code: int) -> None:
        if self._headers_sent:
            raise HeadersCommittedFault("set status")
        self._status_code = code

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def set_header(self, name: str, value: HeaderValue) -> None:
        if self._headers_sent:
            raise HeadersCommittedFault("set header", name)
        self.headers.set(name, value)

    def get_header(self, name: str) -> Optional[HeaderValue]:
        return self.headers.get(name)

    def has_header(self, name: str) -> bool:
        return self.headers.has(name)

    def remove_header(self, name: str) -> None:
        if self._headers_sent:
            raise HeadersCommittedFault("remove header", name)
        self.headers.remove(name)

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    async def write(self, data: bytes) -> None:
        if self._finished:
            raise ResponseFinalizedFault("write")
        if not self._headers_sent:
            await self._commit()
        # HEAD responses keep their headers but carry no body
        if not data or self.method == "HEAD":
            return
        await self._emit_body(bytes(data), more_body=True)
        self.bytes_sent += len(data)

    async def end(self) -> None:
        if self._finished:
            raise ResponseFinalizedFault("end")
        if not self._headers_sent:
            await self._commit()
        self._finished = True
        await self._emit_body(b"", more_body=False)

    async def _commit(self) -> None:
        self._headers_sent = True
        await self._emit_start(self._status_code, self.headers.raw())

    async def _emit_start(self, status: int, headers: list) -> None:
        raise NotImplementedError

    async def _emit_body(self, body: bytes, more_body: bool) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        state = "finished" if self._finished else ("committed" if self._headers_sent else "open")
        return f"<{type(self).__name__} {self.method} {self._status_code} {state}>"


class ASGIChannel(BaseChannel):
    """
    Channel over an ASGI 3 ``send`` callable.

    Example:
        ```python
        async def app(scope, receive, send):
            channel = ASGIChannel(send, scope)
            await writer.send(channel, {"hello": "world"})
        ```
    """

    def __init__(
        self,
        send: Callable[[dict], Awaitable[None]],
        scope: Optional[Mapping[str, Any]] = None,
        *,
        status_code: int = 200,
    ):
        super().__init__(method=(scope or {}).get("method", "GET"), status_code=status_code)
        self._send = send

    async def _emit_start(self, status: int, headers: list) -> None:
        await self._transmit({
            "type": "http.response.start",
            "status": status,
            "headers": headers,
        })

    async def _emit_body(self, body: bytes, more_body: bool) -> None:
        await self._transmit({
            "type": "http.response.body",
            "body": body,
            "more_body": more_body,
        })

    async def _transmit(self, message: dict) -> None:
        try:
            await self._send(message)
        except OSError as e:
            # Servers raise OSError subclasses once the peer is gone
            fault = ClientDisconnectFault(bytes_sent=self.bytes_sent, reason=str(e))
            fault.report(logger, "ASGI send")
            raise fault from e


__all__ = [
    "ResponseChannel",
    "BaseChannel",
    "ASGIChannel",
]
