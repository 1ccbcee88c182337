"""
ResponseWriter - header primitives and the send/json/jsonp finalization
pipeline over a response channel.

Every operation takes the channel as first argument; the writer itself only
holds configuration. Header and status primitives are synchronous, anything
that writes the body is a coroutine.

Example:
    ```python
    writer = ResponseWriter()

    async def app(scope, receive, send):
        channel = ASGIChannel(send, scope)
        writer.vary(channel, "Origin")
        await writer.json(channel, {"ok": True})
    ```
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional, Sequence, Union

from . import mime
from .channel import ResponseChannel
from .config import ResponseConfig
from .etag import generate_etag
from .faults import ResponseFinalizedFault
from .payload import classify, encode_json
from .status_codes import NO_BODY_STATUSES, SHORTCUTS, reason_phrase
from .vary_merge import merge_vary

logger = logging.getLogger("replykit.writer")

_CHARSET_PARAM = re.compile(r";\s*charset\s*=", re.IGNORECASE)

# Headers describing an entity body; stripped for 204/304
BODY_HEADERS = ("Content-Type", "Content-Length", "Transfer-Encoding")

HeaderInput = Union[str, int, float, Sequence[Any]]


class ResponseWriter:
    """
    Stateless facade for formatting responses onto a channel.

    Args:
        config: Defaults for string content type, jsonp callback,
            redirect status and friends
    """

    def __init__(self, config: Optional[ResponseConfig] = None):
        self.config = config or ResponseConfig()

    # ========================================================================
    # Header & Status Primitives
    # ========================================================================

    def header(self, channel: ResponseChannel, key: str, value: HeaderInput) -> None:
        """
        Set header (replaces existing).

        Lists are joined with ``", "``. A Content-Type without a charset
        parameter gets the default charset of its base type, if it has one.
        """
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        else:
            value = str(value)

        if key.lower() == "content-type" and not _CHARSET_PARAM.search(value):
            charset = mime.charset(value.split(";", 1)[0])
            if charset:
                value = f"{value}; charset={charset.lower()}"

        channel.set_header(key, value)

    def safe_header(self, channel: ResponseChannel, key: str, value: HeaderInput) -> None:
        """Set header only when the channel has no value for it yet."""
        if channel.get_header(key) is not None:
            return
        self.header(channel, key, value)

    def append_header(self, channel: ResponseChannel, key: str, value: HeaderInput) -> None:
        """Append to an existing header instead of replacing it."""
        existing = channel.get_header(key)
        if existing is None:
            self.header(channel, key, value)
            return

        prior = list(existing) if isinstance(existing, list) else [existing]
        extra = list(value) if isinstance(value, (list, tuple)) else [value]
        self.header(channel, key, prior + extra)

    def remove_header(self, channel: ResponseChannel, key: str) -> None:
        channel.remove_header(key)

    def status(self, channel: ResponseChannel, code: int) -> None:
        channel.status_code = code

    def content_type(self, channel: ResponseChannel, type: str, charset: Optional[str] = None) -> None:
        """
        Set Content-Type from an extension, alias or MIME string.

        Args:
            type: e.g. ``"json"``, ``".html"`` or ``"text/csv"``
            charset: Overrides the default charset lookup
        """
        value = mime.lookup(type) or type
        if charset:
            value = f"{value}; charset={charset}"
        self.header(channel, "Content-Type", value)

    def location(self, channel: ResponseChannel, url: str) -> None:
        self.header(channel, "Location", url)

    def vary(self, channel: ResponseChannel, field: Union[str, Iterable[str]]) -> None:
        """Merge ``field`` into the Vary header without duplicates."""
        existing = channel.get_header("Vary")
        if isinstance(existing, list):
            existing = ", ".join(existing)
        self.header(channel, "Vary", merge_vary(existing, field))

    # ========================================================================
    # Body & Completion
    # ========================================================================

    async def write(self, channel: ResponseChannel, chunk: Union[bytes, str]) -> None:
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        await channel.write(chunk)

    async def finish(self, channel: ResponseChannel) -> None:
        """End the response; no-op when it has already ended."""
        if channel.finished:
            logger.debug("finish() on an already finished response ignored")
            return
        await channel.end()

    async def send(self, channel: ResponseChannel, body: Any = None) -> None:
        """
        Finalize the response with ``body``.

        Steps:
        1. Classify the body (str, scalar, binary, anything else -> JSON)
        2. Default Content-Type from the classification, unless already set
        3. Content-Length from the encoded bytes, when non-empty
        4. ETag over the encoded bytes, unless already set
        5. Strip entity headers for 204/304
        6. Write the bytes and end the response

        Raises:
            ResponseFinalizedFault: If the response already ended
            orjson.JSONEncodeError: If the body cannot be JSON-encoded
        """
        if channel.finished:
            raise ResponseFinalizedFault("send")

        payload = classify(body, self.config.string_type)
        self.safe_header(channel, "Content-Type", mime.lookup(payload.alias, mime.DEFAULT_TYPE))

        chunk = payload.encode()
        if chunk:
            self.header(channel, "Content-Length", len(chunk))

        self.safe_header(channel, "ETag", generate_etag(chunk))

        if channel.status_code in NO_BODY_STATUSES:
            for name in BODY_HEADERS:
                self.remove_header(channel, name)
            chunk = b""

        logger.debug(
            f"Finalizing {channel.status_code} {reason_phrase(channel.status_code)} "
            f"({type(payload).__name__}, {len(chunk)} bytes)"
        )

        await self.write(channel, chunk)
        await self.finish(channel)

    async def json(self, channel: ResponseChannel, body: Any) -> None:
        """Send ``body`` as application/json."""
        self.safe_header(channel, "Content-Type", "application/json")
        await self.send(channel, body)

    async def jsonp(self, channel: ResponseChannel, body: Any, callback: Optional[str] = None) -> None:
        """
        Send ``body`` wrapped in a JSONP callback invocation.

        The callback name is not sanitized; it must come from a trusted source.
        """
        callback = callback or self.config.jsonp_callback

        self.header(channel, "X-Content-Type-Options", "nosniff")
        self.safe_header(channel, "Content-Type", "text/javascript")

        # U+2028/U+2029 are valid JSON but terminate lines in JavaScript
        text = (
            encode_json(body).decode("utf-8")
            .replace("\u2028", "\\u2028")
            .replace("\u2029", "\\u2029")
        )

        # typeof guard keeps the client from throwing when the callback is missing
        await self.send(channel, f"/**/ typeof {callback} === 'function' && {callback}({text});")

    async def redirect(self, channel: ResponseChannel, url: str, status: Optional[int] = None) -> None:
        """Redirect to ``url`` with an empty body (302 unless configured)."""
        body = ""
        self.status(channel, status or self.config.redirect_status)
        self.location(channel, url)
        self.header(channel, "Content-Length", len(body.encode("utf-8")))
        await self.send(channel, body)


def _status_shortcut(name: str, code: int):
    async def shortcut(self: ResponseWriter, channel: ResponseChannel, body: Any = None) -> None:
        self.status(channel, code)
        await self.send(channel, body)

    shortcut.__name__ = name
    shortcut.__qualname__ = f"ResponseWriter.{name}"
    shortcut.__doc__ = f"Send ``body`` with status {code} {reason_phrase(code)}."
    return shortcut


for _name, _code in SHORTCUTS.items():
    if not hasattr(ResponseWriter, _name):
        setattr(ResponseWriter, _name, _status_shortcut(_name, _code))


default_writer = ResponseWriter()


__all__ = ["ResponseWriter", "BODY_HEADERS", "default_writer"]
