"""
FileDelivery - streams files into a response channel.

Each call runs its own transfer state machine:

    START -> STAT -> STREAMING -> DONE
                 \\           \\
                  -> FAILED    -> FAILED

Metadata is read before the file is opened, so Content-Length and
Last-Modified are always present on success and a missing file is detected
before anything describing a body is committed. A failure before the start
line went out becomes a 503 with a JSON error body; a failure after it can
only end the (truncated) response. The file handle is owned by the transfer
and closed on every exit path.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from email.utils import formatdate
from enum import Enum
from typing import Any, Optional, Union

import aiofiles
import aiofiles.os

from . import mime
from .channel import ResponseChannel
from .config import ResponseConfig
from .disposition import content_disposition
from .faults import ClientDisconnectFault, Fault, FileDeliveryFault
from .status_codes import reason_phrase
from .writer import ResponseWriter, default_writer

logger = logging.getLogger("replykit.delivery")

PathLike = Union[str, os.PathLike]

# Headers that only describe the file; dropped when delivery fails
FILE_HEADERS = ("Last-Modified", "Content-Length", "Content-Disposition")


class DeliveryState(str, Enum):
    START = "start"
    STAT = "stat"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


# ============================================================================
# Delivery results
# ============================================================================

@dataclass(frozen=True)
class Delivered:
    """File was streamed completely."""
    path: str
    bytes_sent: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """
    Delivery failed.

    ``kind`` is where it failed: ``stat``, ``open``, ``read`` or
    ``disconnect``.
    """
    path: str
    error: Fault
    kind: str
    bytes_sent: int = 0

    @property
    def ok(self) -> bool:
        return False


DeliveryResult = Delivered | Failed


# ============================================================================
# Transfer (one per call)
# ============================================================================

class _Transfer:
    """Per-call file context: path, metadata, open handle and state."""

    def __init__(self, writer: ResponseWriter, channel: ResponseChannel, path: str):
        self.writer = writer
        self.config = writer.config
        self.channel = channel
        self.path = path
        self.state = DeliveryState.START
        self.size: Optional[int] = None
        self.mtime: Optional[float] = None
        self.content_type: Optional[str] = None
        self.bytes_sent = 0
        self._owns_content_type = False

    def _enter(self, state: DeliveryState) -> None:
        logger.debug(f"{self.path}: {self.state.value} -> {state.value}")
        self.state = state

    async def run(self) -> DeliveryResult:
        self._enter(DeliveryState.STAT)
        try:
            stats = await aiofiles.os.stat(self.path)
        except OSError as e:
            return await self._fail(FileDeliveryFault("stat", self.path, e), "stat")

        self.size = stats.st_size
        self.mtime = stats.st_mtime
        self.writer.header(self.channel, "Last-Modified", formatdate(self.mtime, usegmt=True))
        self.writer.header(self.channel, "Content-Length", self.size)

        self._enter(DeliveryState.STREAMING)
        try:
            handle = await aiofiles.open(self.path, "rb")
        except OSError as e:
            return await self._fail(FileDeliveryFault("open", self.path, e), "open")

        try:
            self.content_type = mime.lookup(os.path.basename(self.path), mime.DEFAULT_TYPE)
            if self.channel.get_header("Content-Type") is None:
                self.writer.header(self.channel, "Content-Type", self.content_type)
                self._owns_content_type = True
            return await self._pipe(handle)
        finally:
            await handle.close()

    async def _pipe(self, handle: Any) -> DeliveryResult:
        """Copy file chunks into the channel; each write is awaited."""
        chunk_size = self.config.chunk_size

        # HEAD responses carry headers only
        if getattr(self.channel, "method", "GET") != "HEAD":
            while True:
                try:
                    chunk = await handle.read(chunk_size)
                except OSError as e:
                    return await self._fail(FileDeliveryFault("read", self.path, e), "read")
                if not chunk:
                    break
                try:
                    await self.channel.write(chunk)
                except ClientDisconnectFault as e:
                    return self._disconnected(e)
                self.bytes_sent += len(chunk)

        try:
            await self.writer.finish(self.channel)
        except ClientDisconnectFault as e:
            return self._disconnected(e)

        self._enter(DeliveryState.DONE)
        return Delivered(self.path, self.bytes_sent)

    def _disconnected(self, fault: ClientDisconnectFault) -> Failed:
        self._enter(DeliveryState.FAILED)
        fault.report(logger, f"{self.path} after {self.bytes_sent} bytes")
        return Failed(self.path, fault, "disconnect", self.bytes_sent)

    async def _fail(self, fault: FileDeliveryFault, kind: str) -> Failed:
        self._enter(DeliveryState.FAILED)
        fault.report(logger, str(self.path))
        channel = self.channel

        if channel.headers_sent:
            # Start line already out: the response can only be cut short
            try:
                await self.writer.finish(channel)
            except ClientDisconnectFault as e:
                return Failed(self.path, e, "disconnect", self.bytes_sent)
            return Failed(self.path, fault, kind, self.bytes_sent)

        for name in FILE_HEADERS:
            self.writer.remove_header(channel, name)
        if self._owns_content_type:
            self.writer.remove_header(channel, "Content-Type")

        status = self.config.failure_status
        self.writer.status(channel, status)
        try:
            await self.writer.send(channel, self._error_body(fault, status))
        except ClientDisconnectFault as e:
            return Failed(self.path, e, "disconnect", self.bytes_sent)
        return Failed(self.path, fault, kind, self.bytes_sent)

    def _error_body(self, fault: FileDeliveryFault, status: int) -> dict:
        if self.config.expose_error_details:
            return fault.error_descriptor()
        return {"code": fault.error_code, "message": reason_phrase(status)}


# ============================================================================
# FileDelivery
# ============================================================================

class FileDelivery:
    """
    Download/attachment delivery built on ResponseWriter.

    Example:
        ```python
        delivery = FileDelivery()
        result = await delivery.attachment(channel, "/srv/reports/q3.pdf")
        if not result.ok:
            ...
        ```
    """

    def __init__(self, writer: Optional[ResponseWriter] = None, config: Optional[ResponseConfig] = None):
        self.writer = writer or ResponseWriter(config)

    @property
    def config(self) -> ResponseConfig:
        return self.writer.config

    async def download(self, channel: ResponseChannel, path: PathLike) -> DeliveryResult:
        """Stream a file inline, with Content-Type inferred from its extension."""
        return await _Transfer(self.writer, channel, os.fspath(path)).run()

    async def attachment(
        self,
        channel: ResponseChannel,
        path: PathLike,
        name: Optional[str] = None,
        disposition: Optional[str] = None,
    ) -> DeliveryResult:
        """
        Stream a file as a forced download.

        Args:
            path: File to send
            name: Download name (defaults to the basename of ``path``)
            disposition: ``attachment`` (default) or ``inline``
        """
        path = os.fspath(path)
        self.writer.header(
            channel,
            "Content-Disposition",
            content_disposition(name or path, disposition or self.config.disposition),
        )
        return await _Transfer(self.writer, channel, path).run()


default_delivery = FileDelivery(default_writer)


__all__ = [
    "DeliveryState",
    "Delivered",
    "Failed",
    "DeliveryResult",
    "FileDelivery",
    "FILE_HEADERS",
    "default_delivery",
]
