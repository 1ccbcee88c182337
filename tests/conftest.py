"""
Shared test fixtures and helpers for the replykit test suite.
"""

import pytest

from replykit import ASGIChannel, FileDelivery, ResponseConfig, ResponseWriter
from replykit.testing import MemoryChannel


# ============================================================================
# Writer / Channel Fixtures
# ============================================================================


@pytest.fixture
def writer() -> ResponseWriter:
    return ResponseWriter()


@pytest.fixture
def channel() -> MemoryChannel:
    return MemoryChannel()


@pytest.fixture
def delivery() -> FileDelivery:
    return FileDelivery()


@pytest.fixture
def make_delivery():
    """Factory for FileDelivery with config overrides (e.g. chunk_size=4)."""

    def factory(**overrides) -> FileDelivery:
        return FileDelivery(config=ResponseConfig().merge(**overrides))

    return factory


# ============================================================================
# File Fixtures
# ============================================================================


@pytest.fixture
def hello_file(tmp_path):
    path = tmp_path / "hello.txt"
    path.write_bytes(b"hello world\n")
    return path


# ============================================================================
# ASGI Helpers
# ============================================================================


@pytest.fixture
def make_app():
    """Factory wrapping ``async def handler(channel)`` as an ASGI app."""
    return _make_app


def _make_app(handler):
    """Wrap ``async def handler(channel)`` as an ASGI app."""

    async def app(scope, receive, send):
        assert scope["type"] == "http"
        channel = ASGIChannel(send, scope)
        await handler(channel)

    return app
