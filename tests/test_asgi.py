"""
End-to-end tests: ResponseWriter/FileDelivery over ASGIChannel driven by httpx.
"""

import httpx
import pytest

from replykit import (
    ASGIChannel,
    ClientDisconnectFault,
    HeadersCommittedFault,
    ResponseFinalizedFault,
    attachment,
    download,
    redirect,
    send,
    vary,
)


async def request(app, method="GET", path="/"):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, path)


@pytest.mark.asyncio
async def test_send_text_over_asgi(make_app):
    async def handler(channel):
        await send(channel, "hello world")

    res = await request(make_app(handler))

    assert res.status_code == 200
    assert res.text == "hello world"
    assert res.headers["content-type"] == "text/plain; charset=utf-8"
    assert res.headers["content-length"] == "11"
    assert res.headers["etag"] == '"b-Kq5sNclPz7QV2+lfQIuc6R7oRu0"'


@pytest.mark.asyncio
async def test_send_json_over_asgi(make_app):
    body = {"name": "foo", "age": 22, "nested": ["foo", "bar"]}

    async def handler(channel):
        await send(channel, body)

    res = await request(make_app(handler))

    assert res.json() == body
    assert res.headers["content-type"] == "application/json; charset=utf-8"


@pytest.mark.asyncio
async def test_head_request_has_no_body(make_app):
    async def handler(channel):
        await send(channel, b"hello world")

    res = await request(make_app(handler), "HEAD")

    assert res.status_code == 200
    assert res.headers["content-type"] == "application/octet-stream"
    assert res.content == b""


@pytest.mark.asyncio
async def test_redirect_over_asgi(make_app):
    async def handler(channel):
        await redirect(channel, "http://localhost", 301)

    res = await request(make_app(handler))

    assert res.status_code == 301
    assert res.headers["location"] == "http://localhost"
    assert res.headers["content-length"] == "0"


@pytest.mark.asyncio
async def test_vary_over_asgi(make_app):
    async def handler(channel):
        vary(channel, "Origin")
        vary(channel, "Origin")
        await send(channel, "")

    res = await request(make_app(handler))

    assert res.headers["vary"] == "Origin"


@pytest.mark.asyncio
async def test_download_over_asgi(make_app, hello_file):
    async def handler(channel):
        await download(channel, hello_file)

    res = await request(make_app(handler))

    assert res.status_code == 200
    assert res.text.strip() == "hello world"
    assert res.headers["content-type"] == "text/plain; charset=utf-8"
    assert "last-modified" in res.headers


@pytest.mark.asyncio
async def test_attachment_over_asgi(make_app, hello_file):
    async def handler(channel):
        await attachment(channel, hello_file)

    res = await request(make_app(handler))

    assert res.headers["content-disposition"] == 'attachment; filename="hello.txt"'


@pytest.mark.asyncio
async def test_missing_file_over_asgi(make_app, tmp_path):
    async def handler(channel):
        await download(channel, tmp_path / "foo.txt")

    res = await request(make_app(handler))

    assert res.status_code == 503
    assert res.json()["code"] == "ENOENT"
    assert res.headers["content-type"] == "application/json; charset=utf-8"


# ============================================================================
# ASGIChannel lifecycle
# ============================================================================

@pytest.mark.asyncio
async def test_asgi_channel_messages():
    messages = []

    async def mock_send(message):
        messages.append(message)

    channel = ASGIChannel(mock_send, {"type": "http", "method": "GET"})
    channel.set_header("X-Test", "1")
    await channel.write(b"abc")
    await channel.end()

    assert messages[0] == {"type": "http.response.start", "status": 200, "headers": [(b"x-test", b"1")]}
    assert messages[1] == {"type": "http.response.body", "body": b"abc", "more_body": True}
    assert messages[2] == {"type": "http.response.body", "body": b"", "more_body": False}


@pytest.mark.asyncio
async def test_asgi_channel_rejects_late_mutation():
    async def mock_send(message):
        pass

    channel = ASGIChannel(mock_send)
    await channel.write(b"x")

    with pytest.raises(HeadersCommittedFault):
        channel.status_code = 500

    await channel.end()

    with pytest.raises(ResponseFinalizedFault):
        await channel.write(b"y")
    with pytest.raises(ResponseFinalizedFault):
        await channel.end()


@pytest.mark.asyncio
async def test_asgi_channel_maps_disconnect():
    async def broken_send(message):
        raise ConnectionResetError("peer gone")

    channel = ASGIChannel(broken_send)

    with pytest.raises(ClientDisconnectFault) as info:
        await channel.write(b"x")

    assert info.value.code == "CLIENT_DISCONNECT"
