"""
Test collaborator helpers - MIME lookup, ETag, Content-Disposition, Vary.
"""

import pytest

from replykit import content_disposition, generate_etag, merge_vary, mime
from replykit._datastructures import HeaderMap
from replykit.payload import BinaryPayload, JsonPayload, ScalarPayload, TextPayload, classify


# ============================================================================
# MIME
# ============================================================================

class TestMime:

    @pytest.mark.parametrize("name, expected", [
        ("json", "application/json"),
        ("html", "text/html"),
        ("bin", "application/octet-stream"),
        (".html", "text/html"),
        ("/srv/files/hello.txt", "text/plain"),
        ("report.pdf", "application/pdf"),
        ("text/csv", "text/csv"),
        ("application/vnd.ms-excel", "application/vnd.ms-excel"),
    ])
    def test_lookup(self, name, expected):
        assert mime.lookup(name) == expected

    def test_lookup_fallback(self):
        assert mime.lookup("archive.zzqx") is None
        assert mime.lookup("archive.zzqx", mime.DEFAULT_TYPE) == "application/octet-stream"
        assert mime.lookup("") is None

    @pytest.mark.parametrize("mime_type, expected", [
        ("text/plain", "UTF-8"),
        ("text/html; charset=latin1", "UTF-8"),
        ("application/json", "UTF-8"),
        ("application/javascript", "UTF-8"),
        ("application/octet-stream", None),
        ("image/png", None),
    ])
    def test_charset(self, mime_type, expected):
        assert mime.charset(mime_type) == expected


# ============================================================================
# ETag
# ============================================================================

class TestEtag:

    def test_empty(self):
        assert generate_etag(b"") == '"0-2jmj7l5rSw0yVb/vlWAYkK/YBwk"'

    def test_known_value(self):
        assert generate_etag(b"hello world") == '"b-Kq5sNclPz7QV2+lfQIuc6R7oRu0"'

    def test_str_hashed_as_utf8(self):
        assert generate_etag("hello world") == generate_etag(b"hello world")

    def test_different_content(self):
        assert generate_etag(b"a") != generate_etag(b"b")

    def test_weak(self):
        assert generate_etag(b"", weak=True) == 'W/"0-2jmj7l5rSw0yVb/vlWAYkK/YBwk"'


# ============================================================================
# Content-Disposition
# ============================================================================

class TestContentDisposition:

    def test_uses_basename(self):
        assert content_disposition("/srv/files/hello.txt") == 'attachment; filename="hello.txt"'

    def test_inline(self):
        assert content_disposition("a.pdf", "inline") == 'inline; filename="a.pdf"'

    def test_no_filename(self):
        assert content_disposition(None) == "attachment"

    def test_escapes_quotes(self):
        assert content_disposition('the "file".txt') == 'attachment; filename="the \\"file\\".txt"'

    def test_latin1_kept(self):
        assert content_disposition("naïve.txt") == 'attachment; filename="naïve.txt"'

    def test_unicode_gets_extended_parameter(self):
        assert content_disposition("€ rates.txt") == (
            "attachment; filename=\"? rates.txt\"; filename*=UTF-8''%E2%82%AC%20rates.txt"
        )

    def test_invalid_type(self):
        with pytest.raises(ValueError):
            content_disposition("a.txt", "at tachment")


# ============================================================================
# Vary
# ============================================================================

class TestVary:

    def test_into_empty(self):
        assert merge_vary(None, "Origin") == "Origin"

    def test_no_duplicates(self):
        assert merge_vary("Origin", "origin") == "Origin"

    def test_appends_in_order(self):
        assert merge_vary("Accept", "Origin, User-Agent") == "Accept, Origin, User-Agent"

    def test_star(self):
        assert merge_vary("Accept", "*") == "*"
        assert merge_vary("*", "Origin") == "*"

    def test_invalid_field(self):
        with pytest.raises(ValueError):
            merge_vary(None, "bad field")


# ============================================================================
# Payload classification & HeaderMap
# ============================================================================

class TestPayload:

    def test_variants(self):
        assert classify("x") == TextPayload("x")
        assert classify(None) == TextPayload("")
        assert classify(True) == ScalarPayload(True)
        assert classify(3.5) == ScalarPayload(3.5)
        assert classify(bytearray(b"x")) == BinaryPayload(b"x")
        assert classify([1]) == JsonPayload([1])

    def test_string_alias(self):
        assert classify("x", string_type="html").alias == "html"

    def test_json_default_serializer(self):
        assert JsonPayload({"tags": {"a"}}).encode() == b'{"tags":["a"]}'


class TestHeaderMap:

    def test_case_insensitive(self):
        headers = HeaderMap({"Content-Type": "text/plain"})
        assert headers.get("content-type") == "text/plain"
        assert "CONTENT-TYPE" in headers

    def test_raw_flattens_lists(self):
        headers = HeaderMap()
        headers.set("Set-Cookie", ["a=1", "b=2"])
        assert headers.raw() == [(b"set-cookie", b"a=1"), (b"set-cookie", b"b=2")]
