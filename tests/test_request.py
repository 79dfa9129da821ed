"""Tests for larvatus.http.request and body parsing."""

import pytest

from larvatus.http.forms import UploadedFile, media_type, parse_body
from larvatus.http.headers import Headers
from larvatus.http.query import QueryParams
from larvatus.http.request import Request

BOUNDARY = "----larvatusboundary"


def _scope(
    method: str = "GET",
    path: str = "/",
    *,
    query: bytes = b"",
    headers: list[tuple[bytes, bytes]] | None = None,
) -> dict:
    return {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query,
        "headers": headers or [],
    }


def _multipart(*parts: tuple[str, str | None, str | None, bytes]) -> bytes:
    """Build a multipart body from ``(name, filename, content_type, data)`` parts."""
    out = bytearray()
    for name, filename, content_type, data in parts:
        out += f"--{BOUNDARY}\r\n".encode()
        disposition = f'Content-Disposition: form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        out += disposition.encode() + b"\r\n"
        if content_type is not None:
            out += f"Content-Type: {content_type}\r\n".encode()
        out += b"\r\n" + data + b"\r\n"
    out += f"--{BOUNDARY}--\r\n".encode()
    return bytes(out)


class TestFromAsgi:
    def test_basic_fields(self) -> None:
        req = Request.from_asgi(_scope("GET", "/users/42", query=b"page=2"))
        assert req.method == "GET"
        assert req.path == "/users/42"
        assert req.url == "/users/42?page=2"
        assert req.query["page"] == "2"
        assert req.params == {}
        assert req.body == b""

    def test_url_without_query(self) -> None:
        assert Request.from_asgi(_scope(path="/a")).url == "/a"

    def test_headers_case_insensitive(self) -> None:
        req = Request.from_asgi(_scope(headers=[(b"x-request-id", b"abc")]))
        assert req.headers["X-Request-ID"] == "abc"
        assert "x-request-id" in req.headers
        assert req.headers.get("missing") is None

    def test_params_mutable_state_independent(self) -> None:
        a = Request.from_asgi(_scope())
        b = Request.from_asgi(_scope())
        a.params["id"] = "1"
        a.state["user"] = "alice"
        assert b.params == {}
        assert b.state == {}

    def test_frozen(self) -> None:
        req = Request.from_asgi(_scope())
        with pytest.raises(AttributeError):
            req.method = "POST"  # type: ignore[misc]

    def test_urlencoded_form(self) -> None:
        req = Request.from_asgi(
            _scope(
                "POST",
                headers=[(b"content-type", b"application/x-www-form-urlencoded")],
            ),
            b"name=alice&tag=a&tag=b&empty=",
        )
        assert req.parsed_body == {"name": "alice", "tag": ["a", "b"], "empty": ""}
        assert req.files == ()
        assert req.media_type == "application/x-www-form-urlencoded"

    def test_json_object(self) -> None:
        req = Request.from_asgi(
            _scope("POST", headers=[(b"content-type", b"application/json; charset=utf-8")]),
            b'{"title": "Hello", "tags": ["x"]}',
        )
        assert req.parsed_body == {"title": "Hello", "tags": ["x"]}
        assert req.json() == {"title": "Hello", "tags": ["x"]}
        assert req.text == '{"title": "Hello", "tags": ["x"]}'

    def test_parsed_body_is_read_only(self) -> None:
        req = Request.from_asgi(
            _scope("POST", headers=[(b"content-type", b"application/json")]),
            b'{"a": 1}',
        )
        with pytest.raises(TypeError):
            req.parsed_body["a"] = 2  # type: ignore[index]

    def test_malformed_json_gives_empty_body(self) -> None:
        req = Request.from_asgi(
            _scope("POST", headers=[(b"content-type", b"application/json")]),
            b"{not json",
        )
        assert req.parsed_body == {}
        assert req.body == b"{not json"
        with pytest.raises(ValueError):
            req.json()

    def test_multipart_fields_and_files(self) -> None:
        body = _multipart(
            ("title", None, None, b"Hello"),
            ("upload", "notes.txt", "text/plain", b"file-bytes"),
        )
        req = Request.from_asgi(
            _scope(
                "POST",
                headers=[(b"content-type", f"multipart/form-data; boundary={BOUNDARY}".encode())],
            ),
            body,
        )

        assert req.parsed_body == {"title": "Hello"}
        assert len(req.files) == 1
        upload = req.files[0]
        assert upload.field_name == "upload"
        assert upload.filename == "notes.txt"
        assert upload.content_type == "text/plain"
        assert upload.content == b"file-bytes"
        assert upload.size == 10


class TestParseBody:
    def test_empty_body(self) -> None:
        assert parse_body(b"", "application/json") == ({}, ())

    def test_unknown_content_type(self) -> None:
        assert parse_body(b"raw", "text/plain") == ({}, ())

    def test_missing_content_type(self) -> None:
        assert parse_body(b"a=1", None) == ({}, ())

    def test_json_non_object_ignored(self) -> None:
        assert parse_body(b"[1, 2]", "application/json") == ({}, ())

    def test_vendor_json_suffix(self) -> None:
        assert parse_body(b'{"a": 1}', "application/vnd.api+json") == ({"a": 1}, ())

    def test_multipart_without_boundary(self) -> None:
        assert parse_body(b"--x\r\n", "multipart/form-data") == ({}, ())

    def test_multipart_repeated_field_becomes_list(self) -> None:
        body = _multipart(("tag", None, None, b"a"), ("tag", None, None, b"b"))
        fields, files = parse_body(body, f"multipart/form-data; boundary={BOUNDARY}")
        assert fields == {"tag": ["a", "b"]}
        assert files == ()

    def test_multipart_file_default_content_type(self) -> None:
        body = _multipart(("f", "blob.bin", None, b"\x00\x01"))
        _, files = parse_body(body, f"multipart/form-data; boundary={BOUNDARY}")
        assert files[0].content_type == "application/octet-stream"


class TestHelpers:
    def test_media_type(self) -> None:
        assert media_type("Text/HTML; charset=utf-8") == "text/html"
        assert media_type(None) == ""

    def test_uploaded_file_save(self, tmp_path) -> None:
        upload = UploadedFile("f", "a.txt", "text/plain", b"hello")
        target = tmp_path / "a.txt"
        upload.save(target)
        assert target.read_bytes() == b"hello"

    def test_query_params_multi(self) -> None:
        query = QueryParams(b"tag=a&tag=b&q=")
        assert query["tag"] == "a"
        assert query.get_list("tag") == ["a", "b"]
        assert query["q"] == ""
        assert query.get("missing", "d") == "d"

    def test_headers_repeated_values(self) -> None:
        headers = Headers(((b"Accept", b"text/html"), (b"accept", b"application/json")))
        assert headers["accept"] == "text/html, application/json"
        assert headers.get_list("ACCEPT") == ["text/html", "application/json"]
        assert list(headers) == ["accept"]
        assert len(headers) == 1

    def test_headers_from_mapping(self) -> None:
        headers = Headers.from_mapping({"Content-Type": "text/plain"})
        assert headers["content-type"] == "text/plain"
