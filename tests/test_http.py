"""Tests for ganglion.http — Request construction and Response finishing."""

from ganglion.http.request import Request
from ganglion.http.response import Redirect, Rendered, Response, respond


class TestRequest:
    def test_from_asgi(self) -> None:
        scope = {
            "type": "http",
            "method": "POST",
            "path": "/blog/show/1",
            "query_string": b"page=2&tag=a&tag=b",
            "headers": [(b"Content-Type", b"text/plain"), (b"accept", b"*/*")],
        }
        request = Request.from_asgi(scope)
        assert request.method == "POST"
        assert request.path == "/blog/show/1"
        assert request.path_info == "/blog/show/1"
        assert request.content_type == "text/plain"
        assert request.param("page") == "2"
        assert request.query["tag"] == ["a", "b"]
        assert request.param("missing", "x") == "x"

    def test_repeated_headers_joined(self) -> None:
        scope = {"headers": [(b"accept", b"a"), (b"accept", b"b")], "path": "/"}
        assert Request.from_asgi(scope).headers["accept"] == "a, b"

    def test_mounted(self) -> None:
        request = Request(path="/blog/show/1").mounted("/blog", "/show/1")
        assert (request.script_name, request.path_info) == ("/blog", "/show/1")
        assert Request(path="/blog").mounted("/blog", "").path_info == "/"


class TestResponse:
    def test_finish_defaults(self) -> None:
        status, headers, body = Response("hello").finish()
        assert status == 200
        assert headers == [
            ("Content-Type", "text/html; charset=utf-8"),
            ("Content-Length", "5"),
        ]
        assert body == b"hello"

    def test_finish_keeps_headers_in_order(self) -> None:
        response = Response("x", content_type="text/plain").with_headers({"X-A": "1", "X-B": "2"})
        _, headers, _ = response.finish()
        assert [name for name, _ in headers] == ["Content-Type", "X-A", "X-B", "Content-Length"]

    def test_no_body_statuses(self) -> None:
        _, headers, body = Response("ignored", status=304).finish()
        assert body == b""
        assert ("Content-Length", "0") in headers

    def test_content_length_counts_bytes(self) -> None:
        _, headers, body = Response("héllo").finish()
        assert ("Content-Length", str(len("héllo".encode()))) in headers
        assert body == "héllo".encode()

    def test_write_appends(self) -> None:
        response = Response("a").write("b").write(b"c")
        assert response.body_bytes == b"abc"
        assert response.text == "abc"

    def test_immutable_transformations(self) -> None:
        original = Response("x")
        changed = original.with_status(201).with_content_type("text/plain")
        assert original.status == 200
        assert original.content_type is None
        assert (changed.status, changed.content_type) == (201, "text/plain")

    def test_header_lookup_case_insensitive(self) -> None:
        response = Response("x", content_type="text/csv").with_header("X-Thing", "1")
        assert response.header("x-thing") == "1"
        assert response.header("Content-Type") == "text/csv"
        assert response.header("missing") is None


class TestResults:
    def test_respond_wraps_value(self) -> None:
        assert respond("x") == Rendered("x")

    def test_redirect_defaults(self) -> None:
        redirect = Redirect("/elsewhere")
        assert (redirect.status, redirect.headers) == (302, ())
