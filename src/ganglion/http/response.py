"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.

Also home to the two result variants an action body produces:
``Rendered`` (output to write) and ``Redirect`` (send the client elsewhere).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status, headers, and content type. Each call returns a new ``Response``.

    ``content_type`` stays ``None`` until something sets it, so a format
    default can be applied later without clobbering an explicit choice.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str | None = None
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def write(self, chunk: str | bytes) -> Response:
        """Return a new Response with *chunk* appended to the body."""
        if isinstance(self.body, bytes) or isinstance(chunk, bytes):
            return replace(self, body=_as_bytes(self.body) + _as_bytes(chunk))
        return replace(self, body=self.body + chunk)

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        return _as_bytes(self.body)

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def header(self, name: str) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        lowered = name.lower()
        if lowered == "content-type":
            return self.content_type
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    # -- Finalization --

    def finish(self) -> tuple[int, list[tuple[str, str]], bytes]:
        """Produce the wire-ready ``(status, headers, body)`` triple.

        Adds ``Content-Type`` (defaulting to HTML) and ``Content-Length``.
        """
        body = self.body_bytes if _body_allowed(self.status) else b""
        headers = [("Content-Type", self.content_type or DEFAULT_CONTENT_TYPE)]
        headers.extend(self.headers)
        headers.append(("Content-Length", str(len(body))))
        return self.status, headers, body


@dataclass(frozen=True, slots=True)
class Redirect:
    """Redirect the client instead of rendering.

    Return it from an action method (or a wrapper) to skip the rest of
    the action body::

        def save(self):
            ...
            return Redirect("/posts")
    """

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class Rendered:
    """Finished output of an action body.

    ``value`` is a string/bytes body or a complete ``Response``.
    """

    value: Any


def respond(value: Any) -> Rendered:
    """Answer with *value* as-is, skipping any view and layout.

    Usage::

        def status(self):
            return respond(Response("ok", content_type="text/plain"))
    """
    return Rendered(value)


# Anything an action body or wrapper chain may hand back to dispatch
type Result = Rendered | Redirect | Response | str | bytes


def _as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return value


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})
