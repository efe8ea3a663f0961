"""Immutable HTTP request.

Only the metadata a node needs to pick and run an action: method, paths,
headers, and query parameters. Body access is left to the transport.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qs


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the full request path. ``script_name`` is the prefix of the
    node that answers the request and ``path_info`` is what remains of the
    path below it; the dispatcher resolves actions from ``path_info``.
    """

    method: str = "GET"
    path: str = "/"
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, list[str]] = field(default_factory=dict)
    script_name: str = ""
    path_info: str = "/"

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def param(self, name: str, default: str | None = None) -> str | None:
        """Return the first query value for *name*."""
        values = self.query.get(name)
        return values[0] if values else default

    def mounted(self, script_name: str, path_info: str) -> Request:
        """Return a copy of this request scoped to a node prefix."""
        return replace(self, script_name=script_name, path_info=path_info or "/")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        headers: dict[str, str] = {}
        for raw_name, raw_value in scope.get("headers", ()):
            name = raw_name.decode("latin-1").lower()
            value = raw_value.decode("latin-1")
            headers[name] = f"{headers[name]}, {value}" if name in headers else value
        query = parse_qs(scope.get("query_string", b"").decode("latin-1"), keep_blank_values=True)
        path = scope.get("path") or "/"
        return cls(
            method=scope.get("method", "GET"),
            path=path,
            headers=MappingProxyType(headers),
            query=MappingProxyType(query),
            path_info=path,
        )
