"""Ganglion exception hierarchy.

Shared across nodes, the resolver, the dispatcher, and the ASGI adapter
so every module raises and catches the same types.
"""

from dataclasses import dataclass


class GanglionError(Exception):
    """Base for all ganglion-specific errors."""


class ConfigurationError(GanglionError):
    """Raised when node or app configuration is invalid.

    Raised at class definition for bad provides, and on first use when a
    node is asked to resolve a format it has no handler for.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(GanglionError):
    """An error that maps directly to an HTTP status code.

    Only the ASGI adapter catches these. Dispatch itself never raises one
    for an unresolved path; that case goes through ``action_missing``.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no mapped node covers the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
