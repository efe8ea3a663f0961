"""Request-scoped context via ContextVar.

Provides ``request_var``, the current ``Request`` for this task/thread.
It is set by the ASGI adapter around each dispatch and reset afterwards.
Accessing it outside a request raises ``LookupError``.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from contextvars import ContextVar

from ganglion.http.request import Request

request_var: ContextVar[Request] = ContextVar("ganglion_request")
"""The current request. Set by the ASGI adapter before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()
