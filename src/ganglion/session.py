"""Session store protocol.

Dispatch hands every finished response to the app's session store before
it goes on the wire, so a store can persist state and attach its cookie.
Storage is left to implementations; the default does nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ganglion.http.response import Response


@runtime_checkable
class SessionStore(Protocol):
    """Anything that can flush session state into a response::

        class CookieSession:
            def flush(self, response: Response) -> Response:
                return response.with_header("Set-Cookie", self.serialize())
    """

    def flush(self, response: Response) -> Response: ...


class NullSession:
    """Session store that keeps nothing."""

    __slots__ = ()

    def flush(self, response: Response) -> Response:
        return response
