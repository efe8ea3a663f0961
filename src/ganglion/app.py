"""Ganglion application class.

Mutable during setup (node mapping). Frozen when ``__call__()`` or
``dispatch()`` is first invoked.
"""

import logging
import threading
from collections.abc import Callable

from ganglion._internal.asgi import Receive, Scope, Send
from ganglion.config import AppConfig
from ganglion.context import request_var
from ganglion.errors import HTTPError
from ganglion.http.request import Request
from ganglion.http.response import Response
from ganglion.node import Node
from ganglion.registry import NodeRegistry
from ganglion.server.dispatch import Dispatcher
from ganglion.server.sender import send_response, send_triple
from ganglion.session import SessionStore
from ganglion.templating.resolver import TemplateCache

logger = logging.getLogger("ganglion.server")


class App:
    """The ganglion application: a registry of nodes behind an ASGI entry point.

    Usage::

        app = App(AppConfig(root="site"))
        app.map("/", Home)
        app.map("/blog", Blog)

        @app.node("/admin")
        class Admin(Node):
            def index(self):
                return "Admin"

    Thread safety:
        Mapping happens at import time on one thread. The freeze transition
        uses a Lock + double-check so exactly one thread builds the
        dispatcher, even when several workers take their first request at
        once.
    """

    __slots__ = (
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_session",
        "config",
        "registry",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        session: SessionStore | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.registry: NodeRegistry = NodeRegistry()
        self._session = session
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._dispatcher: Dispatcher | None = None

    # -- Node registration --

    def map(self, location: str, node: type[Node]) -> type[Node]:
        """Answer requests under *location* with *node*."""
        self._check_not_frozen()
        self.registry.map(location, node)
        return node

    def mount(self, *nodes: type[Node]) -> None:
        """Map each node at the location derived from its class name."""
        self._check_not_frozen()
        self.registry.mount(*nodes)

    def node(self, location: str) -> Callable[[type[Node]], type[Node]]:
        """Map a node class via decorator::

            @app.node("/blog")
            class Blog(Node):
                ...
        """

        def decorator(cls: type[Node]) -> type[Node]:
            return self.map(location, cls)

        return decorator

    # -- Dispatch --

    async def dispatch(self, path: str, *, method: str = "GET") -> Response:
        """Dispatch *path* without going through ASGI.

        Raises ``NotFound`` when no node is mapped for *path*.
        """
        self._ensure_frozen()
        dispatcher = self._require_dispatcher()
        node, prefix, remainder = self.registry.at(path or "/")
        request = Request(method=method, path=path or "/").mounted(prefix, remainder)
        token = request_var.set(request)
        try:
            return await dispatcher.dispatch(node, remainder, request)
        finally:
            request_var.reset(token)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Answers lifespan scopes directly and dispatches HTTP scopes to
        the node mapped for the path. Other scope types are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        self._ensure_frozen()
        dispatcher = self._require_dispatcher()
        request = Request.from_asgi(scope)

        try:
            node, prefix, remainder = self.registry.at(request.path)
        except HTTPError as exc:
            logger.debug("%s %s -> %d", request.method, request.path, exc.status)
            plain = Response(body=exc.detail, status=exc.status, content_type="text/plain")
            await send_response(plain, send)
            return

        request = request.mounted(prefix, remainder)
        token = request_var.set(request)
        try:
            status, headers, body = await dispatcher.call(node, remainder, request)
        except Exception:
            if self.config.debug:
                raise
            logger.exception("Action failed: %s %s", request.method, request.path)
            await send_response(Response(body=b"", status=500), send)
            return
        finally:
            request_var.reset(token)

        await send_triple(status, headers, body, send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol, freezing the app at startup."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Build the dispatcher. MUST only be called while holding _freeze_lock."""
        if self.config.log_level is not None:
            logging.getLogger("ganglion").setLevel(self.config.log_level.upper())

        cache = TemplateCache() if self.config.cache_templates else None
        self._dispatcher = Dispatcher(self.config, self.registry, self._session, cache)

        registry_logger = logging.getLogger("ganglion.registry")
        for location, node in self.registry:
            registry_logger.debug("%s -> %s", location, node.__name__)

        self._frozen = True

    def _require_dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            msg = "App has not been frozen"
            raise RuntimeError(msg)
        return self._dispatcher

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Map all nodes before calling app() or app.dispatch()."
            )
            raise RuntimeError(msg)
