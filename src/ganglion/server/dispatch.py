"""Dispatch — run one path against one node and produce a finished response.

The request moves through::

    received → resolving → found | missing → rendered → finished

- *received*: an empty path is treated as ``/``.
- *found*: the action runs through the node's wrapper chain.
- *missing*: the node's ``action_missing`` answers (404 by default).
- *finished*: the session store flushes into the response, which is then
  turned into a ``(status, headers, body)`` triple.

Exceptions raised by action code are not caught here; the ASGI adapter
decides what to do with them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ganglion._internal.invoke import invoke
from ganglion.context import request_var
from ganglion.http.response import Redirect, Rendered, Response
from ganglion.routing.resolve import resolve
from ganglion.session import NullSession, SessionStore
from ganglion.wrappers.chain import call_wrapped

if TYPE_CHECKING:
    from ganglion.action import Action
    from ganglion.config import AppConfig
    from ganglion.http.request import Request
    from ganglion.node import Node
    from ganglion.registry import NodeRegistry
    from ganglion.templating.resolver import TemplateCache

logger = logging.getLogger("ganglion.server")


class Dispatcher:
    """Resolves and runs actions for the app's nodes.

    Holds only frozen configuration, so one instance serves every request.

    Usage::

        dispatcher = Dispatcher(config, registry)
        status, headers, body = await dispatcher.call(Blog, "/show/1")
    """

    __slots__ = ("cache", "config", "registry", "session")

    def __init__(
        self,
        config: AppConfig,
        registry: NodeRegistry,
        session: SessionStore | None = None,
        cache: TemplateCache | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.session: SessionStore = session if session is not None else NullSession()
        self.cache = cache

    async def call(
        self,
        node: type[Node],
        path: str,
        request: Request | None = None,
    ) -> tuple[int, list[tuple[str, str]], bytes]:
        """Dispatch *path* on *node* and return the wire-ready triple."""
        response = await self.dispatch(node, path, request)
        return response.finish()

    async def dispatch(
        self,
        node: type[Node],
        path: str,
        request: Request | None = None,
    ) -> Response:
        """Dispatch *path* on *node* and return the flushed response."""
        response = await self.try_resolve(node, path or "/", request)
        return self.session.flush(response)

    def resolve(
        self,
        node: type[Node],
        path: str,
        request: Request | None = None,
    ) -> Action | None:
        """The action for *path* on *node*, or ``None``."""
        return resolve(
            node,
            path,
            config=self.config,
            registry=self.registry,
            request=request,
            cache=self.cache,
        )

    async def try_resolve(
        self,
        node: type[Node],
        path: str,
        request: Request | None = None,
    ) -> Response:
        """Run the action for *path*, or the node's ``action_missing``.

        ``action_missing`` overrides call this to re-dispatch to another
        path on the same request.
        """
        if request is None:
            request = request_var.get(None)
        action = self.resolve(node, path, request)
        if action is None:
            logger.debug("No action for %r on %s", path, node.__name__)
            missing = await invoke(node.action_missing, path, self)
            return to_response(missing)
        return await self.action_found(action)

    async def action_found(self, action: Action) -> Response:
        """Run *action* through its wrapper chain and build the response."""
        result = await call_wrapped(action)
        return to_response(result, action.options.content_type)


def to_response(result: Any, content_type: str | None = None) -> Response:
    """Turn an action result into a :class:`Response`.

    A ``Redirect`` becomes a 302 (or its own status) with ``Location``.
    A ``Response`` passes through. Anything else is written into a fresh
    response. *content_type* applies only when none is set.
    """
    if isinstance(result, Redirect):
        return Response(
            status=result.status,
            headers=(("Location", result.url), *result.headers),
        )

    value = result.value if isinstance(result, Rendered) else result
    if isinstance(value, Response):
        response = value
    elif value is None:
        response = Response()
    elif isinstance(value, str | bytes):
        response = Response(body=value)
    else:
        response = Response(body=str(value))

    if response.content_type is None and content_type is not None:
        response = response.with_content_type(content_type)
    return response
