"""Action assembly — turn a node and a path into an :class:`Action`.

Resolution order for ``/foo/bar.rss`` on a node:

1. Strip the format extension: name ``/foo/bar``, wish ``rss``.
2. Try each candidate from :func:`patterns_for` in turn
   (``foo__bar()``, ``foo("bar")``, ``index("foo", "bar")``).
3. A candidate matches when its method accepts the params, or when it
   takes no params and has a view. The first match wins.

Nothing here is cached except template lookups (and only when a
:class:`TemplateCache` is passed), so edits to node classes and template
files are seen on the next request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ganglion.action import Action, ActionOptions
from ganglion.errors import ConfigurationError
from ganglion.routing.arity import MethodTable
from ganglion.routing.patterns import patterns_for
from ganglion.templating.resolver import TemplateCache, TemplateResolver

if TYPE_CHECKING:
    from ganglion.config import AppConfig
    from ganglion.http.request import Request
    from ganglion.node import Node
    from ganglion.registry import NodeRegistry

logger = logging.getLogger("ganglion.routing")


def resolve(
    node: type[Node],
    path: str,
    *,
    config: AppConfig,
    registry: NodeRegistry,
    request: Request | None = None,
    cache: TemplateCache | None = None,
) -> Action | None:
    """Find the action answering *path* on *node*.

    Returns ``None`` when no candidate matches. Raises
    ``ConfigurationError`` when the requested format has no handler.
    """
    provides = node.provide_registry()
    name, wish, engine = provides.resolve_extension(path)
    if engine is None:
        msg = f"No handler for format {wish!r} on {node.__name__}; use {node.__name__}.provide()."
        raise ConfigurationError(msg)

    options = ActionOptions(content_type=provides.content_type_for(wish))
    methods = MethodTable.build(node)
    resolver = TemplateResolver(
        node,
        config=config,
        registry=registry,
        methods=methods,
        provides=provides,
        cache=cache,
    )

    for candidate, params in patterns_for(name):
        method = methods.match(candidate, params)
        if method is None and (config.needs_method or params):
            continue

        view = resolver.resolve_view(candidate, wish)
        if method is None and view is None:
            continue

        layout = resolver.resolve_layout(candidate, wish)
        logger.debug(
            "%s %r -> method=%s view=%s layout=%s params=%r",
            node.__name__,
            path,
            method,
            view,
            layout.target if layout is not None else None,
            params,
        )
        return Action(
            node=node,
            wish=wish,
            engine=engine,
            method=method,
            view=view,
            layout=layout,
            params=params,
            options=options,
            request=request,
        )

    logger.debug("%s %r -> no action", node.__name__, path)
    return None
