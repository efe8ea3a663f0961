"""Action — everything needed to answer one request, and the body that does it.

The assembler produces an :class:`Action` per request. Dispatch runs its
:meth:`~Action.render` body through the node's wrapper chain.

The body:

1. Instantiates the node and calls the action method with the leftover
   path segments (sync or async).
2. Stops early if the method returned ``respond(...)``, a ``Redirect``, or
   a ``Response``; that value becomes the result.
3. Renders the view through the format's handler. Without a view, the
   method's return value is rendered instead.
4. Renders the layout, if any, with the body available as ``content``
   (marked safe, so autoescaping leaves it alone).
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from kida.template import Markup

from ganglion._internal.invoke import invoke
from ganglion.http.response import Redirect, Rendered, Response, Result
from ganglion.templating.engines import Handler, Transform

if TYPE_CHECKING:
    from ganglion.http.request import Request
    from ganglion.node import Node


class LayoutKind(enum.Enum):
    """Where a layout was found."""

    LAYOUT = "layout"  # a file in the layout directory
    VIEW = "view"  # an ordinary view file
    METHOD = "method"  # an action method of the node


@dataclass(frozen=True, slots=True)
class Layout:
    """A resolved layout: a template path, or a method name for ``METHOD``."""

    kind: LayoutKind
    target: Path | str


@dataclass(frozen=True, slots=True)
class ActionOptions:
    """Response options carried by an action."""

    content_type: str | None = None


@dataclass(frozen=True, slots=True)
class Action:
    """A resolved request: which method, view, layout, params and format.

    At least one of ``method`` and ``view`` is set. Never mutated; use
    :func:`dataclasses.replace` for variants.
    """

    node: type[Node]
    wish: str
    engine: Handler
    method: str | None = None
    view: Path | None = None
    layout: Layout | None = None
    params: tuple[str, ...] = ()
    options: ActionOptions = field(default_factory=ActionOptions)
    request: Request | None = None
    variables: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    async def render(self) -> Result:
        """Run the action body and return its result variant."""
        instance = self.node(action=self, request=self.request)

        value: Any = None
        if self.method is not None:
            value = await invoke(getattr(instance, self.method), *self.params)
            if isinstance(value, Rendered | Redirect):
                return value
            if isinstance(value, Response):
                return Rendered(value)

        context = self.binding(instance, value)
        body = self._render_body(context, value)

        if self.layout is None:
            return Rendered(body)
        return await self._wrap_in_layout(self.layout, context, body)

    def binding(self, instance: Node, value: Any) -> dict[str, Any]:
        """Template context: public instance attributes, the method's mapping, and helpers."""
        context: dict[str, Any] = dict(self.variables)
        context.update(
            (name, attr) for name, attr in vars(instance).items() if not name.startswith("_")
        )
        if isinstance(value, Mapping):
            context.update(value)
        context.update(node=instance, action=self, request=self.request)
        return context

    def _render_body(self, context: Mapping[str, Any], value: Any) -> Any:
        engine = self.engine
        if isinstance(engine, Transform):
            source = self.view.read_text(encoding="utf-8") if self.view is not None else value
            return engine(self, source)
        if self.view is not None:
            return engine.render(self.view, context)
        if isinstance(value, str):
            return engine.render_string(value, context)
        if value is None or isinstance(value, Mapping):
            return ""
        return value if isinstance(value, bytes) else str(value)

    async def _wrap_in_layout(
        self, layout: Layout, context: Mapping[str, Any], body: Any
    ) -> Result:
        if isinstance(body, str):
            body = Markup(body)
        variables = MappingProxyType({**context, "content": body})
        if layout.kind is LayoutKind.METHOD:
            outer = replace(
                self, method=str(layout.target), view=None, layout=None, params=(), variables=variables
            )
        else:
            outer = replace(
                self, method=None, view=Path(layout.target), layout=None, params=(), variables=variables
            )
        return await outer.render()
