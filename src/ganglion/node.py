"""Node — a self-contained dispatch unit.

Subclass :class:`Node` and every public method becomes an action. A node
is mapped to a path prefix and resolves everything below that prefix on
its own: the action method, the view template, the layout, and the
response format.

Basic usage::

    from ganglion import App, Node

    class Blog(Node):
        layout = "main"

        def index(self):
            return "Hello, World!"

        def show(self, slug):
            return {"post": load(slug)}

    app = App()
    app.map("/blog", Blog)

``/blog`` runs ``index``; ``/blog/show/intro`` runs ``show("intro")`` and
renders ``view/blog/show.html`` (when it exists) inside ``layout/main.html``.

Configuration lives on the class and is inherited by subclasses. It is
written at definition time only; requests never mutate it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from ganglion.http.response import Response
from ganglion.provides import (
    DEFAULT_FORMAT,
    Provide,
    ProvideEntry,
    ProvideRegistry,
    ProvideTable,
    build_entry,
)
from ganglion.templating.engines import EngineRegistry, TemplateEngine, default_engines

if TYPE_CHECKING:
    from ganglion.action import Action
    from ganglion.http.request import Request
    from ganglion.server.dispatch import Dispatcher
    from ganglion.wrappers.protocol import Wrapper

# Engine registered for html when a node declares no provides of its own
DEFAULT_ENGINE = "kida"

type LayoutSpec = str | Callable[[str, str], str | None] | None
type AliasSpec = str | tuple[str, type[Node] | None]


class Node:
    """Base class for dispatch units.

    Class attributes (all optional, all inherited):

    - ``provides``: format → :class:`Provide` (or an engine name). Declaring
      any provides replaces the implicit ``html`` → kida default.
    - ``layout``: layout name, or ``callable(action_name, wish)`` returning
      a name or ``None``.
    - ``aliases``: view name → source view name, or ``(name, OtherNode)``.
    - ``wrappers``: wrapper chain run around every action, outermost first.
    - ``view_root`` / ``layout_root``: template subdirectories (the view
      root defaults to the node's mapped path).
    - ``expose``: helper mixins whose public methods count as actions.

    The classmethods ``provide``, ``set_layout``, ``alias_view``, ``wrap``
    and ``add_wrapper`` change the same settings after the class exists.
    """

    provides: ClassVar[Mapping[str, Provide | str]] = {}
    layout: ClassVar[LayoutSpec] = None
    aliases: ClassVar[Mapping[str, AliasSpec]] = {}
    wrappers: ClassVar[tuple[Wrapper, ...]] = ()
    view_root: ClassVar[str | tuple[str, ...] | None] = None
    layout_root: ClassVar[str | tuple[str, ...]] = "/"
    expose: ClassVar[tuple[type, ...]] = ()
    engines: ClassVar[EngineRegistry] = default_engines

    _provide_table: ClassVar[ProvideTable] = ProvideTable()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table = ProvideTable()
        cls._provide_table = table
        for format, spec in cls.__dict__.get("provides", {}).items():
            table.register(_entry_from_spec(format, spec, cls.engines))
        if not any(ancestor.configured for ancestor in _provide_tables(cls)):
            default = build_entry(DEFAULT_FORMAT, DEFAULT_ENGINE, engines=cls.engines)
            table.register(default, explicit=False)

    def __init__(self, action: Action | None = None, request: Request | None = None) -> None:
        self.action = action
        self.request = request

    # -- Configuration --

    @classmethod
    def provide(
        cls,
        format: str,
        engine: str | TemplateEngine | None = None,
        *,
        transform: Callable[..., Any] | None = None,
        content_type: str | None = None,
        aliases: tuple[str, ...] = (),
    ) -> None:
        """Provide *format* through a template engine or an inline transform.

        Given ``provide("rss", "kida")``, a request to ``/list.rss`` looks
        for ``list.rss.<ext>`` first and ``list.<ext>`` second, for every
        extension kida recognises::

            Articles.provide("yaml", transform=lambda action, value: yaml.dump(value),
                             content_type="text/yaml")

        Raises ``ConfigurationError`` if neither engine nor transform is given.
        """
        entry = build_entry(
            format,
            engine,
            transform=transform,
            content_type=content_type,
            aliases=aliases,
            engines=cls.engines,
        )
        cls._provide_table.register(entry)

    @classmethod
    def set_layout(
        cls,
        name: str | None = None,
        when: Callable[[str, str], Any] | None = None,
    ) -> LayoutSpec:
        """Set the node's layout.

        - ``set_layout("main")``: always use ``main``.
        - ``set_layout(when=func)``: ``func(action_name, wish)`` returns the
          layout name, or ``None`` for no layout.
        - ``set_layout("main", when=func)``: use ``main`` when ``func`` is truthy.
        """
        if name is not None and when is not None:
            layout_name, predicate = name, when
            cls.layout = staticmethod(
                lambda action_name, wish: layout_name if predicate(action_name, wish) else None
            )
        elif name is not None:
            cls.layout = name
        elif when is not None:
            cls.layout = staticmethod(when)
        return cls.layout

    @classmethod
    def alias_view(cls, to: str, source: str, node: type[Node] | None = None) -> None:
        """Render view *source* (of *node*, if given) whenever *to* is wanted.

        Aliases are inherited and resolve exactly one level deep.
        """
        own = dict(cls.__dict__.get("aliases", {}))
        own[to] = (source, node)
        cls.aliases = own

    @classmethod
    def wrap(cls, *wrappers: Wrapper) -> None:
        """Replace the wrapper chain. The first wrapper is the outermost."""
        cls.wrappers = tuple(wrappers)

    @classmethod
    def add_wrapper(cls, wrapper: Wrapper) -> None:
        """Append *wrapper* as the innermost link of the chain."""
        cls.wrappers = (*cls.wrappers, wrapper)

    # -- Inherited lookups --

    @classmethod
    def provide_registry(cls) -> ProvideRegistry:
        """Provides of this node merged with its ancestors'."""
        return ProvideRegistry(_provide_tables(cls))

    @classmethod
    def view_aliases(cls) -> dict[str, tuple[str, type[Node] | None]]:
        """Alias table merged across the MRO, descendants winning."""
        merged: dict[str, tuple[str, type[Node] | None]] = {}
        for owner in reversed(cls.__mro__):
            for target, spec in owner.__dict__.get("aliases", {}).items():
                merged[target] = (spec, None) if isinstance(spec, str) else spec
        return merged

    # -- Fallback --

    @classmethod
    def action_missing(cls, path: str, dispatcher: Dispatcher) -> Any:  # noqa: ARG003
        """Answer a path no action resolves to. Override to customise.

        May be sync or async. An override can re-dispatch::

            @classmethod
            async def action_missing(cls, path, dispatcher):
                if path == "/not_found":
                    return super().action_missing(path, dispatcher)
                return await dispatcher.try_resolve(cls, "/not_found")
        """
        return Response(
            body=f"No action found at: {path!r}",
            status=404,
            content_type="text/plain",
        )


def _provide_tables(node: type[Node]) -> list[ProvideTable]:
    """Per-class provide tables of *node*'s MRO, root first."""
    return [
        owner.__dict__["_provide_table"]
        for owner in reversed(node.__mro__)
        if "_provide_table" in owner.__dict__
    ]


def _entry_from_spec(format: str, spec: Provide | str, engines: EngineRegistry) -> ProvideEntry:
    if isinstance(spec, str):
        return build_entry(format, spec, engines=engines)
    return build_entry(
        format,
        spec.engine,
        transform=spec.transform,
        content_type=spec.content_type,
        aliases=spec.aliases,
        engines=engines,
    )
