"""Provides — which formats a node answers and how it renders each one.

The format ("wish") of a request comes from the path's trailing
extension: ``/list.rss`` asks for ``rss``, ``/list`` for the default
``html``. Each provided format names its render handler and, optionally,
an explicit content type.

Provides are declared per node class and inherited; a subclass entry for
the same format wins over its ancestor's.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from ganglion.errors import ConfigurationError
from ganglion.templating.engines import (
    EngineRegistry,
    Handler,
    TemplateEngine,
    Transform,
    default_engines,
)

DEFAULT_FORMAT = "html"


@dataclass(frozen=True, slots=True)
class Provide:
    """Declarative provide, for a node's ``provides`` class attribute.

    Usage::

        class Articles(Node):
            provides = {
                "rss": Provide(engine="kida", content_type="application/rss+xml"),
                "json": Provide(transform=to_json, content_type="application/json"),
            }
    """

    engine: str | TemplateEngine | None = None
    transform: Callable[..., Any] | None = None
    content_type: str | None = None
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ProvideEntry:
    """A registered format: its handler, content type, and alias names."""

    format: str
    handler: Handler
    content_type: str | None = None
    aliases: tuple[str, ...] = ()

    @property
    def names(self) -> tuple[str, ...]:
        """The format name followed by its aliases."""
        return (self.format, *self.aliases)


def build_entry(
    format: str,
    engine: str | TemplateEngine | None = None,
    *,
    transform: Callable[..., Any] | None = None,
    content_type: str | None = None,
    aliases: Iterable[str] = (),
    engines: EngineRegistry = default_engines,
) -> ProvideEntry:
    """Turn provide arguments into a :class:`ProvideEntry`.

    Raises ``ConfigurationError`` when neither an engine nor a transform is
    given, or when the named engine is not registered.
    """
    handler: Handler | None
    if transform is not None:
        handler = transform if isinstance(transform, Transform) else Transform(transform)
    elif isinstance(engine, str):
        handler = engines.get(engine)
        if handler is None:
            msg = (
                f"Unknown template engine {engine!r} for format {format!r}. "
                f"Registered engines: {', '.join(engines.names()) or 'none'}."
            )
            raise ConfigurationError(msg)
    else:
        handler = engine

    if handler is None:
        msg = f"Provide for format {format!r} needs an engine or a transform."
        raise ConfigurationError(msg)

    return ProvideEntry(
        format=format.lower(),
        handler=handler,
        content_type=content_type,
        aliases=tuple(alias.lower() for alias in aliases),
    )


class ProvideTable:
    """The provides declared directly on one node class.

    ``configured`` is set by any explicit registration. A node class with no
    explicitly configured ancestor gets the default ``html`` entry
    registered implicitly when it is defined.
    """

    __slots__ = ("_entries", "configured")

    def __init__(self) -> None:
        self._entries: dict[str, ProvideEntry] = {}
        self.configured = False

    def register(self, entry: ProvideEntry, *, explicit: bool = True) -> None:
        """Store *entry* under its format name."""
        self._entries[entry.format] = entry
        if explicit:
            self.configured = True

    def __iter__(self) -> Iterator[ProvideEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


class ProvideRegistry:
    """Merged provides of a node class and its ancestors.

    Built from the per-class tables ordered root first, so later (more
    derived) tables override earlier ones on format collisions.
    """

    __slots__ = ("_entries",)

    def __init__(self, tables: Iterable[ProvideTable]) -> None:
        entries: dict[str, ProvideEntry] = {}
        for table in tables:
            for entry in table:
                entries[entry.format] = entry
        self._entries = entries

    def entries(self) -> Mapping[str, ProvideEntry]:
        """All provided formats, descendant entries taking precedence."""
        return dict(self._entries)

    def entry(self, wish: str) -> ProvideEntry | None:
        """The entry for *wish*, matching format names and aliases."""
        wish = wish.lower()
        found = self._entries.get(wish)
        if found is not None:
            return found
        for candidate in self._entries.values():
            if wish in candidate.aliases:
                return candidate
        return None

    def handler(self, wish: str) -> Handler | None:
        """The render handler for *wish*, if provided."""
        found = self.entry(wish)
        return found.handler if found is not None else None

    def content_type_for(self, wish: str) -> str | None:
        """The explicit content type registered for *wish*, if any."""
        found = self.entry(wish)
        return found.content_type if found is not None else None

    def resolve_extension(self, path: str) -> tuple[str, str, Handler | None]:
        """Split a trailing format extension off *path*.

        Returns ``(name, wish, handler)``. The first provided format (or
        alias) that *path* ends with, case-insensitively, wins; otherwise
        the path is returned whole with the default ``html`` wish::

            registry.resolve_extension("/list.rss")  # ("/list", "rss", <kida>)
            registry.resolve_extension("/list")      # ("/list", "html", <kida>)
        """
        lowered = path.lower()
        for entry in self._entries.values():
            for name in entry.names:
                suffix = f".{name}"
                if lowered.endswith(suffix) and len(path) > len(suffix):
                    return path[: -len(suffix)], entry.format, entry.handler
        return path, DEFAULT_FORMAT, self.handler(DEFAULT_FORMAT)

    def __contains__(self, wish: object) -> bool:
        return isinstance(wish, str) and self.entry(wish) is not None

    def __len__(self) -> int:
        return len(self._entries)
