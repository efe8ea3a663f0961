"""Template engines and inline transforms — the render handlers of provides.

A node's provide table maps a format to one of two handler kinds:

- a :class:`TemplateEngine`, which knows its file extensions and renders a
  template file (or a template string) with a binding context;
- a :class:`Transform`, an inline ``(action, value) -> str`` callable that
  turns the action's value into the response body itself.

Engines are looked up by name in an :class:`EngineRegistry`. The default
registry knows ``kida`` (kida templates) and ``raw`` (verbatim files).
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from kida import Environment, FileSystemLoader

if TYPE_CHECKING:
    from ganglion.action import Action


@runtime_checkable
class TemplateEngine(Protocol):
    """Protocol for template engines.

    Any object with a ``name``, an ``extensions`` tuple, and the two render
    methods qualifies; no base class required.
    """

    name: str
    extensions: tuple[str, ...]

    def render(self, path: Path, context: Mapping[str, Any]) -> str:
        """Render the template file at *path*."""
        ...

    def render_string(self, source: str, context: Mapping[str, Any]) -> str:
        """Render *source* as template text."""
        ...


class Transform:
    """An inline render handler: ``func(action, value) -> str``.

    Recognises no template extensions, so a format provided by a transform
    never picks up a view file; the transform receives the method's return
    value directly::

        provides = {"json": Provide(transform=lambda action, value: json.dumps(value))}
    """

    __slots__ = ("func",)

    name = "transform"
    extensions: tuple[str, ...] = ()

    def __init__(self, func: Callable[[Action, Any], Any]) -> None:
        self.func = func

    def __call__(self, action: Action, value: Any) -> Any:
        return self.func(action, value)

    def __repr__(self) -> str:
        return f"Transform({self.func!r})"


type Handler = TemplateEngine | Transform


class KidaEngine:
    """Render templates with kida.

    One ``Environment`` per template directory, created on first use and
    kept for the life of the engine. ``auto_reload`` lets edited templates
    show up without a restart.

    Autoescaping is on by default. A layout receives the rendered view as
    ``content`` already marked safe, so it is not escaped twice.
    """

    __slots__ = ("_environments", "_inline", "_lock", "auto_reload", "autoescape")

    name = "kida"
    extensions: tuple[str, ...] = ("kida", "html", "xhtml")

    def __init__(self, *, autoescape: bool = True, auto_reload: bool = True) -> None:
        self.autoescape = autoescape
        self.auto_reload = auto_reload
        self._environments: dict[Path, Environment] = {}
        self._inline: Environment | None = None
        self._lock = threading.Lock()

    def _environment(self, directory: Path) -> Environment:
        with self._lock:
            env = self._environments.get(directory)
            if env is None:
                env = Environment(
                    loader=FileSystemLoader(str(directory)),
                    autoescape=self.autoescape,
                    auto_reload=self.auto_reload,
                )
                self._environments[directory] = env
            return env

    def render(self, path: Path, context: Mapping[str, Any]) -> str:
        """Render the template file at *path*."""
        template = self._environment(path.parent).get_template(path.name)
        return template.render(dict(context))

    def render_string(self, source: str, context: Mapping[str, Any]) -> str:
        """Render *source* as an inline kida template."""
        with self._lock:
            if self._inline is None:
                self._inline = Environment(autoescape=self.autoescape)
            env = self._inline
        return env.from_string(source).render(dict(context))


class RawEngine:
    """Serve template files verbatim. Strings pass through unchanged."""

    __slots__ = ()

    name = "raw"
    extensions: tuple[str, ...] = ("txt", "htm", "raw")

    def render(self, path: Path, context: Mapping[str, Any]) -> str:  # noqa: ARG002
        """Return the file contents of *path*."""
        return path.read_text(encoding="utf-8")

    def render_string(self, source: str, context: Mapping[str, Any]) -> str:  # noqa: ARG002
        """Return *source* unchanged."""
        return source


class EngineRegistry:
    """Name → engine lookup used when a provide names its engine.

    Names are case-insensitive. Thread safety: registration happens at
    import time; lookups only read.
    """

    __slots__ = ("_engines",)

    def __init__(self, engines: Iterable[TemplateEngine] = ()) -> None:
        self._engines: dict[str, TemplateEngine] = {}
        for engine in engines:
            self.register(engine)

    def register(self, engine: TemplateEngine, *, name: str | None = None) -> None:
        """Register *engine* under *name* (defaults to ``engine.name``)."""
        self._engines[(name or engine.name).lower()] = engine

    def get(self, name: str) -> TemplateEngine | None:
        """Return the engine registered as *name*, if any."""
        return self._engines.get(name.lower())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._engines

    def names(self) -> list[str]:
        """Registered engine names."""
        return sorted(self._engines)


def exts_of(handler: Handler | None) -> tuple[str, ...]:
    """File extensions a render handler recognises (none for transforms)."""
    if handler is None:
        return ()
    return tuple(handler.extensions)


default_engines = EngineRegistry([KidaEngine(), RawEngine()])
"""Registry consulted by ``Node.provide`` when an engine is given by name."""
