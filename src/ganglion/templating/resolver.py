"""Template lookup — views and layouts found on disk by glob.

Views live under ``<root>/<view_dir>/<view_root>/<name>`` and layouts
under ``<root>/<layout_dir>/<layout_root>/<name>``. The file extension
depends on the requested format and its render handler. For the ``rss``
wish handled by kida, ``list`` matches (in this order)::

    list.rss.kida  list.rss.html  list.rss.xhtml  list.kida  list.html  list.xhtml

Any path element can hold alternatives (several roots, say); they are
tried in the order given. ``__`` in a name maps to a subdirectory, so the
``foo__bar`` action uses ``foo/bar.html``.

Lookups hit the filesystem on every request so template edits and new
files show up immediately. Pass a :class:`TemplateCache` to trade that
for speed.
"""

from __future__ import annotations

import glob
import itertools
import logging
import os
import re
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ganglion.action import Layout, LayoutKind
from ganglion.config import AppConfig
from ganglion.registry import NodeRegistry, default_location
from ganglion.templating.engines import exts_of

if TYPE_CHECKING:
    from ganglion.node import Node
    from ganglion.provides import ProvideRegistry
    from ganglion.routing.arity import MethodTable

logger = logging.getLogger("ganglion.templating")

type PathElement = str | Path | Sequence[str | Path]

_SLASHES_RE = re.compile(r"/{2,}")

# Path segments that would step outside the view root
_UNSAFE_SEGMENTS = frozenset({"", ".", ".."})


def _alternatives(element: PathElement) -> list[str]:
    items = [element] if isinstance(element, str | Path) else list(element)
    return [str(item).replace("__", "/") for item in items]


def _is_safe_name(name: str) -> bool:
    """Whether *name* stays below its root once ``__`` becomes ``/``."""
    return not any(part in _UNSAFE_SEGMENTS for part in name.replace("__", "/").split("/"))


def _join(parts: Sequence[str]) -> str:
    absolute = bool(parts) and parts[0].startswith("/")
    path = "/".join(part.strip("/") for part in parts if part.strip("/"))
    path = _SLASHES_RE.sub("/", path)
    return "/" + path if absolute else path


def path_glob(*elements: PathElement) -> str:
    """Render *elements* as one brace glob, for display.

    Empty and root-only elements collapse away::

        path_glob(".", "view", "/", ["list", "index"])  # "./view/{list,index}"
    """
    groups: list[str] = []
    for element in elements:
        alternatives = [alt for alt in _alternatives(element) if alt.strip("/")]
        if not alternatives:
            continue
        if len(alternatives) == 1:
            groups.append(alternatives[0])
        else:
            groups.append("{" + ",".join(alternatives) + "}")
    return _join(groups)


def expand(*elements: PathElement) -> list[str]:
    """Brace-expand *elements* into concrete paths, in alternation order.

    ``glob`` has no brace syntax, so each combination becomes its own
    pattern::

        expand(["a", "b"], "view", "x")  # ["a/view/x", "b/view/x"]
    """
    paths: list[str] = []
    for combination in itertools.product(*(_alternatives(e) for e in elements)):
        path = _join(combination)
        if path not in paths:
            paths.append(path)
    return paths


class TemplateCache:
    """Opt-in memo of template lookups. Thread-safe; clear it to pick up new files."""

    __slots__ = ("_found", "_lock")

    def __init__(self) -> None:
        self._found: dict[tuple[str, ...], str | None] = {}
        self._lock = threading.Lock()

    def get(self, key: tuple[str, ...]) -> tuple[bool, str | None]:
        with self._lock:
            if key in self._found:
                return True, self._found[key]
            return False, None

    def put(self, key: tuple[str, ...], value: str | None) -> None:
        with self._lock:
            self._found[key] = value

    def clear(self) -> None:
        with self._lock:
            self._found.clear()

    def __len__(self) -> int:
        return len(self._found)


class TemplateResolver:
    """Finds views and layouts for one node.

    Usage::

        resolver = TemplateResolver(Blog, config=config, registry=registry)
        resolver.resolve_view("show", "html")   # Path("./view/blog/show.html")
        resolver.resolve_layout("show", "html") # Layout(LayoutKind.LAYOUT, Path(...))
    """

    __slots__ = ("cache", "config", "methods", "node", "provides", "registry")

    def __init__(
        self,
        node: type[Node],
        *,
        config: AppConfig,
        registry: NodeRegistry,
        methods: MethodTable | None = None,
        provides: ProvideRegistry | None = None,
        cache: TemplateCache | None = None,
    ) -> None:
        self.node = node
        self.config = config
        self.registry = registry
        self.methods = methods
        self.provides = provides if provides is not None else node.provide_registry()
        self.cache = cache

    def for_node(self, node: type[Node]) -> TemplateResolver:
        """A resolver for another node sharing this one's config and cache."""
        return TemplateResolver(node, config=self.config, registry=self.registry, cache=self.cache)

    # -- Search paths --

    @property
    def roots(self) -> list[str]:
        root = self.config.root
        return [str(item) for item in root] if isinstance(root, tuple) else [str(root)]

    @property
    def view_roots(self) -> PathElement:
        if self.node.view_root is not None:
            return self.node.view_root
        return self.registry.to(self.node) or default_location(self.node)

    # -- Globbing --

    def suffixes(self, wish: str) -> list[str] | None:
        """Filename suffixes to try for *wish*, most specific first.

        ``None`` when the wish has no handler or its handler recognises no
        file extensions (inline transforms).
        """
        entry = self.provides.entry(wish)
        if entry is None:
            return None
        extensions = exts_of(entry.handler)
        if not extensions:
            return None
        prefixes = [*(f"{name}." for name in entry.names), ""]
        return [f".{prefix}{ext}" for prefix in prefixes for ext in extensions]

    def ext_glob(self, wish: str) -> str | None:
        """The extension part of the glob for *wish*, e.g. ``{html.,}{kida,html}``."""
        entry = self.provides.entry(wish)
        if entry is None or not exts_of(entry.handler):
            return None
        prefixes = ",".join(f"{name}." for name in entry.names)
        return f"{{{prefixes},}}{{{','.join(exts_of(entry.handler))}}}"

    def locate(self, elements: Sequence[PathElement], wish: str) -> Path | None:
        """Find the template for *elements* and *wish*.

        Returns the first match. More than one match is not an error but is
        logged, since which one wins depends on alternation order and
        filesystem enumeration order.
        """
        suffixes = self.suffixes(wish)
        if suffixes is None:
            return None
        bases = expand(*elements)

        key = (*bases, "|", *suffixes)
        if self.cache is not None:
            hit, value = self.cache.get(key)
            if hit:
                return Path(value) if value is not None else None

        found: list[str] = []
        for base in bases:
            for suffix in suffixes:
                for match in glob.glob(base + suffix):
                    if match not in found and os.path.isfile(match):
                        found.append(match)

        if len(found) > 1:
            pattern = f"{path_glob(*elements)}.{self.ext_glob(wish)}"
            logger.warning("%d views found for %r", len(found), pattern)

        first = found[0] if found else None
        if self.cache is not None:
            self.cache.put(key, first)
        return Path(first) if first is not None else None

    # -- Views and layouts --

    def resolve_view(self, name: str, wish: str, *, follow_aliases: bool = True) -> Path | None:
        """Find the view for action *name*.

        An alias for *name* sends the lookup to its source view (and source
        node) instead. Aliases are followed one level only.
        """
        if follow_aliases:
            alias = self.node.view_aliases().get(name)
            if alias is not None:
                source, source_node = alias
                resolver = self
                if source_node is not None and source_node is not self.node:
                    resolver = self.for_node(source_node)
                return resolver.resolve_view(source, wish, follow_aliases=False)

        if not _is_safe_name(name):
            logger.debug("Refusing view name %r", name)
            return None
        elements = [self.roots, self.config.view_dir, self.view_roots, glob.escape(name)]
        return self.locate(elements, wish)

    def resolve_layout(self, name: str, wish: str) -> Layout | None:
        """Find the layout wrapping action *name* for *wish*, if any.

        The layout name is looked up as a layout file, then as a view, then
        as an action method taking no params.
        """
        spec = self.node.layout
        if spec is None:
            return None
        if callable(spec):
            spec = spec(name, wish)
            if not spec:
                return None
        layout = str(spec)

        elements = [
            self.roots,
            self.config.layout_dir,
            self.node.layout_root,
            glob.escape(layout),
        ]
        found = self.locate(elements, wish)
        if found is not None:
            return Layout(LayoutKind.LAYOUT, found)

        found = self.resolve_view(layout, wish)
        if found is not None:
            return Layout(LayoutKind.VIEW, found)

        if self.methods is not None and self.methods.match(layout, ()) is not None:
            return Layout(LayoutKind.METHOD, layout)
        return None
