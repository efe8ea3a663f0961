"""Node registry — which node answers which path prefix.

An explicit object held by the :class:`~ganglion.app.App` instead of a
process-wide table. Mapping happens during setup; lookups at request time
only read.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import TYPE_CHECKING

from ganglion.errors import ConfigurationError, NotFound

if TYPE_CHECKING:
    from ganglion.node import Node

logger = logging.getLogger("ganglion.registry")

_CAMEL_RE = re.compile(r"\B[A-Z][^A-Z]")


def default_location(node: type[Node]) -> str:
    """Derive a mapping from the class name: ``FooBar`` → ``/foo_bar``."""
    return "/" + _CAMEL_RE.sub(lambda match: "_" + match.group(0), node.__name__).lower()


def normalize_location(location: str) -> str:
    """``"blog/"`` → ``"/blog"``; the root stays ``"/"``."""
    return "/" + location.strip("/")


class NodeRegistry:
    """Path prefix ↔ node class, with longest-prefix lookup.

    Usage::

        registry = NodeRegistry()
        registry.map("/", Home)
        registry.map("/blog", Blog)
        registry.at("/blog/show/1")   # (Blog, "/blog", "/show/1")
        registry.to(Blog)             # "/blog"
    """

    __slots__ = ("_by_location",)

    def __init__(self) -> None:
        self._by_location: dict[str, type[Node]] = {}

    def map(self, location: str, node: type[Node]) -> None:
        """Map *node* at *location*.

        Raises ``ConfigurationError`` if another node already holds it.
        Remapping a node moves it.
        """
        location = normalize_location(location)
        current = self._by_location.get(location)
        if current is not None and current is not node:
            msg = (
                f"Location {location!r} is already mapped to {current.__name__}; "
                f"cannot map {node.__name__} there too."
            )
            raise ConfigurationError(msg)
        for old_location, mapped in list(self._by_location.items()):
            if mapped is node:
                del self._by_location[old_location]
        self._by_location[location] = node
        logger.debug("Mapped %s at %r", node.__name__, location)

    def mount(self, *nodes: type[Node]) -> None:
        """Map each node at its default location.

        A single node (with nothing else mapped) goes to ``/``.
        """
        if len(nodes) == 1 and not self._by_location:
            self.map("/", nodes[0])
            return
        for node in nodes:
            self.map(default_location(node), node)

    def to(self, node: type[Node]) -> str | None:
        """The location *node* is mapped to, if any."""
        for location, mapped in self._by_location.items():
            if mapped is node:
                return location
        return None

    def at(self, path: str) -> tuple[type[Node], str, str]:
        """Find the node for *path* by longest matching prefix.

        Returns ``(node, prefix, remainder)`` where ``remainder`` is the
        part of the path below the prefix (``"/"`` at least).

        Raises ``NotFound`` if no mapped prefix covers *path*.
        """
        path = path or "/"
        for location in sorted(self._by_location, key=len, reverse=True):
            if location == "/":
                return self._by_location[location], "", path
            if path == location or path.startswith(location + "/"):
                return self._by_location[location], location, path[len(location) :] or "/"
        raise NotFound(f"No node mapped for {path!r}")

    def to_dict(self) -> dict[str, str]:
        """Location → node name, for logging and introspection."""
        return {location: node.__name__ for location, node in self._by_location.items()}

    def __iter__(self) -> Iterator[tuple[str, type[Node]]]:
        return iter(self._by_location.items())

    def __len__(self) -> int:
        return len(self._by_location)

    def __contains__(self, node: object) -> bool:
        return node in self._by_location.values()
