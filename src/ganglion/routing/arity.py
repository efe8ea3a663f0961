"""Method arity table — which action methods can take how many params.

Arity follows the signed convention::

    def index(self)                   # =>  0
    def index(self, a)                # =>  1
    def index(self, a=1)              # => -1  (zero or more)
    def index(self, a, *rest)         # => -2  (one or more)
    def index(self, a, b, *rest)      # => -3  (two or more)
    def index(self, a, b=2)           # => -2

A non-negative arity ``V`` accepts exactly ``V`` params. A negative arity
accepts at least ``-V - 1`` params.

The table is rebuilt from the class definition on every resolution, so
methods added or replaced at runtime (hot reload) are picked up without
any invalidation step. Each build returns a fresh immutable table; nothing
is shared between concurrent requests.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ganglion.node import Node

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)

# Class attributes that configure a node and are never actions
RESERVED_NAMES = frozenset({"layout"})


def arity_of(func: Callable[..., Any]) -> int | None:
    """Return the signed arity of an unbound method, ignoring ``self``.

    Returns ``None`` when the method cannot be dispatched to from a path
    (it has required keyword-only parameters).
    """
    parameters = list(inspect.signature(func).parameters.values())[1:]
    required = 0
    optional = False
    for param in parameters:
        if param.kind in _POSITIONAL:
            if param.default is inspect.Parameter.empty:
                required += 1
            else:
                optional = True
        elif param.kind is inspect.Parameter.VAR_POSITIONAL:
            optional = True
        elif param.kind is inspect.Parameter.KEYWORD_ONLY:
            if param.default is inspect.Parameter.empty:
                return None
    return -(required + 1) if optional else required


def accepts(arity: int, count: int) -> bool:
    """Whether a method of *arity* can be called with *count* params."""
    if arity >= 0:
        return count == arity
    return count >= -arity - 1


@dataclass(frozen=True, slots=True)
class MethodEntry:
    """One dispatchable method: its name, arity, and function."""

    name: str
    arity: int
    function: Callable[..., Any]


class MethodTable(Mapping[str, MethodEntry]):
    """Immutable mapping of action name to :class:`MethodEntry`.

    Usage::

        table = MethodTable.build(Blog)
        table.match("show", ("42",))   # "show" if show(self, id) exists
        table.arities                  # {"index": 0, "show": 1, ...}
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, MethodEntry]) -> None:
        self._entries: Mapping[str, MethodEntry] = MappingProxyType(dict(entries))

    @classmethod
    def build(cls, node: type[Node]) -> MethodTable:
        """Collect the public methods of *node* and its exposed helpers.

        Walks exposed helper classes first, then every ``Node`` subclass in
        the MRO from the root down, so a descendant's definition replaces
        an ancestor's method of the same name. Methods defined on ``Node``
        itself are never actions.
        """
        from ganglion.node import Node

        entries: dict[str, MethodEntry] = {}
        for owner in _owners(node, Node):
            for name, value in vars(owner).items():
                if name.startswith("_") or name in RESERVED_NAMES:
                    continue
                if not inspect.isfunction(value):
                    continue
                arity = arity_of(value)
                if arity is None:
                    entries.pop(name, None)
                    continue
                entries[name] = MethodEntry(name, arity, value)
        return cls(entries)

    # -- Mapping protocol --

    def __getitem__(self, name: str) -> MethodEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    # -- Lookup --

    @property
    def arities(self) -> dict[str, int]:
        """Method name to signed arity."""
        return {name: entry.arity for name, entry in self._entries.items()}

    def match(self, name: str, params: Sequence[str]) -> str | None:
        """Return *name* if it is an action that accepts ``len(params)`` params."""
        entry = self._entries.get(name)
        if entry is None:
            return None
        return name if accepts(entry.arity, len(params)) else None

    def function(self, name: str) -> Callable[..., Any] | None:
        """The recorded function for *name*, if it is an action."""
        entry = self._entries.get(name)
        return entry.function if entry is not None else None


def _owners(node: type[Node], base: type[Node]) -> list[type]:
    """Classes whose methods count as actions, lowest precedence first."""
    exposed = [helper for helper in node.__mro__ if helper in node.expose]
    higher = [cls for cls in node.__mro__ if issubclass(cls, base) and cls is not base]
    return [*reversed(exposed), *reversed(higher)]
