"""Built-in wrappers: action logging and before/after aspects."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from ganglion._internal.invoke import invoke
from ganglion.wrappers.protocol import Next

if TYPE_CHECKING:
    from ganglion.action import Action
    from ganglion.http.response import Result

logger = logging.getLogger("ganglion.action")

type Hook = Callable[[Any], Any]


async def log_action(action: Action, next: Next) -> Result:
    """Log every action at DEBUG with its method, view, and timing.

    Usage::

        class Blog(Node):
            wrappers = (log_action,)
    """
    start = time.perf_counter()
    result = await next(action)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.debug(
        "%s.%s [%s] view=%s %.1fms",
        action.node.__name__,
        action.method or "-",
        action.wish,
        action.view,
        elapsed_ms,
    )
    return result


class Aspect:
    """Run hooks before and after specific actions.

    Hooks receive the :class:`Action` and are keyed by action name
    (the method name, or the view name for view-only actions). ``"*"``
    matches every action. Hooks may be sync or async; their return values
    are ignored.

    Usage::

        audit = Aspect()
        audit.before("delete", lambda action: check_admin(action.request))
        audit.after("*", lambda action: metrics.count(action.method))

        class Posts(Node):
            wrappers = (audit,)
    """

    __slots__ = ("_after", "_before")

    def __init__(self) -> None:
        self._before: dict[str, list[Hook]] = {}
        self._after: dict[str, list[Hook]] = {}

    def before(self, names: str | Iterable[str], hook: Hook) -> Hook:
        """Register *hook* to run before each action in *names*."""
        for name in _names(names):
            self._before.setdefault(name, []).append(hook)
        return hook

    def after(self, names: str | Iterable[str], hook: Hook) -> Hook:
        """Register *hook* to run after each action in *names*."""
        for name in _names(names):
            self._after.setdefault(name, []).append(hook)
        return hook

    def around(self, names: str | Iterable[str], hook: Hook) -> Hook:
        """Register *hook* both before and after."""
        self.before(names, hook)
        return self.after(names, hook)

    async def __call__(self, action: Action, next: Next) -> Result:
        name = _action_name(action)
        for hook in self._hooks(self._before, name):
            await invoke(hook, action)
        result = await next(action)
        for hook in self._hooks(self._after, name):
            await invoke(hook, action)
        return result

    @staticmethod
    def _hooks(table: dict[str, list[Hook]], name: str) -> list[Hook]:
        return [*table.get("*", ()), *table.get(name, ())]


def _names(names: str | Iterable[str]) -> list[str]:
    return [names] if isinstance(names, str) else list(names)


def _action_name(action: Action) -> str:
    if action.method is not None:
        return action.method
    if action.view is not None:
        return action.view.name.split(".", 1)[0]
    return ""
