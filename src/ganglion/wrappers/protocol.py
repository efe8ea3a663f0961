"""Wrapper protocol and Next type alias.

A wrapper is any callable matching::

    async def my_wrapper(action: Action, next: Next) -> Result: ...

No base class required. The framework checks the shape, not the lineage.

Calling ``await next(action)`` runs the rest of the chain and then the
action body. A wrapper may work before and after that call, pass a
modified action on, or not call ``next`` at all to answer by itself.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ganglion.action import Action
    from ganglion.http.response import Result

# The rest of the chain, ending in the action body
type Next = Callable[[Action], Awaitable[Result]]


class Wrapper(Protocol):
    """Protocol for action wrappers.

    Accepts both functions and callable objects::

        # Function wrapper
        async def timing(action: Action, next: Next) -> Result:
            start = time.monotonic()
            result = await next(action)
            logger.info("%s took %.3fs", action.method, time.monotonic() - start)
            return result

        # Class wrapper
        class Cache:
            async def __call__(self, action: Action, next: Next) -> Result:
                ...

    Sync callables work too; their return value is used as the result.
    """

    def __call__(self, action: Action, next: Next) -> Any: ...
