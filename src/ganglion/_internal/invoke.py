"""Invoke helpers — call sync or async callables uniformly.

Action methods, wrappers, and ``action_missing`` overrides can be ``def``
or ``async def``. Any code that calls user-provided code goes through this
helper so the sync/async check lives in exactly one place.

Usage::

    from ganglion._internal.invoke import invoke

    result = await invoke(func, *args, **kwargs)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately
        def index(self):
            return "hello"

        # async: the coroutine is awaited
        async def index(self):
            return await load_greeting()
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
