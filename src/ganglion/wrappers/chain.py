"""Wrapper chain composition.

``compose((w1, w2))`` builds ``w1(action, → w2(action, → body))``: the
first wrapper is outermost and runs first and last, the last wrapper sits
right next to the action body.

Chains are static configuration, so each distinct wrapper tuple is
composed once and reused.
"""

from __future__ import annotations

import functools
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ganglion._internal.invoke import invoke
from ganglion.wrappers.protocol import Next, Wrapper

if TYPE_CHECKING:
    from ganglion.action import Action
    from ganglion.http.response import Result


async def run_body(action: Action) -> Result:
    """The innermost link: the action body itself."""
    return await action.render()


def compose(wrappers: Sequence[Wrapper], body: Next = run_body) -> Next:
    """Fold *wrappers* around *body*, first wrapper outermost."""
    handler = body
    for wrapper in reversed(wrappers):
        inner = handler

        async def link(action: Action, _wrapper: Any = wrapper, _next: Next = inner) -> Result:
            return await invoke(_wrapper, action, _next)

        handler = link
    return handler


def chain_for(wrappers: tuple[Wrapper, ...]) -> Next:
    """The composed chain for *wrappers*, built once per distinct tuple.

    Tuples holding an unhashable wrapper are composed on every call.
    """
    try:
        hash(wrappers)
    except TypeError:
        return compose(wrappers)
    return _cached_chain(wrappers)


@functools.lru_cache(maxsize=256)
def _cached_chain(wrappers: tuple[Wrapper, ...]) -> Next:
    return compose(wrappers)


async def call_wrapped(action: Action) -> Result:
    """Run *action* through its node's wrapper chain."""
    return await chain_for(tuple(action.node.wrappers))(action)
