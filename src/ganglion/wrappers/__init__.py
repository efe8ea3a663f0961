"""Wrappers — cross-cutting code around every action, no inheritance required.

A wrapper is any callable matching:
    async def wrapper(action: Action, next: Next) -> Result

Built-in wrappers:
    Aspect -- before/after hooks keyed by action name
    log_action -- Debug log line per action with timing
"""

from ganglion.wrappers.builtin import Aspect, log_action
from ganglion.wrappers.chain import call_wrapped, chain_for, compose
from ganglion.wrappers.protocol import Next, Wrapper

__all__ = [
    "Aspect",
    "Next",
    "Wrapper",
    "call_wrapped",
    "chain_for",
    "compose",
    "log_action",
]
