"""Ganglion — self-contained dispatch nodes with conventional views.

A node class answers every path below its mapped prefix. Public methods
are actions, path segments become their arguments, and templates found by
naming convention render the result.

Basic usage::

    from ganglion import App, Node

    class Hello(Node):
        def index(self):
            return "Hello, World!"

        def greet(self, name):
            return {"name": name}   # renders view/hello/greet.html

    app = App()
    app.map("/hello", Hello)

Serve ``app`` with any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "Action",
    "App",
    "AppConfig",
    "Aspect",
    "ConfigurationError",
    "GanglionError",
    "HTTPError",
    "Next",
    "Node",
    "NotFound",
    "Provide",
    "Redirect",
    "Rendered",
    "Request",
    "Response",
    "Wrapper",
    "get_request",
    "log_action",
    "respond",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import ganglion`` fast while providing a clean top-level API.
    """
    if name == "App":
        from ganglion.app import App

        return App

    if name == "AppConfig":
        from ganglion.config import AppConfig

        return AppConfig

    if name == "Node":
        from ganglion.node import Node

        return Node

    if name == "Action":
        from ganglion.action import Action

        return Action

    if name == "Provide":
        from ganglion.provides import Provide

        return Provide

    if name == "Request":
        from ganglion.http.request import Request

        return Request

    if name in ("Response", "Redirect", "Rendered", "respond"):
        from ganglion.http import response as _resp

        return getattr(_resp, name)

    if name in ("Aspect", "Next", "Wrapper", "log_action"):
        import ganglion.wrappers as _wrappers

        return getattr(_wrappers, name)

    if name == "get_request":
        from ganglion.context import get_request

        return get_request

    if name in ("ConfigurationError", "GanglionError", "HTTPError", "NotFound"):
        from ganglion import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
