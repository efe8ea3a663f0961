"""Tests for ganglion.routing.resolve — assembling an Action for a path."""

import pytest

from ganglion.action import LayoutKind
from ganglion.config import AppConfig
from ganglion.errors import ConfigurationError
from ganglion.http.request import Request
from ganglion.node import Node
from ganglion.provides import Provide
from ganglion.registry import NodeRegistry
from ganglion.routing.resolve import resolve
from ganglion.templating.engines import RawEngine


class Pages(Node):
    provides = {
        "html": "raw",
        "txt": Provide(engine="raw", content_type="text/plain; charset=utf-8"),
    }

    def index(self):
        return "home"

    def show(self, slug):
        return slug

    def tagged(self, *tags):
        return ",".join(tags)


def _resolve(node: type[Node], path: str, config: AppConfig, **kwargs):
    return resolve(node, path, config=config, registry=NodeRegistry(), **kwargs)


class TestMethodActions:
    def test_root_is_index(self, config: AppConfig) -> None:
        action = _resolve(Pages, "/", config)
        assert action is not None
        assert action.method == "index"
        assert action.params == ()
        assert action.wish == "html"

    def test_params_from_remaining_segments(self, config: AppConfig) -> None:
        action = _resolve(Pages, "/show/intro", config)
        assert action is not None
        assert (action.method, action.params) == ("show", ("intro",))

    def test_arity_mismatch_is_not_found(self, config: AppConfig) -> None:
        assert _resolve(Pages, "/show", config) is None
        assert _resolve(Pages, "/show/a/b", config) is None

    def test_variadic_method(self, config: AppConfig) -> None:
        action = _resolve(Pages, "/tagged/a/b/c", config)
        assert action is not None
        assert action.params == ("a", "b", "c")

    def test_index_catches_params_when_it_accepts_them(self, config: AppConfig) -> None:
        class Catchall(Node):
            def index(self, *parts):
                return "/".join(parts)

        action = _resolve(Catchall, "/any/thing", config)
        assert action is not None
        assert (action.method, action.params) == ("index", ("any", "thing"))

    def test_most_specific_candidate_wins(self, config: AppConfig) -> None:
        class Nested(Node):
            def foo(self, bar):
                return bar

            def foo__bar(self):
                return "nested"

        action = _resolve(Nested, "/foo/bar", config)
        assert action is not None
        assert action.method == "foo__bar"

    def test_request_carried(self, config: AppConfig) -> None:
        request = Request(path="/show/x")
        action = _resolve(Pages, "/show/x", config, request=request)
        assert action is not None
        assert action.request is request


class TestViewActions:
    def test_view_without_method(self, write_files, config: AppConfig) -> None:
        write_files({"view/pages/about.htm": "About"})
        action = _resolve(Pages, "/about", config)
        assert action is not None
        assert action.method is None
        assert action.view is not None
        assert action.view.name == "about.htm"

    def test_view_without_method_takes_no_params(self, write_files, config: AppConfig) -> None:
        write_files({"view/pages/about.htm": "About"})
        assert _resolve(Pages, "/about/team", config) is None

    def test_needs_method(self, write_files, tmp_path) -> None:
        write_files({"view/pages/about.htm": "About"})
        config = AppConfig(root=str(tmp_path), needs_method=True)
        assert _resolve(Pages, "/about", config) is None
        assert _resolve(Pages, "/", config) is not None

    def test_method_and_view(self, write_files, config: AppConfig) -> None:
        write_files({"view/pages/show.htm": "Showing"})
        action = _resolve(Pages, "/show/x", config)
        assert action is not None
        assert action.method == "show"
        assert action.view is not None


class TestFormats:
    def test_extension_selects_wish_and_engine(self, config: AppConfig) -> None:
        action = _resolve(Pages, "/show/intro.txt", config)
        assert action is not None
        assert action.wish == "txt"
        assert action.params == ("intro",)
        assert isinstance(action.engine, RawEngine)

    def test_content_type_from_provide(self, config: AppConfig) -> None:
        action = _resolve(Pages, "/index.txt", config)
        assert action is not None
        assert action.options.content_type == "text/plain; charset=utf-8"

    def test_no_content_type_without_provide_option(self, config: AppConfig) -> None:
        action = _resolve(Pages, "/", config)
        assert action is not None
        assert action.options.content_type is None

    def test_missing_default_handler_is_configuration_error(self, config: AppConfig) -> None:
        class JsonOnly(Node):
            provides = {"json": Provide(transform=lambda action, value: "{}")}

            def index(self):
                return {}

        with pytest.raises(ConfigurationError):
            _resolve(JsonOnly, "/", config)
        assert _resolve(JsonOnly, "/index.json", config) is not None


class TestLayouts:
    def test_layout_resolved_for_candidate(self, write_files, config: AppConfig) -> None:
        class Site(Node):
            provides = {"html": "raw"}
            layout = "main"

            def index(self):
                return "body"

        write_files({"layout/main.htm": "frame"})
        action = _resolve(Site, "/", config)
        assert action is not None
        assert action.layout is not None
        assert action.layout.kind is LayoutKind.LAYOUT

    def test_layout_callable_gets_action_name(self, config: AppConfig) -> None:
        seen: list[tuple[str, str]] = []

        class Site(Node):
            def show(self, slug):
                return slug

        Site.set_layout(when=lambda name, wish: seen.append((name, wish)))
        _resolve(Site, "/show/x", config)
        assert seen == [("show", "html")]
