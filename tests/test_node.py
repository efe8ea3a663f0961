"""Tests for ganglion.node — class-level configuration and the action body."""

from ganglion.action import Action
from ganglion.http.request import Request
from ganglion.http.response import Redirect, Rendered, Response
from ganglion.node import Node
from ganglion.templating.engines import RawEngine


class Pages(Node):
    provides = {"html": "raw"}

    def index(self):
        self.title = "Index"
        self._hidden = "secret"
        return {"extra": 1}

    def go(self):
        return Redirect("/there")

    def full(self):
        return Response("full")


def _action(method: str | None, **kwargs) -> Action:
    return Action(node=Pages, wish="html", engine=RawEngine(), method=method, **kwargs)


class TestConfiguration:
    def test_set_layout_name(self) -> None:
        class Site(Node):
            pass

        Site.set_layout("main")
        assert Site.layout == "main"

    def test_set_layout_is_per_class(self) -> None:
        class Site(Node):
            pass

        class Sub(Site):
            pass

        Sub.set_layout("sub")
        assert Site.layout is None
        assert Sub.layout == "sub"

    def test_layout_inherited(self) -> None:
        class Site(Node):
            layout = "main"

        class Sub(Site):
            pass

        assert Sub.layout == "main"

    def test_alias_view_does_not_touch_parent(self) -> None:
        class Parent(Node):
            aliases = {"a": "b"}

        class Child(Parent):
            pass

        Child.alias_view("c", "d")
        assert Child.view_aliases() == {"a": ("b", None), "c": ("d", None)}
        assert Parent.view_aliases() == {"a": ("b", None)}

    def test_instance_holds_action_and_request(self) -> None:
        request = Request(path="/")
        action = _action("index", request=request)
        node = Pages(action=action, request=request)
        assert node.action is action
        assert node.request is request


class TestActionBody:
    async def test_binding_collects_public_state(self) -> None:
        action = _action("index")
        node = Pages(action=action)
        value = node.index()
        context = action.binding(node, value)
        assert context["title"] == "Index"
        assert context["extra"] == 1
        assert context["node"] is node
        assert context["action"] is action
        assert "_hidden" not in context

    async def test_mapping_value_without_view_renders_empty(self) -> None:
        assert await _action("index").render() == Rendered("")

    async def test_redirect_returned_as_is(self) -> None:
        assert await _action("go").render() == Redirect("/there")

    async def test_response_wrapped(self) -> None:
        assert await _action("full").render() == Rendered(Response("full"))

    async def test_view_only(self, write_files) -> None:
        root = write_files({"about.htm": "About"})
        result = await _action(None, view=root / "about.htm").render()
        assert result == Rendered("About")

    async def test_variables_visible_to_render(self, write_files) -> None:
        root = write_files({"page.htm": "static"})
        action = _action(None, view=root / "page.htm", variables={"content": "inner"})
        node = Pages(action=action)
        assert action.binding(node, None)["content"] == "inner"
