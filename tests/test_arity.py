"""Tests for ganglion.routing.arity — signed arity and the method table."""

import pytest

from ganglion.node import Node
from ganglion.routing.arity import MethodTable, accepts, arity_of


class TestArityOf:
    @pytest.mark.parametrize(
        ("func", "expected"),
        [
            (lambda self: None, 0),
            (lambda self, a: None, 1),
            (lambda self, a=1: None, -1),
            (lambda self, *rest: None, -1),
            (lambda self, a, *rest: None, -2),
            (lambda self, a, b, *rest: None, -3),
            (lambda self, a, b=2: None, -2),
        ],
    )
    def test_signed_arity(self, func, expected: int) -> None:
        assert arity_of(func) == expected

    def test_optional_keyword_only_is_ignored(self) -> None:
        assert arity_of(lambda self, a, *, flag=False: None) == 1

    def test_required_keyword_only_is_not_dispatchable(self) -> None:
        assert arity_of(lambda self, *, flag: None) is None


class TestAccepts:
    def test_exact(self) -> None:
        assert accepts(1, 1)
        assert not accepts(1, 0)
        assert not accepts(1, 2)

    def test_at_least(self) -> None:
        assert accepts(-1, 0)
        assert accepts(-1, 5)
        assert not accepts(-3, 1)
        assert accepts(-3, 2)


class Base(Node):
    def index(self):
        return "base"

    def shared(self, a):
        return a


class Helpers:
    def helper(self):
        return "helped"


class Child(Base):
    expose = (Helpers,)

    def shared(self, a, b):
        return a + b

    def _private(self):
        return "hidden"

    def config(self, *, required):
        return required


class Mixed(Helpers, Child):
    pass


class TestMethodTable:
    def test_collects_public_methods(self) -> None:
        table = MethodTable.build(Base)
        assert table.arities == {"index": 0, "shared": 1}

    def test_descendant_overrides_ancestor(self) -> None:
        table = MethodTable.build(Child)
        assert table["shared"].arity == 2
        assert table.match("shared", ("x",)) is None
        assert table.match("shared", ("x", "y")) == "shared"

    def test_private_and_keyword_only_excluded(self) -> None:
        table = MethodTable.build(Child)
        assert "_private" not in table
        assert "config" not in table

    def test_node_base_methods_excluded(self) -> None:
        table = MethodTable.build(Child)
        assert "provide" not in table
        assert "action_missing" not in table

    def test_unexposed_mixin_ignored(self) -> None:
        assert "helper" not in MethodTable.build(Base)

    def test_exposed_mixin_counts(self) -> None:
        table = MethodTable.build(Mixed)
        assert table.match("helper", ()) == "helper"

    def test_function_lookup(self) -> None:
        table = MethodTable.build(Base)
        assert table.function("index") is Base.__dict__["index"]
        assert table.function("missing") is None

    def test_sees_methods_added_later(self) -> None:
        class Late(Node):
            pass

        assert "added" not in MethodTable.build(Late)
        Late.added = lambda self: "new"
        assert MethodTable.build(Late).match("added", ()) == "added"

    def test_table_is_read_only(self) -> None:
        table = MethodTable.build(Base)
        with pytest.raises(TypeError):
            table["index"] = None  # type: ignore[index]
