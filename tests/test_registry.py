"""Tests for ganglion.registry — mapping nodes to path prefixes."""

import pytest

from ganglion.errors import ConfigurationError, NotFound
from ganglion.node import Node
from ganglion.registry import NodeRegistry, default_location, normalize_location


class Home(Node):
    pass


class Blog(Node):
    pass


class BlogPost(Node):
    pass


class TestLocations:
    def test_default_location_from_class_name(self) -> None:
        assert default_location(Blog) == "/blog"
        assert default_location(BlogPost) == "/blog_post"

    def test_normalize(self) -> None:
        assert normalize_location("blog/") == "/blog"
        assert normalize_location("/") == "/"
        assert normalize_location("") == "/"


class TestMap:
    def test_map_and_reverse(self, registry: NodeRegistry) -> None:
        registry.map("/blog", Blog)
        assert registry.to(Blog) == "/blog"
        assert Blog in registry
        assert len(registry) == 1

    def test_unmapped_node(self, registry: NodeRegistry) -> None:
        assert registry.to(Blog) is None

    def test_conflict_raises(self, registry: NodeRegistry) -> None:
        registry.map("/blog", Blog)
        with pytest.raises(ConfigurationError, match="already mapped"):
            registry.map("/blog/", BlogPost)

    def test_remap_moves_node(self, registry: NodeRegistry) -> None:
        registry.map("/blog", Blog)
        registry.map("/news", Blog)
        assert registry.to(Blog) == "/news"
        assert registry.to_dict() == {"/news": "Blog"}

    def test_mount_single_node_at_root(self, registry: NodeRegistry) -> None:
        registry.mount(Home)
        assert registry.to(Home) == "/"

    def test_mount_several_at_default_locations(self, registry: NodeRegistry) -> None:
        registry.mount(Home, Blog)
        assert registry.to_dict() == {"/home": "Home", "/blog": "Blog"}


class TestAt:
    def test_longest_prefix_wins(self, registry: NodeRegistry) -> None:
        registry.map("/", Home)
        registry.map("/blog", Blog)
        registry.map("/blog/post", BlogPost)
        assert registry.at("/blog/post/1") == (BlogPost, "/blog/post", "/1")
        assert registry.at("/blog/list") == (Blog, "/blog", "/list")
        assert registry.at("/about") == (Home, "", "/about")

    def test_prefix_matches_whole_segments(self, registry: NodeRegistry) -> None:
        registry.map("/", Home)
        registry.map("/blog", Blog)
        assert registry.at("/blogroll")[0] is Home

    def test_exact_location_has_root_remainder(self, registry: NodeRegistry) -> None:
        registry.map("/blog", Blog)
        assert registry.at("/blog") == (Blog, "/blog", "/")

    def test_not_found(self, registry: NodeRegistry) -> None:
        registry.map("/blog", Blog)
        with pytest.raises(NotFound) as exc_info:
            registry.at("/about")
        assert exc_info.value.status == 404
