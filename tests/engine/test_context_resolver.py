"""
Тесты разрешения путей и контекстов элементов итерации.
"""

import pytest

from epitome.engine.context import ContextResolver
from epitome.engine.values import MISSING
from tests.infrastructure import make_scope


@pytest.fixture
def resolver():
    return ContextResolver()


class TestResolvePath:
    """Порядок поиска: элемент → прямой ключ → this → обход по точкам."""

    def test_direct_key(self, resolver):
        assert resolver.resolve_path(make_scope({"title": "T"}), "title") == "T"

    def test_dotted_path(self, resolver):
        scope = make_scope({"user": {"profile": {"name": "Ann"}}})
        assert resolver.resolve_path(scope, "user.profile.name") == "Ann"

    def test_sequence_index(self, resolver):
        scope = make_scope({"items": ["a", "b"]})

        assert resolver.resolve_path(scope, "items.1") == "b"
        assert resolver.resolve_path(scope, "items.5") is MISSING

    def test_missing_never_raises(self, resolver):
        scope = make_scope({"user": "plain"})

        assert resolver.resolve_path(scope, "nope") is MISSING
        assert resolver.resolve_path(scope, "user.name") is MISSING
        assert resolver.resolve_path(scope, "a.b.c.d") is MISSING

    def test_explicit_none_is_not_missing(self, resolver):
        assert resolver.resolve_path(make_scope({"x": None}), "x") is None

    def test_this(self, resolver):
        scope = make_scope({"this": 5})
        assert resolver.resolve_path(scope, "this") == 5

    def test_this_fallback(self, resolver):
        """Ключ, отсутствующий в контексте, ищется в context['this']."""
        scope = make_scope({"this": {"label": "L"}})
        assert resolver.resolve_path(scope, "label") == "L"

    def test_current_item_has_priority(self, resolver):
        scope = make_scope({"name": "page"})
        item_scope = scope.enter({"name": "item"}, {"name": "context"})

        assert resolver.resolve_path(item_scope, "name") == "item"
        assert resolver.resolve_path(scope, "name") == "page"


class TestGetArray:

    def test_direct(self, resolver):
        assert resolver.get_array(make_scope({"items": [1, 2]}), "items") == [1, 2]

    def test_dotted(self, resolver):
        scope = make_scope({"site": {"menu": ("a", "b")}})
        assert resolver.get_array(scope, "site.menu") == ["a", "b"]

    def test_non_sequence_gives_empty(self, resolver):
        scope = make_scope({"name": "abc", "cfg": {"a": 1}})

        assert resolver.get_array(scope, "name") == []
        assert resolver.get_array(scope, "cfg") == []

    def test_missing_is_recorded(self, resolver):
        scope = make_scope({})

        assert resolver.get_array(scope, "posts") == []
        assert scope.state.missing_paths == ["posts"]


class TestItemContext:

    def test_primitive_item(self, resolver):
        assert resolver.create_item_context("a", "items", {"site": "S"}) == {"this": "a"}

    def test_mapping_item_inherits_parent(self, resolver):
        item = {"name": "x"}
        parent = {"site": "S", "name": "parent", "items": [item]}

        ctx = resolver.create_item_context(item, "items", parent)

        assert ctx["this"] is item
        assert ctx["name"] == "x"
        assert ctx["site"] == "S"
        assert "items" not in ctx

    def test_enter_item_adds_index(self, resolver):
        scope = make_scope({"items": ["a", "b"]})
        item_scope = resolver.enter_item(scope, "b", "items", 1)

        assert item_scope.context["@index"] == 2
        assert item_scope.item == "b"
        assert item_scope.depth == 1
        # исходный Scope не изменился
        assert scope.depth == 0
        assert "@index" not in scope.context
