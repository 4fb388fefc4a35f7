"""
Тесты подстановки переменных, хелперов и списков.
"""

import logging

import pytest

from epitome.engine.context import ContextResolver
from epitome.engine.processors import VariableProcessor
from epitome.engine.state import RenderState, Scope
from tests.infrastructure import make_scope


@pytest.fixture
def variables():
    return VariableProcessor(ContextResolver())


class TestVariables:

    def test_escaped_and_raw(self, variables):
        scope = make_scope({"html": "<b>x</b>"})

        assert variables.process("{{html}}", scope) == "&lt;b&gt;x&lt;/b&gt;"
        assert variables.process("{{{html}}}", scope) == "<b>x</b>"

    def test_missing_is_empty_and_recorded(self, variables):
        scope = make_scope()

        assert variables.process("[{{nope}}][{{{also.nope}}}]", scope) == "[][]"
        assert scope.state.missing_paths == ["nope", "also.nope"]

    def test_none_is_empty_but_not_missing(self, variables):
        scope = make_scope({"x": None})

        assert variables.process("[{{x}}]", scope) == "[]"
        assert scope.state.missing_paths == []

    def test_stringification(self, variables):
        scope = make_scope({"flag": True, "tags": ["a", "b"], "n": 0})
        assert variables.process("{{flag}} {{tags}} {{n}}", scope) == "true a, b 0"

    def test_block_tags_untouched(self, variables):
        text = "{{#each items}}{{/each}}{{@partial p}}{{@yield:placeholder:c}}"
        assert variables.process(text, make_scope()) == text


class TestHelpers:

    @pytest.mark.parametrize("template,depth,expected", [
        ("{{@assetPath 'css/site.css'}}", 2, "../../css/site.css"),
        ("{{@assetPath 'css/site.css'}}", 0, "./css/site.css"),
        ("{{assetPath \"img/a.png\"}}", 1, "../img/a.png"),
        ("{{@urlPath '/about.html'}}", 1, "../about/"),
        ("{{@urlPath '/'}}", 0, "./"),
    ])
    def test_literal_argument(self, variables, template, depth, expected):
        assert variables.process(template, make_scope({"page_depth": depth})) == expected

    def test_path_argument(self, variables):
        scope = make_scope({"page": {"link": "/blog/post.html"}})
        assert variables.process("{{@urlPath page.link}}", scope) == "./blog/post/"

    def test_missing_argument(self, variables):
        assert variables.process("[{{@urlPath page.link}}]", make_scope()) == "[]"

    def test_helper_in_item_scope(self, variables):
        """Хелперы берутся из контекста страницы, даже внутри итерации."""
        scope = make_scope({"page_depth": 1})
        item_scope = scope.enter({"src": "a.png"}, {"src": "a.png"})

        assert variables.process("{{@assetPath src}}", item_scope) == "../a.png"

    def test_page_helper_takes_precedence(self, variables):
        def shadow(path):
            return "shadow"

        scope = make_scope({"x": "1"}).enter({}, {"assetPath": shadow, "x": "1"})
        assert variables.process("{{@assetPath x}}", scope) == "./1"

    def test_failing_helper(self, variables, caplog):
        def broken(path):
            raise RuntimeError("boom")

        scope = Scope.for_page({"assetPath": broken}, RenderState())
        with caplog.at_level(logging.WARNING, logger="epitome"):
            assert variables.process("[{{@assetPath 'a.css'}}]", scope) == "[]"
        assert "Error calling assetPath" in caplog.text


class TestLists:

    def test_ul_with_attributes(self, variables):
        scope = make_scope({"items": ["a", "<b>"]})

        out = variables.process("{{@ul #nav .menu items}}", scope)
        assert out == '<ul id="nav" class="menu"><li>a</li><li>&lt;b&gt;</li></ul>'

    def test_ol_plain(self, variables):
        assert variables.process("{{@ol steps}}", make_scope({"steps": [1, 2]})) == "<ol><li>1</li><li>2</li></ol>"

    def test_not_a_sequence(self, variables):
        assert variables.process("{{@ul items}}", make_scope({"items": "x"})) == ""
