"""
Сквозные тесты движка: полный конвейер render().
"""

import copy
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from epitome import EpitomeEngine, TemplateNotFoundError
from epitome.engine import cleanup_remaining_tags
from tests.infrastructure import make_engine, write_partial, write_template


class TestBasics:

    @pytest.mark.parametrize("template", [
        "<p>Hello</p>",
        "",
        "  <div>\n  text { braces } here\n</div>\n",
        "<html><body></body></html>\n",
        "<html></html>\n<!-- trailing -->\n",
    ])
    def test_template_without_directives_is_unchanged(self, engine, template):
        assert engine.render(template, {}) == template

    def test_escaping(self, engine):
        context = {"x": "<script>alert('x')</script>"}

        assert engine.render("{{x}}", context) == "&lt;script&gt;alert(&#039;x&#039;)&lt;/script&gt;"
        assert engine.render("{{{x}}}", context) == "<script>alert('x')</script>"

    def test_bytes_value(self, engine):
        assert engine.render("{{v}}", {"v": b"<x>"}) == "&lt;x&gt;"

    def test_missing_variable_is_empty(self, engine):
        assert engine.render("<p>{{nope}}</p>", {}) == "<p></p>"

    def test_if(self, engine):
        assert engine.render("a{{#if user}}<b>x</b>{{/if}}b", {}) == "ab"
        assert engine.render("a{{#if user}}<b>x</b>{{/if}}b", {"user": "u"}) == "a<b>x</b>b"

    def test_list_helper(self, engine):
        out = engine.render("{{@ul .tags tags}}", {"tags": ["a", "b"]})
        assert out == '<ul class="tags"><li>a</li><li>b</li></ul>'


class TestPaths:

    def test_asset_path_depth(self, engine):
        template = "{{@assetPath 'css/site.css'}}"

        assert engine.render(template, {"page_depth": 2}) == "../../css/site.css"
        assert engine.render(template, {"page_depth": 0}) == "./css/site.css"
        assert engine.render(template, {}) == "./css/site.css"

    def test_url_path(self, engine):
        assert engine.render("{{@urlPath '/about.html'}}", {"page_depth": 1}) == "../about/"
        assert engine.render("{{@urlPath '/'}}", {"page_depth": 0}) == "./"

    def test_invalid_page_depth(self, engine):
        assert engine.render("{{@assetPath 'a.js'}}", {"page_depth": "deep"}) == "./a.js"


class TestComposition:

    def test_yield_into_layout(self, engine, templates_dir):
        write_partial(templates_dir, "layout", "<main>{{@yield:placeholder:content}}</main>")
        template = "{{@yield content}}<h1>{{title}}</h1>{{/yield}}{{@partial layout}}"

        assert engine.render(template, {"title": "Hi"}) == "<main><h1>Hi</h1></main>"

    def test_missing_partial(self, engine, caplog):
        with caplog.at_level(logging.WARNING, logger="epitome"):
            assert engine.render("a{{@partial nope}}b", {}) == "ab"
        assert "Partial template not found: nope" in caplog.text

    def test_partial_receives_caller_data(self, engine, templates_dir):
        write_partial(templates_dir, "menu", '<ul id="{{partial.id}}">{{#each partial.data}}<li>{{label}}</li>{{/each}}</ul>')
        context = {"site": {"menu": [{"label": "Home"}, {"label": "Blog"}]}}

        out = engine.render("{{@partial menu #main site.menu}}", context)
        assert out == '<ul id="main"><li>Home</li><li>Blog</li></ul>'

    def test_recursion_cap(self, templates_dir):
        write_partial(templates_dir, "twin", "x{{@partial twin}}{{@partial twin}}")
        for n in range(1, 5):
            write_partial(templates_dir, f"p{n}", f"{n}{{{{@partial p{n + 1}}}}}")

        assert make_engine(templates_dir).render("{{@partial twin}}", {}) == "x"
        assert make_engine(templates_dir, partial_recursion_limit=3).render("{{@partial p1}}", {}) == "123"

    def test_partial_attribute_conditions(self, engine, templates_dir):
        write_partial(templates_dir, "box", '<div{{#if partial.id}} id="{{partial.id}}"{{/if}}>B</div>')

        assert engine.render("{{@partial box #main}}", {}) == '<div id="main">B</div>'
        assert engine.render("{{@partial box}}", {}) == "<div>B</div>"

    def test_full_page(self, engine, templates_dir):
        write_partial(
            templates_dir,
            "layout",
            '<html><head><link href="{{@assetPath \'css/site.css\'}}"></head>'
            "<body>{{@partial nav}}<main>{{@yield:placeholder:content}}</main></body></html>",
        )
        write_partial(templates_dir, "nav", '<nav>{{#each menu}}<a href="{{@urlPath url}}">{{label}}</a>{{/each}}</nav>')
        context = {
            "title": "Post",
            "page_depth": 1,
            "menu": [{"label": "Home", "url": "/"}, {"label": "About", "url": "/about.html"}],
        }
        template = "{{@yield content}}\n<h1>{{title}}</h1>\n{{/yield}}{{@partial layout}}"

        assert engine.render(template, context) == (
            '<html><head><link href="../css/site.css"></head><body>'
            '<nav><a href="../">Home</a><a href="../about/">About</a></nav>'
            "<main><h1>Post</h1></main></body></html>"
        )


class TestCleanup:

    def test_unmatched_tags_removed(self, engine, caplog):
        with caplog.at_level(logging.WARNING, logger="epitome"):
            out = engine.render("a{{/if}}b{{#if}}c{{foo bar}}d", {})

        assert out == "abcd"
        assert "Removed 2 unresolved template tag(s)" in caplog.text

    def test_unclosed_each_keeps_body(self, engine):
        assert engine.render("{{#each items}}x", {"items": [1, 2]}) == "x"

    def test_truncation_after_html_end(self):
        html = "<html><body>x</body></html>\n<footer>dup</footer>"
        assert cleanup_remaining_tags(html) == "<html><body>x</body></html>"

    def test_authoring_comments_removed(self):
        html = "<!-- This template renders posts -->\n<p>x</p><!-- kept -->"
        assert cleanup_remaining_tags(html) == "\n<p>x</p><!-- kept -->"


class TestIsolation:

    def test_caller_context_not_mutated(self, engine):
        context = {"items": [{"a": 1}, {"a": 2}], "page_depth": 1}
        snapshot = copy.deepcopy(context)

        engine.render("{{#each items}}{{a}}{{@index}}{{/each}}{{@assetPath 'x'}}", context)

        assert context == snapshot
        assert "assetPath" not in context

    def test_yield_blocks_do_not_leak_between_renders(self, engine):
        assert engine.render("{{@yield a}}X{{/yield}}", {}) == ""
        assert engine.render("[{{@yield:placeholder:a}}]", {}) == "[]"

    def test_concurrent_renders(self, engine):
        template = "{{@yield c}}{{n}}{{/yield}}<p>{{@yield:placeholder:c}}</p>"

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda n: engine.render(template, {"n": n}), range(40)))

        assert results == [f"<p>{n}</p>" for n in range(40)]


class TestReport:

    def test_render_with_report(self, engine):
        result = engine.render_with_report("{{@yield content}}c{{/yield}}{{missing}}{{@partial gone}}", {})

        assert result.html == ""
        assert result.yield_blocks == ["content"]
        assert result.missing_paths == ["missing"]
        assert result.missing_partials == ["gone"]


class TestTemplateFiles:

    def test_render_template(self, engine, templates_dir):
        write_template(templates_dir, "page", "<h1>{{title}}</h1>")

        assert engine.render_template("page", {"title": "T"}) == "<h1>T</h1>"
        assert engine.render_template("page.html", {"title": "T"}) == "<h1>T</h1>"

    def test_missing_template_is_fatal(self, engine, templates_dir):
        with pytest.raises(TemplateNotFoundError) as exc:
            engine.load_template("missing")

        assert exc.value.path == templates_dir / "missing.html"
        assert "missing" in str(exc.value)

    def test_templates_dir_override(self, tmp_path):
        engine = EpitomeEngine(templates_dir=tmp_path)
        assert engine.config.templates_dir == Path(tmp_path)
