from datetime import date, datetime, timezone
from pathlib import Path

from blogcore.embeds import ScriptTracker
from blogcore.options import with_defaults
from blogcore.renderers import Heading, MarkdownRenderer, generate_heading_id, pygments_css
from blogcore.runtime import Site
from blogcore.templates import TemplateEngine, format_date, render_toc


def make_engine(tmp_path):
    return TemplateEngine(Site(tmp_path, options=with_defaults()))


def test_render_toc_nests_levels():
    headings = [
        Heading(id="intro", text="Intro", level=2),
        Heading(id="detail", text="Detail", level=3),
        Heading(id="end", text="End", level=2),
    ]
    html = render_toc(headings)
    assert html == (
        '<ul><li><a href="#intro">Intro</a>'
        '<ul><li><a href="#detail">Detail</a></li></ul>'
        '</li><li><a href="#end">End</a></li></ul>'
    )
    assert render_toc([]) == ""


def test_format_date():
    assert format_date(date(2020, 1, 2)) == "January 02, 2020"
    assert format_date(datetime(2020, 1, 2, 5, tzinfo=timezone.utc), "%Y-%m-%d") == "2020-01-02"
    assert format_date("2021-03-04") == "March 04, 2021"
    assert format_date(None) == ""


def test_markdown_renderer_headings_and_code():
    html, headings = MarkdownRenderer().render(
        "# Title\n\n## Part\n\n## Part\n\n```nosuchlang\n<x>\n```\n"
    )
    assert [h.id for h in headings] == ["title", "part", "part-1"]
    assert '<h2 id="part-1">Part</h2>' in html
    assert '<code class="language-nosuchlang">&lt;x&gt;' in html
    assert generate_heading_id("Hello, <em>World</em>!") == "hello-world"
    assert ".highlight" in pygments_css()


def test_render_body_by_extension(tmp_path):
    engine = make_engine(tmp_path)
    tracker = ScriptTracker()
    context = {"name": "Ada", **engine.embeds.template_functions(tracker)}

    # mdx bodies only evaluate embed calls
    html, headings = engine.render_body(
        "# Hi {{ name }}\n\n{{ shout('hey') }}", Path("post.mdx"), {**context, "shout": str.upper}
    )
    assert "<h1" in html and "Hi {{ name }}" in html
    assert "<p>HEY</p>" in html

    html, _ = engine.render_body(
        "`{{ shout('no') }}`\n\n~~~\n{{ shout('no') }}\n~~~\n",
        Path("post.mdx"),
        {**context, "shout": str.upper},
    )
    assert "NO" not in html
    assert html.count("shout") == 2

    # plain markdown is not a template
    html, _ = engine.render_body("# Hi {{ name }}", Path("post.md"), context)
    assert "{{ name }}" in html

    html, headings = engine.render_body("<b>{{ name }}</b>", Path("page.html.jinja"), context)
    assert html == "<b>Ada</b>"
    assert headings == []

    html, _ = engine.render_body(
        '{{ pinterest("https://www.pinterest.com/pin/1/") }}', Path("pin.mdx"), context
    )
    assert 'data-pin-do="embedPin"' in html
    assert tracker.scripts == ["//assets.pinterest.com/js/pinit.js"]


def test_unknown_component_uses_named_template(tmp_path):
    (tmp_path / "_layouts").mkdir()
    (tmp_path / "_layouts" / "gallery.html.jinja").write_text(
        "gallery {{ base_path }}", encoding="utf-8"
    )
    engine = make_engine(tmp_path)
    from blogcore.nodes import Page

    html = engine.render_page(Page(path="/g/", component="gallery"))
    assert html == "gallery /"


def test_node_fields_shadow_node_attributes(tmp_path):
    from blogcore.nodes import Node

    engine = make_engine(tmp_path)
    post = Node(id="p1", type="BlogPost", fields={"type": "note", "title": "T"})
    rendered = engine.env.from_string("{{ post.type }} {{ post.title }} {{ post.id }}").render(post=post)
    assert rendered == "note T p1"
