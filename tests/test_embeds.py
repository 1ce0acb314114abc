from jinja2 import Environment

from blogcore.embeds import (
    PINTEREST_SCRIPT,
    EmbedRegistry,
    PinterestEmbed,
    ScriptTracker,
    create_default_embed_registry,
)


def test_pinterest_renders_anchor_and_requests_script():
    tracker = ScriptTracker()
    html = PinterestEmbed().render(tracker, "https://www.pinterest.com/pin/1/")
    assert 'data-pin-do="embedPin"' in html
    assert 'data-pin-width="large"' in html
    assert 'data-pin-build="doBuild"' in html
    assert 'aria-label="Pinterest"' in html
    assert 'href="https://www.pinterest.com/pin/1/"' in html
    assert tracker.scripts == [PINTEREST_SCRIPT]


def test_pinterest_escapes_source():
    tracker = ScriptTracker()
    html = PinterestEmbed().render(tracker, '"><script>alert(1)</script>')
    assert "<script>" not in html


def test_scripts_are_emitted_once_per_page():
    tracker = ScriptTracker()
    functions = create_default_embed_registry().template_functions(tracker)
    env = Environment(autoescape=True)
    html = env.from_string(
        "{{ pinterest('https://a/') }}{{ pinterest('https://b/') }}"
        "{{ pinterest_script() }}{{ embed_scripts() }}"
    ).render(**functions)
    assert html.count("pinit.js") == 1
    assert html.count("embedPin") == 2
    assert 'onload="window.doBuild &amp;&amp; window.doBuild()"' in html


def test_script_only_embed_and_empty_tracker():
    tracker = ScriptTracker()
    assert str(tracker.render()) == ""
    functions = create_default_embed_registry().template_functions(tracker)
    assert str(functions["pinterest_script"]()) == ""
    assert f'src="{PINTEREST_SCRIPT}"' in tracker.render()


def test_registry_lookup():
    registry = EmbedRegistry()
    assert registry.get("pinterest") is None
    registry.register(PinterestEmbed())
    assert isinstance(registry.get("pinterest"), PinterestEmbed)
