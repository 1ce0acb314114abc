from pathlib import Path

import pytest

from blogcore.build import BuildError, build_site
from blogcore.options import with_defaults
from blogcore.runtime import LoggingReporter, Site


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def create_project(tmp_path: Path) -> Path:
    project = tmp_path / "blog"
    write(
        project / "blogcore.yaml",
        "posts_per_page: 1\ndo_not_count_type_for_pagination: note\n",
    )
    posts = project / "content" / "posts"
    write(
        posts / "2020.01.02.hello.mdx",
        """---
title: Hello
date: 2020-01-02
tags: Café, python
---

# Hello

{{ pinterest("https://www.pinterest.com/pin/1/") }}

{{ pinterest("https://www.pinterest.com/pin/2/") }}

```python
print("hi")
```
""",
    )
    write(
        posts / "second.md",
        """---
title: Second
date: 2021-03-04
tags: python
type: note
snippet: A short note.
---

Body text.
""",
    )
    write(
        project / "content" / "recipes" / "cake.md",
        """---
title: Cake
date: 2019-05-06
slug: /recipes/cake
---

Mix and bake.
""",
    )
    write(project / "pages" / "about.md", "# About\n\nWho writes here.")
    write(project / "pages" / "404.md", "# Not found")
    return project


def read(output: Path, path: str) -> str:
    return (output / path.strip("/") / "index.html").read_text(encoding="utf-8")


def test_build_site_writes_all_pages(tmp_path):
    project = create_project(tmp_path)
    result = build_site(project)
    output = project / "public"
    assert result.output_dir == output

    paths = {p.path for p in result.pages}
    assert paths == {
        "/second",
        "/hello",
        "/recipes/cake",
        "/",
        "/2",
        "/tags/python/",
        "/tags/python/2",
        "/tags/Cafe/",
        "/about",
        "/404/",
    }
    for path in paths:
        assert (output / path.strip("/") / "index.html").exists(), path

    # content folders are created at bootstrap
    assert (project / "content" / "assets").is_dir()


def test_post_page_renders_body_embeds_and_siblings(tmp_path):
    project = create_project(tmp_path)
    output = build_site(project).output_dir

    hello = read(output, "/hello")
    assert "<title>Hello</title>" in hello
    assert hello.count('data-pin-do="embedPin"') == 2
    assert hello.count("pinit.js") == 1
    assert 'class="highlight"' in hello
    assert 'id="hello"' in hello
    assert 'rel="prev" href="/recipes/cake"' in hello
    assert 'rel="next" href="/second"' in hello
    assert 'href="/tags/Cafe/"' in hello

    cake = read(output, "/recipes/cake")
    assert "pinit.js" not in cake
    assert 'rel="prev"' not in cake


def test_listing_pages_skip_excluded_types(tmp_path):
    project = create_project(tmp_path)
    output = build_site(project).output_dir

    first = read(output, "/")
    assert 'href="/hello"' in first
    assert 'href="/second"' not in first
    assert 'rel="next" href="/2"' in first

    second = read(output, "/2")
    assert 'href="/recipes/cake"' in second
    assert 'rel="prev" href="/"' in second


def test_tag_pages_list_tagged_posts(tmp_path):
    project = create_project(tmp_path)
    output = build_site(project).output_dir

    python = read(output, "/tags/python/")
    assert "Posts tagged python" in python
    assert 'href="/second"' in python
    assert "A short note." in python
    assert 'rel="next" href="/tags/python/2"' in python

    python_2 = read(output, "/tags/python/2")
    assert 'href="/hello"' in python_2


def test_site_pages_are_moved_under_base_path(tmp_path):
    project = create_project(tmp_path)
    (project / "blogcore.yaml").write_text("base_path: /blog/\n", encoding="utf-8")
    result = build_site(project, output_dir_override=tmp_path / "out")

    paths = {p.path for p in result.pages}
    assert "/blog/about" in paths
    assert "/404/" in paths
    assert "/blog/hello" in paths
    assert "/blog/" in paths
    assert "/blog/tags/python/" in paths
    # absolute front-matter slugs are kept as written
    assert "/recipes/cake" in paths
    about = (tmp_path / "out" / "blog" / "about" / "index.html").read_text(encoding="utf-8")
    assert "Who writes here." in about


def test_layouts_in_site_shadow_defaults(tmp_path):
    project = create_project(tmp_path)
    write(
        project / "_layouts" / "post.html.jinja",
        "CUSTOM {{ post.title }} {{ content }}{{ embed_scripts() }}",
    )
    output = build_site(project).output_dir
    hello = read(output, "/hello")
    assert hello.startswith("CUSTOM Hello")
    assert hello.count("pinit.js") == 1


def test_drafts_are_skipped_unless_requested(tmp_path):
    project = create_project(tmp_path)
    write(project / "content" / "posts" / "_wip.md", "---\ntitle: WIP\n---\n\nSoon.")
    assert "/_wip" not in {p.path for p in build_site(project).pages}
    drafts = build_site(project, include_drafts=True).pages
    assert "/_wip" in {p.path for p in drafts}


def test_template_errors_raise_build_error_with_source(tmp_path):
    project = create_project(tmp_path)
    broken = write(
        project / "content" / "posts" / "broken.mdx",
        "---\ntitle: Broken\n---\n\n{{ pinterest(1 +) }}\n",
    )
    with pytest.raises(BuildError) as info:
        build_site(project)
    assert info.value.source_path == broken
    assert "Template syntax error" in info.value.message


def test_duplicate_slugs_are_reported(tmp_path):
    project = create_project(tmp_path)
    write(project / "content" / "posts" / "other.md", "---\ntitle: Other\nslug: /hello\n---\n")
    result = build_site(project)
    assert any("/hello" in warning for warning in result.warnings)


def test_reporter_panic_raises_build_error():
    reporter = LoggingReporter()
    with pytest.raises(BuildError) as info:
        reporter.panic(["first", "second"])
    assert info.value.message == "first; second"
    assert info.value.source_path is None


def test_site_query_validates_arguments(tmp_path):
    site = Site(tmp_path, options=with_defaults())
    assert site.query("BlogPost", order="sideways").errors
    assert site.query("BlogPost", limit=-1).errors
    assert site.query("BlogPost").data == {"nodes": []}


def test_site_query_failure_aborts_build(tmp_path, monkeypatch):
    project = create_project(tmp_path)
    from blogcore.nodes import QueryResult

    monkeypatch.setattr(
        Site, "query", lambda self, *a, **k: QueryResult(errors=["query exploded"])
    )
    with pytest.raises(BuildError, match="query exploded"):
        build_site(project)


def test_tags_cannot_leave_the_output_directory(tmp_path):
    project = create_project(tmp_path)
    write(
        project / "content" / "posts" / "sneaky.md",
        "---\ntitle: Sneaky\ntags: ../../../escaped, .., a/b\n---\n\nBody.\n",
    )
    result = build_site(project)
    paths = {p.path for p in result.pages}
    assert "/tags/..-..-..-escaped/" in paths
    assert "/tags/a-b/" in paths
    assert not any(".." in p.split("/") for p in paths)
    assert not (tmp_path / "escaped").exists()
    assert not (project / "escaped").exists()


def test_write_page_rejects_paths_outside_output(tmp_path):
    from blogcore.build import _write_page
    from blogcore.nodes import Page

    output = tmp_path / "public"
    output.mkdir()
    source = tmp_path / "post.md"
    with pytest.raises(BuildError) as info:
        _write_page(output, Page(path="/../../outside/", component="post"), "<p>x</p>", source)
    assert info.value.source_path == source
    assert not (tmp_path / "outside").exists()

    _write_page(output, Page(path="/", component="posts"), "<p>home</p>")
    assert (output / "index.html").read_text(encoding="utf-8") == "<p>home</p>"


def test_mdx_code_and_jsx_braces_are_kept_literal(tmp_path):
    project = create_project(tmp_path)
    write(
        project / "content" / "posts" / "braces.mdx",
        """---
title: Braces
---

Use `{{ pinterest("inline") }}` to embed a pin.

```
{{ user.name }}
{{ pinterest("https://www.pinterest.com/pin/3/") }}
```

<div style={{color: 'red'}}>Red</div>
""",
    )
    output = build_site(project).output_dir
    page = read(output, "/braces")
    assert "{{ user.name }}" in page
    assert "{{color: 'red'}}" in page
    assert "data-pin-do" not in page
    assert "pinit.js" not in page


def test_layouts_read_front_matter_type(tmp_path):
    project = create_project(tmp_path)
    write(project / "_layouts" / "post.html.jinja", "type={{ post.type }}")
    output = build_site(project).output_dir
    assert read(output, "/second") == "type=note"
    assert read(output, "/hello") == "type="
