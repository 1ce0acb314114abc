import pytest

from blogcore.slugs import (
    create_file_path,
    derive_slug,
    replace_path,
    strip_date_prefix,
    url_resolve,
)


def test_replace_path_keeps_root():
    assert replace_path("/") == "/"
    assert replace_path("/blog/hello/") == "/blog/hello"
    assert replace_path("/blog/hello") == "/blog/hello"


def test_url_resolve_joins_and_normalizes():
    assert url_resolve("/", "/hello/") == "/hello/"
    assert url_resolve("/blog/", "my-post") == "/blog/my-post"
    assert url_resolve("/blog//", "//nested///post") == "/blog/nested/post"
    assert url_resolve("blog", "post") == "/blog/post"
    assert url_resolve("/blog/", "../escape") == "/escape"
    assert url_resolve() == "/"
    assert url_resolve("", "/") == "/"


def test_create_file_path():
    assert create_file_path("2020.01.02.hello.mdx") == "/2020.01.02.hello/"
    assert create_file_path("nested/post.md") == "/nested/post/"
    assert create_file_path("guides/index.md") == "/guides/"
    assert create_file_path("index.md") == "/"


def test_strip_date_prefix():
    assert strip_date_prefix("/2020.01.02.hello/") == "/hello/"
    assert strip_date_prefix("/hello/") == "/hello/"
    # only a leading date is dropped
    assert strip_date_prefix("/sub/2020.01.02.hello/") == "/sub/2020.01.02.hello/"


@pytest.mark.parametrize(
    "frontmatter_slug, relative_path, base_path, expected",
    [
        (None, "2020.01.02.hello.mdx", "/", "/hello"),
        (None, "2020.01.02.hello.mdx", "/blog/", "/blog/hello"),
        (None, "plain-post.md", "/", "/plain-post"),
        (None, "guides/setup.md", "/", "/guides/setup"),
        (None, "index.md", "/", "/"),
        ("/custom/path/", "ignored.md", "/blog/", "/custom/path"),
        ("relative", "ignored.md", "/blog/", "/blog/relative"),
        ("", "2021.12.31.last.md", "/", "/last"),
    ],
)
def test_derive_slug(frontmatter_slug, relative_path, base_path, expected):
    assert derive_slug(frontmatter_slug, relative_path, base_path) == expected


def test_derived_slugs_have_no_duplicate_slashes():
    slug = derive_slug("//a//b//", "x.md", "/")
    assert "//" not in slug
    assert slug == "/a/b"
