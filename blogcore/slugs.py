"""Slug derivation for blog posts.

A post's slug is the URL path its page is created at. It comes from the
``slug`` front-matter field when present, otherwise from the file's path
relative to its content source, with a leading ``YYYY.MM.DD.`` date prefix
dropped. Every slug is resolved under the configured base path and normalized
into a single absolute path with no repeated slashes and no trailing slash.

Functions:
    replace_path: Drop the trailing slash of any path except the root.
    url_resolve: Join URL segments into one normalized absolute path.
    create_file_path: Map a source-relative file path to its URL path.
    strip_date_prefix: Drop a ``.YYYY.MM.DD.`` prefix from a file path.
    derive_slug: Compute the final slug of a post.
"""

from __future__ import annotations

import posixpath
import re
from pathlib import PurePosixPath

DATED_PATH_RE = re.compile(r"^.\d{4}\.\d{2}\.\d{2}\.")
_SLASHES_RE = re.compile(r"/+")


def replace_path(path: str) -> str:
    """Remove one trailing slash, leaving the root path untouched.

    Examples:
        >>> replace_path("/blog/hello/")
        '/blog/hello'
        >>> replace_path("/")
        '/'
    """
    if path == "/":
        return path
    return path[:-1] if path.endswith("/") else path


def url_resolve(*segments: str) -> str:
    """Join URL path segments into one absolute, normalized path.

    Empty segments are ignored, repeated slashes collapse into one, and
    ``.``/``..`` parts are resolved. A trailing slash on the last non-empty
    segment is kept.

    Examples:
        >>> url_resolve("/", "/hello/")
        '/hello/'
        >>> url_resolve("/blog/", "my-post")
        '/blog/my-post'
    """
    parts = [str(s) for s in segments if s]
    if not parts:
        return "/"
    joined = "/".join(parts)
    trailing = joined.endswith("/")
    normalized = posixpath.normpath(_SLASHES_RE.sub("/", f"/{joined}"))
    if trailing and normalized != "/":
        normalized += "/"
    return normalized


def create_file_path(relative_path: str) -> str:
    """Map a file path relative to its content source to a URL path.

    The extension is dropped, ``index`` files map to their directory, and
    the result always starts and ends with a slash.

    Examples:
        >>> create_file_path("2020.01.02.hello.mdx")
        '/2020.01.02.hello/'
        >>> create_file_path("guides/index.md")
        '/guides/'
    """
    rel = PurePosixPath(relative_path)
    name = "" if rel.stem == "index" else rel.stem
    directory = "" if rel.parent == PurePosixPath(".") else rel.parent.as_posix()
    return url_resolve("/", directory, name, "/")


def strip_date_prefix(file_path: str) -> str:
    """Drop a leading ``.YYYY.MM.DD.`` date from a URL file path.

    Only the last dot-separated segment survives when the date prefix is
    present, so ``/2020.01.02.hello/`` becomes ``/hello/``.
    """
    if DATED_PATH_RE.match(file_path):
        return "/" + file_path.split(".")[-1]
    return file_path


def derive_slug(frontmatter_slug, relative_path: str, base_path: str = "/") -> str:
    """Compute the slug of a post.

    An absolute front-matter slug is used as is, a relative one becomes a sub
    path of ``base_path``, and without one the slug is derived from the file
    path.

    Args:
        frontmatter_slug: ``slug`` value from front-matter, or None.
        relative_path: Path of the source file relative to its content folder.
        base_path: Base URL path every post lives under.

    Returns:
        Normalized slug without trailing slash.
    """
    if frontmatter_slug:
        declared = str(frontmatter_slug).strip()
        if declared.startswith("/"):
            slug = url_resolve(declared)
        else:
            slug = url_resolve(base_path, declared)
    else:
        file_path = strip_date_prefix(create_file_path(relative_path))
        slug = url_resolve(base_path, file_path)
    return replace_path(slug)
