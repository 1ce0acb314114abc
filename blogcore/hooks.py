"""Lifecycle hooks of the blog plugin.

The host calls these hooks in order while building a site:

1. ``on_pre_bootstrap``: make sure the content folders exist.
2. ``on_create_node``: for each MDX node sourced from the posts or recipes
   folder, create a ``BlogPost`` child node holding slug, tags and the other
   front-matter fields.
3. ``on_create_page``: move pages created by other sources under the base
   path.
4. ``create_pages``: query every ``BlogPost`` and create post pages,
   paginated listings and paginated tag pages.

Hooks only use the host through ``blogcore.protocols.HostAPI``.
"""

from __future__ import annotations

import logging
from typing import Any

from .nodes import BLOG_POST_DESCRIPTION, BLOG_POST_TYPE, BlogPost, Node, Page
from .options import BlogOptions
from .pagination import listing_path, page_count, tag_page_path, tag_prefix
from .protocols import HostAPI
from .slugs import derive_slug, replace_path, url_resolve
from .tags import count_tags, parse_tags

logger = logging.getLogger(__name__)

PLUGIN_NAME = "blogcore"
POST_COMPONENT = "post"
POSTS_COMPONENT = "posts"
QUERY_LIMIT = 1000


def on_pre_bootstrap(api: HostAPI, options: BlogOptions) -> None:
    """Create every folder in ``folders_to_check`` that does not exist yet."""
    for folder in options.folders_to_check:
        directory = api.program_directory / folder
        logger.debug("Initializing %s directory", directory)
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)


def _as_list(value) -> list:
    if not value:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return list(value)
    logger.warning("Ignoring malformed list value: %r", value)
    return []


def _as_text(value) -> str:
    return "" if value is None else str(value)


def build_blog_post(frontmatter: dict[str, Any], relative_path: str, base_path: str) -> BlogPost:
    """Derive the BlogPost field data of one MDX file.

    Args:
        frontmatter: Parsed front-matter of the file.
        relative_path: File path relative to its content source.
        base_path: Base path posts live under.

    Returns:
        BlogPost with missing optional fields set to empty values.
    """
    return BlogPost(
        title=frontmatter.get("title"),
        tags=parse_tags(frontmatter.get("tags")),
        slug=derive_slug(frontmatter.get("slug"), relative_path, base_path),
        date=frontmatter.get("date"),
        keywords=_as_list(frontmatter.get("keywords")),
        type=_as_text(frontmatter.get("type")),
        snippet=_as_text(frontmatter.get("snippet")),
        abstract=_as_text(frontmatter.get("abstract")),
    )


def on_create_node(node: Node, api: HostAPI, options: BlogOptions) -> Node | None:
    """Create a BlogPost node for an MDX node of a post or recipe.

    Args:
        node: The node just created by the host.
        api: Host API.
        options: Plugin options.

    Returns:
        The new BlogPost node, or None when ``node`` is not a post.
    """
    if node.type != "Mdx":
        return None

    file_node = api.get_node(node.parent)
    source = file_node.get("source_instance_name") if file_node else None
    if source not in options.sources:
        return None

    frontmatter = node.get("frontmatter") or {}
    post = build_blog_post(frontmatter, file_node["relative_path"], options.base_path)

    post_id = api.create_node_id(f"{node.id} >>> MdxBlogPost")
    post_node = Node(
        id=post_id,
        type=BLOG_POST_TYPE,
        parent=node.id,
        children=[],
        fields=post.to_dict(),
        content_digest=post.digest(),
        content=post.to_json(),
        description=BLOG_POST_DESCRIPTION,
    )
    api.actions.create_node(post_node)
    api.actions.create_parent_child_link(node, api.get_node(post_id))
    logger.debug("Created %s node %s at %s", BLOG_POST_TYPE, post_id, post.slug)
    return post_node


def on_create_page(page: Page, api: HostAPI, options: BlogOptions) -> None:
    """Recreate a page from another source under the base path.

    Pages whose path contains ``404`` are left alone.
    """
    if "404" in page.path:
        return
    base_path = options.base_path
    api.actions.delete_page(page)
    api.actions.create_page(
        Page(
            path=url_resolve(replace_path(base_path), replace_path(page.path)),
            component=page.component,
            context={"base_path": base_path, **page.context},
            plugin=PLUGIN_NAME,
            source=page.source,
            body=page.body,
        )
    )


def create_pages(api: HostAPI, options: BlogOptions) -> list[Page]:
    """Create post, listing and tag pages for every BlogPost.

    Posts are queried newest first (by date, then title). A failing query
    aborts the build through the reporter.

    Returns:
        The pages created, in creation order.
    """
    result = api.query(
        BLOG_POST_TYPE, sort=("date", "title"), order="DESC", limit=QUERY_LIMIT
    )
    if result.errors:
        api.reporter.panic(result.errors)
        return []

    posts: list[Node] = list(result.data.get("nodes", []))
    pages: list[Page] = []
    pages.extend(_post_pages(posts, options))
    pages.extend(_listing_pages(posts, options))
    pages.extend(_tag_pages(posts, options))
    for page in pages:
        api.actions.create_page(page)
    api.reporter.info(f"Created {len(pages)} pages for {len(posts)} posts")
    return pages


def _post_pages(posts: list[Node], options: BlogOptions) -> list[Page]:
    pages = []
    for index, post in enumerate(posts):
        # posts run newest first: the previous post is the older one
        previous = posts[index + 1] if index < len(posts) - 1 else None
        following = posts[index - 1] if index > 0 else None
        pages.append(
            Page(
                path=post["slug"],
                component=POST_COMPONENT,
                context={
                    "base_path": options.base_path,
                    "pre_path": options.base_path,
                    "id": post.id,
                    "previous_id": previous.id if previous else None,
                    "next_id": following.id if following else None,
                },
                plugin=PLUGIN_NAME,
            )
        )
    return pages


def _listing_pages(posts: list[Node], options: BlogOptions) -> list[Page]:
    excluded = options.do_not_count_type_for_pagination
    counted = [p for p in posts if p.get("type") not in excluded]
    per_page = options.posts_per_page
    num_pages = page_count(len(counted), per_page)
    all_posts = [p.id for p in posts]
    return [
        Page(
            path=listing_path(options.base_path, index),
            component=POSTS_COMPONENT,
            context={
                "base_path": options.base_path,
                "pre_path": options.base_path,
                "limit": per_page,
                "skip": index * per_page,
                "num_of_pages": num_pages,
                "current_page": index + 1,
                "this_is_a_tag_search": False,
                "excluded_type": list(excluded),
                "all_posts": all_posts,
            },
            plugin=PLUGIN_NAME,
        )
        for index in range(num_pages)
    ]


def _tag_pages(posts: list[Node], options: BlogOptions) -> list[Page]:
    excluded = options.do_not_include_type_in_lists
    listed = [p for p in posts if p.get("type") not in excluded]
    global_tags, counts = count_tags(p.get("tags") or [] for p in listed)
    global_tags = [
        tag for tag in global_tags if tag not in options.do_not_create_tag_page_for
    ]

    per_page = options.posts_per_page
    pages = []
    for tag in global_tags:
        num_pages = page_count(counts[tag], per_page)
        for index in range(num_pages):
            pages.append(
                Page(
                    path=tag_page_path(options.base_path, options.tags_path, tag, index),
                    component=POSTS_COMPONENT,
                    context={
                        "base_path": options.base_path,
                        "pre_path": tag_prefix(options.base_path, options.tags_path, tag),
                        "limit": per_page,
                        "skip": index * per_page,
                        "num_of_pages": num_pages,
                        "current_page": index + 1,
                        "tag": tag,
                        "global_tags": global_tags,
                        "this_is_a_tag_search": True,
                        "excluded_type": list(excluded),
                    },
                    plugin=PLUGIN_NAME,
                )
            )
    return pages


HOOKS = {
    "on_pre_bootstrap": on_pre_bootstrap,
    "on_create_node": on_create_node,
    "on_create_page": on_create_page,
    "create_pages": create_pages,
}
