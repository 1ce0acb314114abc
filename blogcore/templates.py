"""Template rendering engine for blogcore.

Pages name a component; the engine maps it to a Jinja2 template and
fetches the data the template needs from the host:

- ``post``: the post, its rendered body, the previous and next posts.
- ``posts``: the slice of posts shown on one listing or tag page, plus
  pagination links.
- ``page``: a standalone site page.

Templates are looked up in the site's ``_layouts`` folder first, then in
the packaged defaults, so a site can shadow any of them.

Key class:
- TemplateEngine: Renders pages to HTML.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup, escape

from .collections import PostCollection, coerce_datetime
from .embeds import EmbedRegistry, ScriptTracker, create_default_embed_registry
from .nodes import Node, Page
from .pagination import listing_path, tag_page_path
from .renderers import Heading, MarkdownRenderer, pygments_css
from .utils import is_markdown, is_mdx, is_template

if TYPE_CHECKING:
    from .runtime import Site

PACKAGE_LAYOUTS = Path(__file__).parent / "layouts"

# Code fences and code spans match first so calls inside them stay literal.
_MDX_TOKEN_RE = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[^\n]*\n.*?(?:^(?P=fence)[ \t]*$|\Z)"
    r"|`[^`\n]+`"
    r"|\{\{\s*(?P<name>[A-Za-z_]\w*)\s*\([^{}]*?\)\s*\}\}",
    re.MULTILINE | re.DOTALL,
)


class NodeEnvironment(Environment):
    """Jinja2 environment where ``node.field`` reads the node's fields.

    A front-matter field shadows the node attribute of the same name, so
    ``post.type`` is the post type rather than the node type.
    """

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Node) and attribute in obj.fields:
            return obj.fields[attribute]
        return super().getattr(obj, attribute)


def render_toc(headings: list[Heading]) -> Markup:
    """Render headings as a nested ``<ul>`` table of contents."""
    if not headings:
        return Markup("")

    html_parts: list[str] = []
    level_stack: list[int] = []
    for heading in headings:
        level = heading.level
        while level_stack and level_stack[-1] > level:
            level_stack.pop()
            html_parts.append("</li></ul>")
        if level_stack and level_stack[-1] == level:
            html_parts.append("</li>")
        else:
            html_parts.append("<ul>")
            level_stack.append(level)
        html_parts.append(f'<li><a href="#{escape(heading.id)}">{heading.text}</a>')
    while level_stack:
        level_stack.pop()
        html_parts.append("</li></ul>")
    return Markup("".join(html_parts))


def format_date(value, fmt: str = "%B %d, %Y") -> str:
    moment = coerce_datetime(value)
    if moment is None:
        return "" if value is None else str(value)
    return moment.strftime(fmt)


class TemplateEngine:
    """Renders registered pages with Jinja2.

    Attributes:
        site: Host holding the nodes and options.
        env: Jinja2 environment.
        embeds: Embed providers exposed to templates and MDX bodies.
    """

    components = {
        "post": "post.html.jinja",
        "posts": "posts.html.jinja",
        "page": "page.html.jinja",
    }

    def __init__(self, site: Site, embeds: EmbedRegistry | None = None):
        self.site = site
        self.options = site.options
        self.embeds = embeds or create_default_embed_registry()
        self.markdown = MarkdownRenderer()
        self.env = NodeEnvironment(
            loader=FileSystemLoader(
                [site.program_directory / "_layouts", PACKAGE_LAYOUTS]
            ),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
        )
        self.env.filters["format_date"] = format_date
        self.env.globals["render_toc"] = render_toc
        self.env.globals["pygments_css"] = pygments_css
        self.env.globals["summary"] = self._summary
        self.env.globals["options"] = self.options
        self._posts: PostCollection | None = None

    @property
    def posts(self) -> PostCollection:
        if self._posts is None:
            self._posts = self.site.posts()
        return self._posts

    def render_page(self, page: Page) -> str:
        """Render a page to HTML.

        Raises:
            TemplateNotFound: If no template exists for the page component.
        """
        tracker = ScriptTracker()
        context: dict[str, Any] = {
            "page": page,
            "base_path": page.context.get("base_path", self.options.base_path),
            **self.embeds.template_functions(tracker),
        }
        if page.component == "post":
            context.update(self._post_context(page, context))
        elif page.component == "posts":
            context.update(self._listing_context(page))
        else:
            context.update(self._site_page_context(page, context))
        template = self._resolve_template(page.component)
        return template.render(**context)

    def _resolve_template(self, component: str):
        name = self.components.get(component, f"{component}.html.jinja")
        return self.env.get_template(name)

    def render_body(
        self, body: str, path: Path | None, context: dict[str, Any]
    ) -> tuple[Markup, list[Heading]]:
        """Render a source body to HTML.

        Jinja bodies are rendered as templates. In MDX bodies only embed
        calls such as ``{{ pinterest("...") }}`` are evaluated, outside code
        spans and fences; any other braces are kept as written. Markdown and
        MDX bodies then go through Markdown.
        """
        if path is not None and is_template(path):
            body = self.env.from_string(body).render(**context)
        elif path is not None and is_mdx(path):
            body = self._render_embed_calls(body, context)
        if path is None or is_markdown(path):
            html, headings = self.markdown.render(body)
            return Markup(html), headings
        return Markup(body), []

    def _render_embed_calls(self, body: str, context: dict[str, Any]) -> str:
        def replace(match: re.Match) -> str:
            name = match.group("name")
            if name is None or not callable(context.get(name)):
                return match.group(0)
            return self.env.from_string(match.group(0)).render(**context)

        return _MDX_TOKEN_RE.sub(replace, body)

    def _post_context(self, page: Page, base_context: dict[str, Any]) -> dict[str, Any]:
        post = self.site.get_node(page.context["id"])
        if post is None:
            raise LookupError(f"No post with id {page.context['id']}")
        source = self.site.source_of(post)
        body, headings = Markup(""), []
        if source is not None:
            file_node = self.site.get_node(source.parent)
            path = Path(file_node["absolute_path"]) if file_node else None
            body, headings = self.render_body(
                source.get("body", ""), path, {**base_context, "post": post}
            )
        return {
            "post": post,
            "content": body,
            "toc": headings,
            "previous": self.site.get_node(page.context.get("previous_id")),
            "next": self.site.get_node(page.context.get("next_id")),
        }

    def _listing_context(self, page: Page) -> dict[str, Any]:
        ctx = page.context
        posts = self.posts.excluding_types(ctx.get("excluded_type", []))
        tag = ctx.get("tag")
        if ctx.get("this_is_a_tag_search"):
            posts = posts.with_tag(tag)
        shown = posts.paginate(ctx["skip"], ctx["limit"])
        current = ctx["current_page"]
        total = ctx["num_of_pages"]

        def page_url(number: int) -> str:
            if tag is not None and ctx.get("this_is_a_tag_search"):
                return tag_page_path(
                    self.options.base_path, self.options.tags_path, tag, number - 1
                )
            return listing_path(self.options.base_path, number - 1)

        return {
            "posts": shown,
            "tag": tag,
            "global_tags": ctx.get("global_tags", []),
            "current_page": current,
            "num_of_pages": total,
            "page_url": page_url,
            "previous_url": page_url(current - 1) if current > 1 else None,
            "next_url": page_url(current + 1) if current < total else None,
            "tag_url": lambda name: tag_page_path(
                self.options.base_path, self.options.tags_path, name, 0
            ),
        }

    def _site_page_context(self, page: Page, base_context: dict[str, Any]) -> dict[str, Any]:
        path = Path(page.source) if page.source else None
        body, headings = self.render_body(page.body, path, base_context)
        return {
            "title": page.context.get("title", ""),
            "frontmatter": page.context.get("frontmatter", {}),
            "content": body,
            "toc": headings,
        }

    def _summary(self, post: Node) -> str:
        """Snippet of a post, falling back to the first paragraph of its body."""
        if post.get("snippet"):
            return post["snippet"]
        source = self.site.source_of(post)
        return source.get("excerpt", "") if source is not None else ""


__all__ = ["NodeEnvironment", "TemplateEngine", "TemplateNotFound", "render_toc", "format_date"]
