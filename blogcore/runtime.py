"""Minimal in-process host for the blog plugin.

``Site`` implements the host contract of ``blogcore.protocols`` with plain
Python structures: nodes live in a dict keyed by id, pages in a dict keyed
by path, and ``query`` sorts and slices nodes of one type. ``Site.run``
drives the lifecycle hooks in the order a host calls them.

Key classes:
- BuildError: Error raised when a build cannot complete.
- LoggingReporter: Reporter that logs, collects warnings and panics by raising.
- Site: The host.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .collections import PostCollection
from .content import ContentSourcer, SitePageLoader
from .hooks import HOOKS, PLUGIN_NAME
from .nodes import BLOG_POST_TYPE, Node, Page, QueryResult
from .options import BlogOptions, load_options

logger = logging.getLogger(__name__)

NODE_ID_NAMESPACE = uuid.UUID("3b0b5c38-0f52-4d0e-9a4f-8f1f2b9e7c11")


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error, if known.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        prefix = f"{source_path}: " if source_path else ""
        super().__init__(f"{prefix}{message}")


class LoggingReporter:
    """Reporter backed by the ``logging`` module.

    Attributes:
        warnings: Every warning reported, in order.
    """

    def __init__(self, name: str = PLUGIN_NAME):
        self._logger = logging.getLogger(f"{__name__}.{name}")
        self.warnings: list[str] = []

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        self._logger.warning(message)

    def panic(self, errors: Any) -> None:
        if isinstance(errors, (list, tuple)):
            message = "; ".join(str(e) for e in errors)
        else:
            message = str(errors)
        self._logger.error(message)
        raise BuildError(None, message)


class Site:
    """In-memory host running the blog plugin over a project directory.

    Attributes:
        program_directory: Root directory of the project.
        options: Resolved plugin options.
        actions: Node and page mutations (the site itself).
        reporter: Reporter used by the hooks.
        nodes: Node store keyed by id.
        pages: Page registry keyed by path.
    """

    def __init__(
        self,
        project_root: Path,
        options: BlogOptions | None = None,
        hooks: dict[str, Callable] | None = None,
        include_drafts: bool = False,
        reporter: LoggingReporter | None = None,
    ):
        self.program_directory = project_root
        self.options = options or load_options(project_root)
        self.hooks = dict(HOOKS if hooks is None else hooks)
        self.include_drafts = include_drafts
        self.actions = self
        self.reporter = reporter or LoggingReporter()
        self.nodes: dict[str, Node] = {}
        self.pages: dict[str, Page] = {}

    # -- host API ---------------------------------------------------------

    def get_node(self, node_id: str | None) -> Node | None:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def create_node_id(self, seed: str) -> str:
        return str(uuid.uuid5(NODE_ID_NAMESPACE, seed))

    def query(
        self,
        node_type: str,
        sort: tuple[str, ...] = (),
        order: str = "DESC",
        limit: int | None = None,
    ) -> QueryResult:
        direction = str(order).upper()
        if direction not in ("ASC", "DESC"):
            return QueryResult(errors=[f"Unknown sort order {order!r}"])
        if limit is not None and limit < 0:
            return QueryResult(errors=[f"Limit must not be negative, got {limit}"])
        posts = PostCollection(n for n in self.nodes.values() if n.type == node_type)
        if sort:
            posts = posts.sorted(sort, reverse=direction == "DESC")
        if limit is not None:
            posts = posts[:limit]
        return QueryResult(data={"nodes": list(posts)})

    # -- actions ----------------------------------------------------------

    def create_node(self, node: Node) -> None:
        if node.id in self.nodes:
            logger.debug("Replacing node %s", node.id)
        self.nodes[node.id] = node

    def create_parent_child_link(self, parent: Node, child: Node | None) -> None:
        if child is None:
            raise ValueError(f"Cannot link a missing child to node {parent.id}")
        if child.id not in parent.children:
            parent.children.append(child.id)
        child.parent = parent.id

    def create_page(self, page: Page) -> None:
        existing = self.pages.get(page.path)
        if existing is not None and existing is not page:
            logger.debug("Replacing page at %s", page.path)
        self.pages[page.path] = page
        if page.plugin != PLUGIN_NAME:
            self._run_hook("on_create_page", page)

    def delete_page(self, page: Page) -> None:
        if self.pages.get(page.path) is page:
            del self.pages[page.path]

    # -- lifecycle --------------------------------------------------------

    def _run_hook(self, name: str, *args):
        hook = self.hooks.get(name)
        if hook is None:
            return None
        return hook(*args, api=self, options=self.options)

    def bootstrap(self) -> None:
        self._run_hook("on_pre_bootstrap")

    def source_nodes(self) -> None:
        """Create File and Mdx nodes for all content and run on_create_node."""
        content_dir = self.program_directory / self.options.content_path
        sourcer = ContentSourcer(content_dir)
        for file_node, mdx_node in sourcer.source_nodes(self, self.include_drafts):
            self.create_node(file_node)
            self._run_hook("on_create_node", file_node)
            self.create_node(mdx_node)
            self.create_parent_child_link(file_node, mdx_node)
            self._run_hook("on_create_node", mdx_node)

    def source_pages(self) -> None:
        """Register the standalone site pages."""
        pages_dir = self.program_directory / self.options.pages_path
        for page in SitePageLoader(pages_dir).load(self.include_drafts):
            self.create_page(page)

    def create_pages(self) -> None:
        self._run_hook("create_pages")
        self._warn_duplicate_slugs()

    def _warn_duplicate_slugs(self) -> None:
        seen: dict[str, list[str]] = {}
        for node in self.nodes.values():
            if node.type == BLOG_POST_TYPE:
                seen.setdefault(node["slug"], []).append(node.id)
        for slug, ids in seen.items():
            if len(ids) > 1:
                self.reporter.warn(
                    f"{len(ids)} posts share the slug {slug}; only one page is kept"
                )

    def run(self) -> list[Page]:
        """Run every lifecycle step and return the registered pages."""
        self.bootstrap()
        self.source_nodes()
        self.source_pages()
        self.create_pages()
        return list(self.pages.values())

    def posts(self) -> PostCollection:
        """All BlogPost nodes, newest first."""
        result = self.query(BLOG_POST_TYPE, sort=("date", "title"), order="DESC")
        return PostCollection(result.data.get("nodes", []))

    def source_of(self, post: Node) -> Node | None:
        """Return the Mdx node a BlogPost node was created from."""
        return self.get_node(post.parent)
