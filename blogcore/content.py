"""Content sourcing for blogcore.

This module turns files on disk into host nodes and pages:

- Every ``.md``/``.mdx`` file in a content source folder
  (``content/<source>/``) becomes a ``File`` node plus an ``Mdx`` child
  node holding its front-matter and body. The folder name is the source
  name the hooks look at.
- Every file in the pages folder becomes a standalone ``Page`` at the URL
  its path implies.

Files and folders whose name starts with ``_`` are drafts and are skipped
unless drafts are requested.

Key classes:
- FileContentLoader: Discovers content files below a directory.
- ContentSourcer: Builds File and Mdx nodes for content sources.
- UrlDeriver: Derives the URL of a standalone page.
- SitePageLoader: Builds Page objects for standalone pages.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterator
from pathlib import Path

from .extractors import CompositeMetadataExtractor, default_metadata_extractor
from .nodes import Node, Page
from .protocols import HostAPI
from .utils import is_markdown, is_template

logger = logging.getLogger(__name__)

MDX_FIELDS = ("frontmatter", "body", "title", "excerpt", "file_name")

SITE_PAGE_COMPONENT = "page"


class FileContentLoader:
    """Loads content files from a directory.

    Attributes:
        root: Directory to search.
    """

    def __init__(self, root: Path, include_templates: bool = False):
        self.root = root
        self.include_templates = include_templates

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """List content files below the root, sorted by path.

        Args:
            include_drafts: Whether to include files and folders starting with _.

        Returns:
            List of paths to content files.
        """
        if not self.root.is_dir():
            return []
        files: list[Path] = []
        for path in sorted(self.root.rglob("*")):
            if path.is_dir():
                continue
            rel = path.relative_to(self.root)
            if not include_drafts and any(part.startswith("_") for part in rel.parts):
                continue
            if is_markdown(path) or (self.include_templates and is_template(path)):
                files.append(path)
        return files


def _digest(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


class ContentSourcer:
    """Creates File and Mdx nodes for every content source folder.

    Attributes:
        content_dir: Folder holding one sub folder per source.
        metadata_extractor: Extractor for front-matter, title and excerpt.
    """

    def __init__(
        self,
        content_dir: Path,
        metadata_extractor: CompositeMetadataExtractor | None = None,
    ):
        self.content_dir = content_dir
        self.metadata_extractor = metadata_extractor or default_metadata_extractor

    def sources(self) -> list[Path]:
        if not self.content_dir.is_dir():
            return []
        return sorted(p for p in self.content_dir.iterdir() if p.is_dir())

    def source_nodes(
        self, api: HostAPI, include_drafts: bool = False
    ) -> Iterator[tuple[Node, Node]]:
        """Yield a (File node, Mdx node) pair for every content file.

        The nodes are built but not yet added to the host.
        """
        for source_dir in self.sources():
            loader = FileContentLoader(source_dir)
            for path in loader.iter_files(include_drafts):
                yield self.build_nodes(api, source_dir, path)

    def build_nodes(self, api: HostAPI, source_dir: Path, path: Path) -> tuple[Node, Node]:
        raw = path.read_text(encoding="utf-8")
        relative_path = path.relative_to(source_dir).as_posix()
        metadata = self.metadata_extractor.extract(raw, path)

        file_node = Node(
            id=api.create_node_id(f"{path} >>> File"),
            type="File",
            fields={
                "source_instance_name": source_dir.name,
                "relative_path": relative_path,
                "absolute_path": str(path),
                "name": path.stem,
                "extension": path.suffix.lstrip("."),
            },
            content_digest=_digest(raw),
        )
        mdx_node = Node(
            id=api.create_node_id(f"{path} >>> Mdx"),
            type="Mdx",
            parent=file_node.id,
            fields={
                "frontmatter": metadata.get("frontmatter", {}),
                "body": metadata.get("body", raw),
                "title": metadata.get("title", ""),
                "excerpt": metadata.get("excerpt", ""),
                "file_name": path.name,
                **{
                    key: value
                    for key, value in metadata.items()
                    if key not in MDX_FIELDS
                },
            },
            content_digest=_digest(raw),
            content=raw,
        )
        logger.debug("Sourced %s from %s", relative_path, source_dir.name)
        return file_node, mdx_node


class UrlDeriver:
    """Derives URLs for standalone pages from their relative path."""

    def derive(self, rel: Path) -> str:
        name = rel.name.split(".", 1)[0]
        segments = [p for p in rel.parent.parts if p]
        if name != "index":
            segments.append(name)
        path = "/".join(segments)
        return f"/{path}/" if path else "/"


class SitePageLoader:
    """Builds Page objects for the standalone pages of a site.

    Attributes:
        pages_dir: Folder holding the standalone pages.
    """

    def __init__(
        self,
        pages_dir: Path,
        metadata_extractor: CompositeMetadataExtractor | None = None,
    ):
        self.pages_dir = pages_dir
        self.metadata_extractor = metadata_extractor or default_metadata_extractor
        self.url_deriver = UrlDeriver()

    def load(self, include_drafts: bool = False) -> list[Page]:
        loader = FileContentLoader(self.pages_dir, include_templates=True)
        return [self.build(path) for path in loader.iter_files(include_drafts)]

    def build(self, path: Path) -> Page:
        raw = path.read_text(encoding="utf-8")
        metadata = self.metadata_extractor.extract(raw, path)
        rel = path.relative_to(self.pages_dir)
        return Page(
            path=self.url_deriver.derive(rel),
            component=SITE_PAGE_COMPONENT,
            context={
                "title": metadata.get("title", ""),
                "frontmatter": metadata.get("frontmatter", {}),
            },
            source=path,
            body=metadata.get("body", raw),
        )
