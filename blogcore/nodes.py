"""Node, post and page records.

Key classes:
- Node: A record in the host's node store (File, Mdx or BlogPost).
- BlogPost: Field data of a blog post, derived from front-matter.
- Page: A page to be rendered, with the template and context it needs.
- QueryResult: Result of a host query, carrying data or errors.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any

BLOG_POST_TYPE = "BlogPost"
BLOG_POST_DESCRIPTION = "Mdx implementation of the BlogPost interface"


@dataclass
class Node:
    """A record in the node store.

    Attributes:
        id: Unique node id.
        type: Node type, e.g. ``File``, ``Mdx`` or ``BlogPost``.
        parent: Id of the parent node, None for root nodes.
        children: Ids of child nodes.
        fields: Type specific data.
        content_digest: Hash of the node content.
        content: Serialized node content.
        description: Human-readable description of the node type.
    """

    id: str
    type: str
    parent: str | None = None
    children: list[str] = field(default_factory=list)
    fields: dict[str, Any] = field(default_factory=dict)
    content_digest: str = ""
    content: str = ""
    description: str = ""

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def get(self, key: str, default=None):
        return self.fields.get(key, default)


@dataclass
class BlogPost:
    """Field data of a blog post."""

    title: str | None
    tags: list[str]
    slug: str
    date: date | datetime | str | None
    keywords: list[str] = field(default_factory=list)
    type: str = ""
    snippet: str = ""
    abstract: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    def digest(self) -> str:
        """MD5 hex digest of the JSON form of the field data."""
        return hashlib.md5(self.to_json().encode("utf-8")).hexdigest()


@dataclass
class Page:
    """A page registered with the host.

    Attributes:
        path: URL path of the page.
        component: Name of the template that renders the page.
        context: Data passed to the template.
        plugin: Name of the plugin that created the page.
        source: Source file of a standalone site page, if any.
        body: Raw body of a standalone site page.
    """

    path: str
    component: str
    context: dict[str, Any] = field(default_factory=dict)
    plugin: str = ""
    source: Any = None
    body: str = ""


@dataclass
class QueryResult:
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
