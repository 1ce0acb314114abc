"""Plugin options and project configuration.

Options come from ``blogcore.yaml`` at the project root, layered over
``DEFAULT_CONFIG``. ``with_defaults`` turns the merged mapping into a
``BlogOptions`` instance that the hooks and the host read from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "blogcore.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "base_path": "/",
    "content_path": "content",
    "posts_path": "posts",
    "recipes_path": "recipes",
    "pages_path": "pages",
    "posts_per_page": 10,
    "tags_path": "tags",
    "folders_to_check": ["content/posts", "content/recipes", "content/assets"],
    "do_not_count_type_for_pagination": [],
    "do_not_include_type_in_lists": [],
    "do_not_create_tag_page_for": [],
    "output_dir": "public",
}

_LIST_OPTIONS = (
    "folders_to_check",
    "do_not_count_type_for_pagination",
    "do_not_include_type_in_lists",
    "do_not_create_tag_page_for",
)


@dataclass
class BlogOptions:
    """Resolved plugin options.

    Attributes:
        base_path: URL path all posts and listings live under.
        content_path: Folder holding one sub folder per content source.
        posts_path: Source name of blog posts.
        recipes_path: Source name of recipes, handled like posts.
        pages_path: Folder of standalone site pages.
        posts_per_page: Page size of listings and tag pages.
        tags_path: Path segment tag listings live under.
        folders_to_check: Folders created at bootstrap when missing.
        do_not_count_type_for_pagination: Post types left out of listings.
        do_not_include_type_in_lists: Post types left out of tag pages.
        do_not_create_tag_page_for: Tags that get no tag pages.
        output_dir: Folder the built site is written to.
    """

    base_path: str = "/"
    content_path: str = "content"
    posts_path: str = "posts"
    recipes_path: str = "recipes"
    pages_path: str = "pages"
    posts_per_page: int = 10
    tags_path: str = "tags"
    folders_to_check: list[str] = field(
        default_factory=lambda: list(DEFAULT_CONFIG["folders_to_check"])
    )
    do_not_count_type_for_pagination: list[str] = field(default_factory=list)
    do_not_include_type_in_lists: list[str] = field(default_factory=list)
    do_not_create_tag_page_for: list[str] = field(default_factory=list)
    output_dir: str = "public"

    @property
    def sources(self) -> tuple[str, str]:
        """Content source names whose MDX nodes become blog posts."""
        return (self.posts_path, self.recipes_path)


def _normalize_base_path(value: str) -> str:
    path = str(value or "/").strip()
    if not path.startswith("/"):
        path = f"/{path}"
    if not path.endswith("/"):
        path = f"{path}/"
    return path


def with_defaults(options: dict[str, Any] | None = None) -> BlogOptions:
    """Merge user options over the defaults.

    String values given for list options are wrapped in a list, and the base
    path always starts and ends with a slash.

    Args:
        options: User supplied options, possibly None.

    Returns:
        BlogOptions with every field set.

    Raises:
        ValueError: If ``posts_per_page`` is not a positive integer.
    """
    merged = DEFAULT_CONFIG.copy()
    known = {f.name for f in fields(BlogOptions)}
    for key, value in (options or {}).items():
        if key not in known:
            logger.warning("Ignoring unknown option %r", key)
            continue
        merged[key] = value

    for key in _LIST_OPTIONS:
        value = merged.get(key)
        if value is None:
            merged[key] = []
        elif isinstance(value, str):
            merged[key] = [value]
        else:
            merged[key] = list(value)

    try:
        per_page = int(merged["posts_per_page"])
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"posts_per_page must be an integer, got {merged['posts_per_page']!r}"
        ) from exc
    if per_page <= 0:
        raise ValueError(f"posts_per_page must be positive, got {per_page}")
    merged["posts_per_page"] = per_page
    merged["base_path"] = _normalize_base_path(merged["base_path"])
    return BlogOptions(**merged)


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from blogcore.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            config.update(loaded)
        else:
            logger.warning("%s does not hold a mapping; using defaults", config_path)
    return config


def load_options(project_root: Path) -> BlogOptions:
    """Load blogcore.yaml and resolve it into BlogOptions."""
    return with_defaults(load_config(project_root))
