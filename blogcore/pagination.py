"""Pagination arithmetic and listing paths.

The first page of a listing lives at the listing's own path, later pages
append their 1-based number: ``/``, ``/2``, ``/3`` for the main listing and
``/tags/python/``, ``/tags/python/2`` for a tag.
"""

from __future__ import annotations

import math

from .slugs import url_resolve


def page_count(total: int, per_page: int) -> int:
    """Return how many pages ``total`` items fill at ``per_page`` per page."""
    if per_page <= 0:
        raise ValueError(f"posts per page must be positive, got {per_page}")
    return math.ceil(total / per_page)


def listing_path(base_path: str, index: int) -> str:
    """Path of the main listing page at 0-based ``index``."""
    if index == 0:
        return base_path
    return url_resolve(base_path, str(index + 1))


def tag_prefix(base_path: str, tags_path: str, tag: str) -> str:
    """Path every page of a tag listing starts with, without trailing slash."""
    return f"{base_path}{tags_path}/{tag}"


def tag_page_path(base_path: str, tags_path: str, tag: str, index: int) -> str:
    """Path of a tag listing page at 0-based ``index``."""
    prefix = tag_prefix(base_path, tags_path, tag)
    if index == 0:
        return f"{prefix}/"
    return f"{prefix}/{index + 1}"
