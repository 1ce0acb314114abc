"""Tag parsing and counting.

Tags come from the ``tags`` front-matter field as a comma separated string
(``"Café, deep learning"``) or a YAML list. Each tag is made URL friendly:
accents are stripped and spaces become dashes, so the example yields
``["Cafe", "deep-learning"]``.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Iterable

logger = logging.getLogger(__name__)

_COMBINING_MARKS_RE = re.compile(r"[\u0300-\u036f]")
_SEPARATORS_RE = re.compile(r"[\\/]+")


def normalize_tag(tag: str) -> str:
    """Trim a tag, strip its accents and replace spaces with dashes.

    Path separators also become dashes and a tag made only of dots is
    dropped, so a tag is always a single path segment.
    """
    cleaned = unicodedata.normalize("NFD", tag.strip())
    cleaned = _COMBINING_MARKS_RE.sub("", cleaned)
    cleaned = _SEPARATORS_RE.sub("-", cleaned.replace(" ", "-"))
    if not cleaned.strip("."):
        return ""
    return cleaned


def parse_tags(value) -> list[str]:
    """Parse the ``tags`` front-matter value into a list of normalized tags.

    Args:
        value: Comma separated string, list of strings, or None.

    Returns:
        Distinct tags in declaration order. Empty entries are dropped and a
        malformed value yields an empty list.
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw = [str(item) for item in value if item is not None]
    else:
        logger.warning("Ignoring malformed tags value: %r", value)
        return []
    tags = (normalize_tag(item) for item in raw)
    return list(dict.fromkeys(tag for tag in tags if tag))


def count_tags(tag_lists: Iterable[Iterable[str]]) -> tuple[list[str], dict[str, int]]:
    """Collect distinct tags and how many posts carry each one.

    Args:
        tag_lists: The tag list of every post. A tag repeated within one
            list counts once.

    Returns:
        Tuple of (distinct tags in first-seen order, count per tag).
    """
    counts: dict[str, int] = {}
    for tags in tag_lists:
        for tag in dict.fromkeys(tags):
            counts[tag] = counts.get(tag, 0) + 1
    return list(counts), counts
