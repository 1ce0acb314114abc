"""Metadata extractors for blogcore.

Each extractor pulls one kind of metadata out of a source file. The
composite runs them in order and merges the results, later extractors
overriding earlier ones.

Key classes:
- FrontmatterExtractor: Splits YAML front-matter from the body.
- TitleExtractor: Title from a level-1 heading or the filename.
- ExcerptExtractor: First paragraph of the body.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from .utils import titleize

logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n?---\s*(?:\n|$)", re.DOTALL)


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML front-matter from content.

    Invalid YAML, or YAML that is not a mapping, yields an empty dict and
    leaves the text untouched.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (front-matter dict, remaining content).
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring invalid front-matter: %s", exc)
        return {}, text
    if not isinstance(data, dict):
        return {}, text
    return data, text[match.end() :]


class FrontmatterExtractor:
    def extract(self, content: str, path: Path) -> dict[str, Any]:
        frontmatter, body = extract_frontmatter(content)
        return {"frontmatter": frontmatter, "body": body}


class TitleExtractor:
    """Extracts title from content or filename.

    Looks for a level-1 heading (# Title) in the content,
    falling back to titleizing the filename.
    """

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        _, body = extract_frontmatter(content)
        for line in body.splitlines():
            stripped = line.strip()
            if stripped.startswith("# "):
                return {"title": stripped.lstrip("# ").strip()}
        return {"title": titleize(path.name)}


class ExcerptExtractor:
    """Extracts the first paragraph of the body as plain text.

    Headings, images, code fences, imports and JSX/HTML blocks are skipped.
    """

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        _, body = extract_frontmatter(content)
        return {"excerpt": self._extract_excerpt(body)}

    def _extract_excerpt(self, text: str) -> str:
        paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
        for para in paragraphs:
            if para.startswith(("#", "![", "```", "---", "<", "{", "import ", "export ")):
                continue
            return " ".join(para.split())
        return ""


class CompositeMetadataExtractor:
    """Combines multiple metadata extractors."""

    def __init__(self, extractors: list | None = None):
        if extractors is None:
            self._extractors = [
                FrontmatterExtractor(),
                TitleExtractor(),
                ExcerptExtractor(),
            ]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor) -> None:
        self._extractors.append(extractor)

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Run all registered extractors and merge their results."""
        result: dict[str, Any] = {}
        for extractor in self._extractors:
            result.update(extractor.extract(content, path))
        return result


default_metadata_extractor = CompositeMetadataExtractor()
