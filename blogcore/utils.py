"""Utility functions for blogcore.

String and path helpers shared by the content loader, the hooks and the CLI.

Key functions:
    titleize: Convert filenames to human-readable titles.
    is_markdown: Check if a path is a Markdown or MDX file.
    is_mdx: Check if a path is an MDX file.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path

DATE_PREFIX_RE = re.compile(r"^(\d{4})\.(\d{2})\.(\d{2})\.")


def titleize(filename: str) -> str:
    """Title for a file without a heading: ``2024.01.15.hello-world.mdx`` gives
    ``Hello World``. The date prefix is dropped and separators become spaces.
    """
    base = Path(filename).stem
    base = DATE_PREFIX_RE.sub("", base)
    words = re.split(r"[\s\-_.]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown or MDX file."""
    return path.suffix.lower() in (".md", ".mdx")


def is_mdx(path: Path) -> bool:
    return path.suffix.lower() == ".mdx"


def is_template(path: Path) -> bool:
    """Check if a path is a Jinja template file.

    Matches both .jinja and .html.jinja extensions.
    """
    return path.suffixes[-2:] == [".html", ".jinja"] or path.suffix == ".jinja"


def ensure_clean_dir(path: Path) -> None:
    """Empty the output directory, creating it when missing."""
    if path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()
    path.mkdir(parents=True, exist_ok=True)
