"""Site building for blogcore.

Runs the plugin through the in-process host, renders every registered page
and writes it to the output directory as ``<path>/index.html``.

Key functions:
- build_site: Main function to build the entire site.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from jinja2 import TemplateNotFound, TemplateSyntaxError, UndefinedError

from .nodes import Page
from .options import BlogOptions, load_options
from .runtime import BuildError, Site
from .templates import TemplateEngine
from .utils import ensure_clean_dir

logger = logging.getLogger(__name__)

__all__ = ["BuildError", "BuildResult", "build_site"]


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        pages: List of all pages written.
        output_dir: Directory where the site was built.
        options: Options the site was built with.
        warnings: Warnings reported during the build.
    """

    pages: list[Page]
    output_dir: Path
    options: BlogOptions
    warnings: list[str]


def build_site(
    project_root: Path,
    include_drafts: bool = False,
    clean_output: bool = True,
    output_dir_override: Path | None = None,
    options: BlogOptions | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        include_drafts: Whether to include drafts (names starting with _).
        clean_output: Whether to wipe the output directory before building.
        output_dir_override: Optional path to write the build output instead
            of the configured output_dir.
        options: Options to use instead of those in blogcore.yaml.

    Returns:
        BuildResult containing the pages written and the output directory.

    Raises:
        BuildError: If a query fails or a page cannot be rendered.
    """
    options = options or load_options(project_root)
    output_dir = output_dir_override or (project_root / options.output_dir)

    site = Site(project_root, options=options, include_drafts=include_drafts)
    pages = site.run()

    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    engine = TemplateEngine(site)
    for page in pages:
        source = _source_path(site, page)
        try:
            rendered = engine.render_page(page)
        except TemplateSyntaxError as exc:
            raise BuildError(
                source,
                f"Template syntax error on line {exc.lineno}: {exc.message}",
                exc,
            ) from exc
        except TemplateNotFound as exc:
            raise BuildError(source, f"Template not found: {exc.name}", exc) from exc
        except Exception as exc:
            raise BuildError(source, _format_error_message(exc), exc) from exc
        _write_page(output_dir, page, rendered, source)

    logger.info("Wrote %d pages to %s", len(pages), output_dir)
    return BuildResult(
        pages=pages,
        output_dir=output_dir,
        options=options,
        warnings=list(site.reporter.warnings),
    )


def _source_path(site: Site, page: Page) -> Path | None:
    """Find the source file a page was rendered from, for error messages."""
    if page.source:
        return Path(page.source)
    post = site.get_node(page.context.get("id"))
    if post is None:
        return None
    mdx = site.source_of(post)
    file_node = site.get_node(mdx.parent) if mdx else None
    return Path(file_node["absolute_path"]) if file_node else None


def _format_error_message(exc: Exception) -> str:
    if isinstance(exc, UndefinedError):
        return f"Undefined variable: {exc}"
    if isinstance(exc, LookupError):
        return f"Missing node: {exc}"
    return f"{type(exc).__name__}: {exc}"


def _write_page(
    output_dir: Path, page: Page, rendered: str, source: Path | None = None
) -> None:
    """Write a rendered page to ``<output_dir>/<page path>/index.html``.

    Raises:
        BuildError: If the page path points outside the output directory.
    """
    root = output_dir.resolve()
    target_dir = (root / page.path.strip("/")).resolve()
    if target_dir != root and root not in target_dir.parents:
        raise BuildError(source, f"Page path {page.path!r} leaves the output directory")
    target_dir.mkdir(parents=True, exist_ok=True)
    with open(target_dir / "index.html", "w", encoding="utf-8") as f:
        f.write(rendered)
