"""Command-line interface for blogcore.

Commands:
- new: Scaffold a new blog project.
- build: Build the site into the output directory.
- post: Create a new post interactively.
- slug: Print the slug a content file gets.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .extractors import extract_frontmatter
from .options import CONFIG_FILENAME, DEFAULT_CONFIG, load_options
from .slugs import derive_slug

SAMPLE_POST = """---
title: Hello World
date: {date}
tags: welcome, getting started
snippet: The first post of this blog.
---

# Hello World

Write your first post here.
"""


@click.group()
@click.version_option(version=__version__, prog_name="blogcore")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
def cli(verbose: bool):
    """Blogcore blog content plugin."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new blog project."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New blog created at {target}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft content")
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Directory to write the site to (overrides blogcore.yaml output_dir)",
)
def build(drafts: bool, output: Path | None):
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import BuildError, build_site

    try:
        result = build_site(
            project_root, include_drafts=drafts, output_dir_override=output
        )
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        if exc.source_path is not None:
            click.echo(
                click.style(f"  File: {_display_path(exc.source_path, project_root)}", fg="yellow"),
                err=True,
            )
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    for warning in result.warnings:
        click.echo(click.style(f"Warning: {warning}", fg="yellow"), err=True)
    click.echo(f"Built {len(result.pages)} pages into {result.output_dir}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def slug(file: Path):
    """Print the slug a content file gets."""
    project_root = Path.cwd()
    options = load_options(project_root)
    content_dir = (project_root / options.content_path).resolve()
    path = file.resolve()
    try:
        rel = path.relative_to(content_dir)
    except ValueError:
        raise click.ClickException(f"{file} is not inside {options.content_path}/") from None
    if len(rel.parts) < 2:
        raise click.ClickException(f"{file} is not inside a content source folder")
    frontmatter, _ = extract_frontmatter(path.read_text(encoding="utf-8"))
    relative_path = Path(*rel.parts[1:]).as_posix()
    click.echo(derive_slug(frontmatter.get("slug"), relative_path, options.base_path))


@cli.command()
def post():
    """Create a new post interactively."""
    project_root = Path.cwd()
    options = load_options(project_root)
    content_dir = project_root / options.content_path
    folders = [name for name in options.sources if (content_dir / name).is_dir()]
    if not folders:
        raise click.ClickException(
            f"No content folders found in {options.content_path}/. Run 'blogcore build' "
            "or create them first."
        )

    folder = questionary.select(
        "Select folder:", choices=folders, style=_questionary_style()
    ).ask()
    if folder is None:
        raise click.Abort()

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()

    tags = questionary.text(
        "Tags (comma separated):", style=_questionary_style()
    ).ask()
    if tags is None:
        raise click.Abort()

    title = title.strip()
    today = datetime.now()
    name = _slug_name(title)
    target = content_dir / folder / f"{today:%Y.%m.%d}.{name}.mdx"
    if target.exists():
        raise click.ClickException(
            f"File already exists: {target.relative_to(project_root)}"
        )

    frontmatter = {"title": title, "date": today.date(), "tags": tags.strip()}
    header = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
    target.write_text(f"---\n{header}---\n\n# {title}\n\n", encoding="utf-8")
    click.echo(f"Created {target.relative_to(project_root)}")


def _slug_name(title: str) -> str:
    """File name part for a post title: lowercase words joined by dashes."""
    words = "".join(c if c.isalnum() else " " for c in title.lower()).split()
    return "-".join(words) or "post"


def _display_path(path: Path, project_root: Path) -> str:
    try:
        return str(path.relative_to(project_root))
    except ValueError:
        return str(path)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Create the config, content folders and a sample post of a new project."""
    root.mkdir(parents=True, exist_ok=True)
    config = {
        key: DEFAULT_CONFIG[key]
        for key in ("base_path", "posts_per_page", "tags_path", "output_dir")
    }
    (root / CONFIG_FILENAME).write_text(
        yaml.safe_dump(config, sort_keys=False), encoding="utf-8"
    )
    for folder in DEFAULT_CONFIG["folders_to_check"]:
        (root / folder).mkdir(parents=True, exist_ok=True)
    (root / DEFAULT_CONFIG["pages_path"]).mkdir(exist_ok=True)

    today = datetime.now()
    sample = root / "content" / "posts" / f"{today:%Y.%m.%d}.hello-world.mdx"
    sample.write_text(SAMPLE_POST.format(date=f"{today:%Y-%m-%d}"), encoding="utf-8")
    _try_git_init(root)


def _try_git_init(root: Path) -> None:
    """Initialize a git repository if git is available."""
    if os.environ.get("BLOGCORE_SKIP_GIT_INIT") == "1":
        return
    git_bin = shutil.which("git")
    if not git_bin:
        return
    try:
        subprocess.run([git_bin, "init"], cwd=root, check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        click.echo(f"Skipping git init: {exc}", err=True)
