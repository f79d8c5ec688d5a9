#!/usr/bin/env python3
"""
folio: CLI for the folio content engine

Usage:
    folio build [SITE_ROOT]          # Ingest a site and summarize it
    folio posts                      # List posts, newest first
    folio links notes/idea.html      # Show a note's links and backlinks
"""

from __future__ import annotations

import json
import sys
from datetime import UTC, datetime
from typing import NoReturn

import click

from . import __version__ as FOLIO_VERSION


def output(data, as_json: bool = False):
    """Output data as JSON or formatted text."""
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str))
    else:
        click.echo(data)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _run_build(site_root: str | None, include_drafts: bool):
    from .config import ConfigurationError
    from .core import BuildConfig, build_site
    from .parser import ParseError

    try:
        return build_site(site_root, BuildConfig(include_drafts=include_drafts))
    except (ParseError, ConfigurationError) as e:
        _fail(str(e))


def _format_date(timestamp: int) -> str:
    if not timestamp:
        return "undated"
    return datetime.fromtimestamp(timestamp, UTC).strftime("%Y-%m-%d")


# ─────────────────────────────────────────────────────────────────────────────
# Main CLI Group
# ─────────────────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=FOLIO_VERSION, prog_name="folio")
@click.option("--verbose", "-v", is_flag=True, help="Log skipped files and unresolved note links")
def cli(verbose: bool):
    """folio: ingest a markdown content tree into a cross-referenced site model.

    \b
    Site layout:
      content/            # Markdown files with YAML frontmatter
      layout/config.yml   # Site-wide settings

    \b
    Site root resolution (in order):
      1. SITE_ROOT argument / --site-root option
      2. FOLIO_SITE_ROOT environment variable
      3. Nearest parent directory with content/ and layout/config.yml
    """
    if verbose:
        from ._logging import configure_logging

        configure_logging(verbose=True)


@cli.command()
@click.argument("site_root", required=False, type=click.Path(file_okay=False))
@click.option("--drafts", "include_drafts", is_flag=True, help="Include draft posts")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def build(site_root: str | None, include_drafts: bool, as_json: bool):
    """Ingest the site and summarize the content model.

    \b
    Examples:
      folio build                 # Auto-detect the site root
      folio build ./my-site       # Explicit site root
      folio build --drafts        # Keep draft posts
    """
    from .core import summarize

    result = _run_build(site_root, include_drafts)
    summary = summarize(result)

    if as_json:
        output(summary, as_json=True)
        return

    click.echo(f"Site: {summary['site_root']}")
    if summary["site_title"]:
        click.echo(f"Title: {summary['site_title']}")
    click.echo(
        f"Pages: {summary['pages']}  Posts: {summary['posts']}  Notes: {summary['notes']}"
    )
    if summary["drafts_excluded"]:
        click.echo(f"Drafts excluded: {summary['drafts_excluded']}")
    if summary["tags"]:
        click.echo(f"Tags: {', '.join(summary['tags'])}")
    if summary["collections"]:
        click.echo(f"Collections: {', '.join(summary['collections'])}")
    if summary["assets"]:
        click.echo(f"Assets: {len(summary['assets'])}")


@cli.command()
@click.option("--site-root", type=click.Path(file_okay=False), default=None, help="Site directory")
@click.option("--drafts", "include_drafts", is_flag=True, help="Include draft posts")
@click.option("--limit", "-n", type=int, default=None, help="Show at most N posts")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def posts(site_root: str | None, include_drafts: bool, limit: int | None, as_json: bool):
    """List posts, newest first."""
    result = _run_build(site_root, include_drafts)
    items = list(result.context.posts_chronological)
    if limit is not None:
        items = items[:limit]

    if as_json:
        output(
            [
                {
                    "url": post.url,
                    "title": post.title,
                    "date": post.metadata.date,
                    "draft": post.metadata.draft,
                    "tags": list(post.metadata.tags),
                }
                for post in items
            ],
            as_json=True,
        )
        return

    if not items:
        click.echo("No posts.")
        return

    for post in items:
        draft = " [draft]" if post.metadata.draft else ""
        click.echo(f"{_format_date(post.publish_date)}  {post.url}  {post.title}{draft}")


@cli.command()
@click.argument("note_url")
@click.option("--site-root", type=click.Path(file_okay=False), default=None, help="Site directory")
@click.option("--drafts", "include_drafts", is_flag=True, help="Include draft posts")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def links(note_url: str, site_root: str | None, include_drafts: bool, as_json: bool):
    """Show the notes NOTE_URL links to and the notes linking back to it.

    \b
    Examples:
      folio links notes/zettel.html
    """
    result = _run_build(site_root, include_drafts)
    note = result.context.notes.get(note_url)
    if note is None:
        _fail(f"No note with URL {note_url!r}")

    backlinks = result.context.backlinks(note_url)

    if as_json:
        output(
            {
                "url": note.url,
                "title": note.title,
                "links": list(note.linked_note_urls),
                "backlinks": [source.url for source in backlinks],
            },
            as_json=True,
        )
        return

    click.echo(f"{note.title} ({note.url})")
    click.echo("\nLinks:")
    for url in note.linked_note_urls:
        click.echo(f"  -> {url}")
    if not note.linked_note_urls:
        click.echo("  (none)")

    click.echo("\nBacklinks:")
    for source in backlinks:
        click.echo(f"  <- {source.url}  {source.title}")
    if not backlinks:
        click.echo("  (none)")


def main():
    """Entry point for folio CLI."""
    from ._logging import configure_logging

    configure_logging()
    cli()


if __name__ == "__main__":
    main()
