"""Site build orchestration.

Runs the ingestion pipeline end to end:
1. Walk the content tree, splitting, classifying and indexing each file
2. Order the posts
3. Resolve note links (forward pass, then backlinks)
4. Merge indices, notes and layout config into a frozen SiteContext
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import LAYOUT_CONFIG, OUTPUT_EXTENSION, get_content_root, get_site_root, load_layout_config
from .context import SiteContext, merge_context
from .indexer import ContentTree, FileSystemTree, IngestStats, SiteIndex, ingest_tree
from .models import LayoutConfig
from .note_graph import build_note_graph
from .parser.links import LinkStrategy

log = logging.getLogger(__name__)


@dataclass
class BuildConfig:
    """Configuration for one site build."""

    include_drafts: bool = False
    output_extension: str = OUTPUT_EXTENSION
    link_strategy: LinkStrategy | None = None  # None: wiki links plus markdown links


@dataclass
class BuildResult:
    """Result of a site build."""

    context: SiteContext
    stats: IngestStats = field(default_factory=IngestStats)
    site_root: Path | None = None


def ingest_content(
    tree: ContentTree,
    config: BuildConfig | None = None,
    layout: LayoutConfig | None = None,
) -> BuildResult:
    """Build the site model from an arbitrary content tree.

    Args:
        tree: Content tree to ingest.
        config: Build options (defaults: drafts excluded, ``.html`` URLs).
        layout: Site-wide settings; defaults when omitted.

    Returns:
        BuildResult holding the frozen SiteContext and walk statistics.

    Raises:
        ParseError: On the first malformed content file.
    """
    config = config or BuildConfig()

    index = SiteIndex()
    stats = ingest_tree(
        tree,
        index,
        include_drafts=config.include_drafts,
        output_extension=config.output_extension,
    )
    index.finalize()

    graph = build_note_graph(index.notes, config.link_strategy)
    context = merge_context(index, graph, layout or LayoutConfig())

    log.info(
        "Ingested %d pages, %d posts, %d notes (%d drafts excluded, %d assets)",
        len(context.by_url) - len(context.posts_chronological),
        len(context.posts_chronological),
        len(context.notes),
        stats.drafts_excluded,
        len(stats.assets),
    )
    return BuildResult(context=context, stats=stats)


def build_site(site_root: Path | str | None = None, config: BuildConfig | None = None) -> BuildResult:
    """Build the site model for a site directory.

    Args:
        site_root: Site directory containing content/ and layout/config.yml
            (auto-detected if omitted, see ``get_site_root``).
        config: Build options.

    Raises:
        ConfigurationError: If the site or its configuration cannot be found.
        ParseError: On the first malformed content file.
    """
    root = get_site_root(site_root)
    layout = load_layout_config(root / LAYOUT_CONFIG)
    tree = FileSystemTree(get_content_root(root))

    result = ingest_content(tree, config, layout)
    result.site_root = root
    return result


def summarize(result: BuildResult) -> dict:
    """Summarize a build for CLI output.

    Returns:
        Dict with counts, tag and collection names, and the asset list.
    """
    context = result.context
    return {
        "site_root": str(result.site_root) if result.site_root else None,
        "site_title": context.layout.site_title,
        "pages": len(context.by_url) - len(context.posts_chronological),
        "posts": len(context.posts_chronological),
        "notes": len(context.notes),
        "tags": context.tags,
        "collections": sorted(context.by_collection),
        "head_notes": [note.url for note in context.head_notes],
        "drafts_excluded": result.stats.drafts_excluded,
        "assets": list(result.stats.assets),
    }
