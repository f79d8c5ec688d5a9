"""The frozen site model handed to the rendering stage.

``merge_context`` assembles the finalized indices, the note graph and the
layout configuration into one ``SiteContext``. It performs no
transformation beyond wrapping everything in read-only containers.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .indexer.site_index import SiteIndex
from .models import LayoutConfig, Note, Page, Post
from .note_graph import NoteGraph


@dataclass(frozen=True)
class SiteContext:
    """Everything the renderer needs for one build."""

    layout: LayoutConfig
    """Site-wide settings from layout/config.yml."""

    by_url: Mapping[str, Page | Post]
    """Pages and posts by URL key."""

    by_tag: Mapping[str, tuple[Page | Post, ...]]
    """Pages and posts per ``tags/<tag>`` key, in ingestion order."""

    by_collection: Mapping[str, tuple[Page | Post, ...]]
    """Pages and posts per collection, in ingestion order."""

    posts_chronological: tuple[Post, ...]
    """Posts newest first."""

    notes: Mapping[str, Note]
    """Notes by URL key, with forward links and backlinks resolved."""

    link_store: Mapping[str, tuple[Note, ...]]
    """Note URL -> notes referencing it."""

    @property
    def tags(self) -> list[str]:
        return sorted(self.by_tag)

    @property
    def head_notes(self) -> list[Note]:
        """Notes flagged ``head: true``: the entry points of the note graph."""
        return [note for url, note in sorted(self.notes.items()) if note.metadata.head]

    def backlinks(self, url: str) -> tuple[Note, ...]:
        return self.link_store.get(url, ())


def merge_context(index: SiteIndex, graph: NoteGraph, layout: LayoutConfig) -> SiteContext:
    """Freeze the indices and note graph into a SiteContext.

    Indices are assembled first, then notes, mirroring the order in which the
    pipeline resolves them.

    Raises:
        RuntimeError: If the index was not finalized, or the graph was built
            from a different set of notes. Both are programming errors.
    """
    if not index.finalized:
        raise RuntimeError("merge_context() requires a finalized SiteIndex")

    if set(graph.notes) != set(index.notes):
        raise RuntimeError("Note graph does not match the indexed notes")

    by_url = MappingProxyType(dict(index.by_url))
    by_tag = MappingProxyType(dict(index.by_tag))
    by_collection = MappingProxyType(dict(index.by_collection))
    posts = index.posts_chronological

    notes = MappingProxyType(dict(graph.notes))
    link_store = MappingProxyType({url: tuple(sources) for url, sources in graph.link_store.items()})

    return SiteContext(
        layout=layout,
        by_url=by_url,
        by_tag=by_tag,
        by_collection=by_collection,
        posts_chronological=posts,
        notes=notes,
        link_store=link_store,
    )
