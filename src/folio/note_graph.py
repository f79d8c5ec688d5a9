"""Forward links and backlinks between notes."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from .models import Note
from .parser.links import LinkStrategy, default_strategy
from .parser.title_index import NoteLookup

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteGraph:
    """Notes with their links resolved.

    Attributes:
        notes: URL -> note, with ``linked_note_urls`` and ``backlink_sources`` set.
        link_store: URL -> notes referencing it. Every note has an entry.
    """

    notes: dict[str, Note]
    link_store: dict[str, list[Note]]


def collect_forward_links(
    notes: Mapping[str, Note],
    strategy: LinkStrategy | None = None,
) -> dict[str, list[str]]:
    """First pass: resolve each note's references to known note URLs.

    Targets that match no note are dropped. The result keeps the order of
    first appearance and lists each target once.

    Args:
        notes: All notes of the site, keyed by URL.
        strategy: Link syntax; wiki links plus markdown links by default.

    Returns:
        Dict mapping each note URL to the URLs it references.
    """
    strategy = strategy or default_strategy()
    lookup = NoteLookup(notes.values())

    forward_links: dict[str, list[str]] = {}
    for url, note in notes.items():
        resolved: list[str] = []
        for target in strategy.find_targets(note.raw_body):
            target_url = lookup.resolve(target, source_url=url)
            if target_url is None:
                log.debug("Unresolved note reference %r in %s", target, url)
                continue
            if target_url not in resolved:
                resolved.append(target_url)
        forward_links[url] = resolved

    return forward_links


def invert_links(forward_links: Mapping[str, list[str]]) -> dict[str, list[str]]:
    """Second pass: derive backlinks from the complete forward-link set.

    Self references are excluded and each source appears once per target.

    Returns:
        Dict mapping every note URL to the URLs of notes referencing it.
    """
    backlinks: dict[str, list[str]] = {url: [] for url in forward_links}

    for source, targets in forward_links.items():
        for target in targets:
            if target == source:
                continue
            sources = backlinks.setdefault(target, [])
            if source not in sources:
                sources.append(source)

    return backlinks


def build_note_graph(
    notes: Mapping[str, Note],
    strategy: LinkStrategy | None = None,
) -> NoteGraph:
    """Resolve forward links and backlinks for all notes.

    The passes stay separate: backlinks are only derived once every note's
    forward links are known, so the result does not depend on walk order.
    """
    forward_links = collect_forward_links(notes, strategy)
    backlinks = invert_links(forward_links)

    linked: dict[str, Note] = {
        url: note.model_copy(
            update={
                "linked_note_urls": tuple(forward_links[url]),
                "backlink_sources": tuple(backlinks[url]),
            }
        )
        for url, note in notes.items()
    }

    link_store = {url: [linked[source] for source in backlinks[url]] for url in linked}

    log.debug(
        "Note graph: %d notes, %d links",
        len(linked),
        sum(len(targets) for targets in forward_links.values()),
    )
    return NoteGraph(notes=linked, link_store=link_store)
