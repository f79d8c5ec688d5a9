"""Lookup index for resolving note references to note URLs.

Enables resolution of [[Title]] and [[filename]] style links in addition
to path-style [[notes/entry]] and [label](entry.html) links.
"""

from __future__ import annotations

import posixpath
from typing import Iterable

from ..models import Note


def _strip_extension(path: str) -> str:
    root, _ext = posixpath.splitext(path)
    return root


class NoteLookup:
    """Maps every way a note can be referenced to its URL.

    Path keys (URL, URL without extension, source path) are matched exactly
    and then case-insensitively; titles and file stems are matched
    case-insensitively. When two notes share a title or stem, the first one
    ingested wins.
    """

    def __init__(self, notes: Iterable[Note]) -> None:
        self.paths: dict[str, str] = {}
        self.paths_folded: dict[str, str] = {}
        self.titles: dict[str, str] = {}
        self.stems: dict[str, str] = {}

        for note in notes:
            keys = [note.url, _strip_extension(note.url)]
            if note.source_path:
                keys.extend([note.source_path, _strip_extension(note.source_path)])
            for key in keys:
                self.paths.setdefault(key, note.url)
                self.paths_folded.setdefault(key.lower(), note.url)

            title_key = note.title.strip().lower()
            if title_key:
                self.titles.setdefault(title_key, note.url)

            stem = posixpath.basename(_strip_extension(note.url)).lower()
            self.stems.setdefault(stem, note.url)

    def __contains__(self, url: str) -> bool:
        return self.paths.get(url) == url

    def resolve(self, target: str, source_url: str | None = None) -> str | None:
        """Resolve a link target to a note URL.

        Attempts resolution in order:
        1. Path relative to the source note's directory
        2. Path relative to the content root
        3. Title (case-insensitive)
        4. Filename without directory (case-insensitive)

        Targets containing "/" are paths and only use steps 1 and 2.

        Args:
            target: Normalized link target.
            source_url: URL of the note containing the link.

        Returns:
            The target note's URL, or None if no note matches.
        """
        if not target:
            return None

        for candidate in self._path_candidates(target, source_url):
            url = self.paths.get(candidate) or self.paths_folded.get(candidate.lower())
            if url:
                return url

        if "/" in target:
            return None

        folded = target.lower()
        if folded in self.titles:
            return self.titles[folded]

        stem = _strip_extension(folded)
        if stem in self.stems:
            return self.stems[stem]

        return None

    @staticmethod
    def _path_candidates(target: str, source_url: str | None) -> list[str]:
        candidates = []
        if source_url:
            source_dir = posixpath.dirname(source_url)
            if source_dir:
                joined = posixpath.normpath(posixpath.join(source_dir, target))
                if not joined.startswith(".."):
                    candidates.append(joined)
        rooted = posixpath.normpath(target)
        if not rooted.startswith(".."):
            candidates.append(rooted)
        return candidates
