"""Depth-first ingestion of a content tree into a SiteIndex."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import NamedTuple, Protocol

from ..config import OUTPUT_EXTENSION, SOURCE_EXTENSION
from ..models import ContentKind
from ..parser.markdown import ParseError, split_entry
from .classifier import classify
from .site_index import SiteIndex

log = logging.getLogger(__name__)


class TreeEntry(NamedTuple):
    """One entry of a content tree, relative to the content root."""

    path: PurePosixPath
    is_dir: bool


class ContentTree(Protocol):
    """Read access to a content tree."""

    def iterdir(self, rel: PurePosixPath) -> list[TreeEntry]: ...

    def read_bytes(self, rel: PurePosixPath) -> bytes: ...


class FileSystemTree:
    """A content tree rooted at a directory on disk."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def iterdir(self, rel: PurePosixPath) -> list[TreeEntry]:
        directory = self.root / rel
        try:
            children = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise ParseError(rel, f"Failed to list directory: {e}") from e

        entries = []
        for child in children:
            # Symlinked directories are not followed, so cycles cannot occur
            is_dir = child.is_dir() and not child.is_symlink()
            entries.append(TreeEntry(rel / child.name, is_dir))
        return entries

    def read_bytes(self, rel: PurePosixPath) -> bytes:
        return (self.root / rel).read_bytes()


@dataclass
class IngestStats:
    """What the walk did with each file."""

    content_files: int = 0
    drafts_excluded: int = 0
    # Files left for the caller to copy verbatim
    assets: list[str] = field(default_factory=list)


def _is_hidden(path: PurePosixPath) -> bool:
    return path.name.startswith(".")


def _walk(tree: ContentTree) -> Iterator[PurePosixPath]:
    """Yield file paths depth-first, in name order.

    A sub-directory is fully processed before the walk resumes at its parent.
    Uses an explicit stack of directory listings instead of recursion.
    """
    stack: list[Iterator[TreeEntry]] = [iter(tree.iterdir(PurePosixPath()))]

    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        if _is_hidden(entry.path):
            continue

        if entry.is_dir:
            stack.append(iter(tree.iterdir(entry.path)))
        else:
            yield entry.path


def _read_text(tree: ContentTree, rel: PurePosixPath) -> str:
    try:
        data = tree.read_bytes(rel)
    except OSError as e:
        raise ParseError(rel, f"Failed to read file: {e}") from e

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(rel, f"File is not valid UTF-8: {e}") from e


def ingest_tree(
    tree: ContentTree,
    index: SiteIndex,
    *,
    include_drafts: bool = False,
    output_extension: str = OUTPUT_EXTENSION,
) -> IngestStats:
    """Split, classify and index every content file in the tree.

    Args:
        tree: Content tree to walk.
        index: Accumulator receiving the classified items.
        include_drafts: Keep posts flagged as drafts.
        output_extension: Extension used for URL keys.

    Returns:
        IngestStats for the walk.

    Raises:
        ParseError: On the first malformed or unreadable content file.
    """
    stats = IngestStats()

    for rel in _walk(tree):
        if rel.suffix != SOURCE_EXTENSION:
            stats.assets.append(rel.as_posix())
            continue

        split = split_entry(_read_text(tree, rel), rel)
        if split is None:
            log.debug("Skipping %s: no frontmatter block with a title", rel)
            stats.assets.append(rel.as_posix())
            continue

        item = classify(split, rel, include_drafts=include_drafts, output_extension=output_extension)
        if item is None:
            if split.metadata.kind is ContentKind.UNKNOWN:
                stats.assets.append(rel.as_posix())
            else:
                stats.drafts_excluded += 1
            continue

        index.add(item)
        stats.content_files += 1

    return stats
