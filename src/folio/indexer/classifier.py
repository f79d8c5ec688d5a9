"""Turns split content files into typed Page, Post and Note entities."""

from __future__ import annotations

import logging
import unicodedata
from pathlib import PurePosixPath
from typing import Callable

from ..config import EXCERPT_MAX_CHARS, OUTPUT_EXTENSION, SOURCE_EXTENSION
from ..models import ContentItem, ContentKind, Note, Page, Post
from ..parser.markdown import SplitResult, parse_date

log = logging.getLogger(__name__)


def content_url(rel_path: str | PurePosixPath, output_extension: str = OUTPUT_EXTENSION) -> str:
    """Derive the URL key of a content file.

    The path is taken relative to the content root; the source extension is
    swapped for the output extension.

    Examples:
        "posts/hello.md" -> "posts/hello.html"
        "./about.md" -> "about.html"
    """
    parts = [part for part in PurePosixPath(rel_path).parts if part not in ("/", ".")]
    if not parts:
        raise ValueError(f"Cannot derive a URL from {rel_path!r}")

    path = PurePosixPath(*parts)
    if path.suffix == SOURCE_EXTENSION:
        path = path.with_suffix(output_extension)
    return path.as_posix()


def _is_trimmed(char: str) -> bool:
    return char.isspace() or unicodedata.category(char) == "Cc"


def _trim(text: str) -> str:
    start, end = 0, len(text)
    while start < end and _is_trimmed(text[start]):
        start += 1
    while end > start and _is_trimmed(text[end - 1]):
        end -= 1
    return text[start:end]


def make_excerpt(raw_body: str, limit: int = EXCERPT_MAX_CHARS) -> str:
    """Plain-text preview of a note body.

    Leading/trailing whitespace and control characters are stripped, and the
    result is capped at ``limit`` characters.
    """
    return _trim(_trim(raw_body)[:limit])


def _build_post(split: SplitResult, rel_path: str, url: str, include_drafts: bool) -> Post | None:
    if split.metadata.draft and not include_drafts:
        log.debug("Skipping draft post %s", rel_path)
        return None
    return Post(
        url=url,
        source_path=rel_path,
        publish_date=parse_date(split.metadata.date, rel_path),
        metadata=split.metadata,
        rendered_body=split.html,
    )


def _build_page(split: SplitResult, rel_path: str, url: str, include_drafts: bool) -> Page:
    return Page(
        url=url,
        source_path=rel_path,
        publish_date=parse_date(split.metadata.date, rel_path),
        metadata=split.metadata,
        rendered_body=split.html,
    )


def _build_note(split: SplitResult, rel_path: str, url: str, include_drafts: bool) -> Note:
    return Note(
        url=url,
        source_path=rel_path,
        publish_date=parse_date(split.metadata.date, rel_path),
        metadata=split.metadata,
        rendered_body=split.html,
        raw_body=split.raw_body,
        excerpt=make_excerpt(split.raw_body),
    )


def _ignore(split: SplitResult, rel_path: str, url: str, include_drafts: bool) -> None:
    log.debug("No content type for %s (type=%r), leaving it as an asset", rel_path, split.metadata.type)
    return None


_BUILDERS: dict[ContentKind, Callable[[SplitResult, str, str, bool], ContentItem | None]] = {
    ContentKind.POST: _build_post,
    ContentKind.PAGE: _build_page,
    ContentKind.NOTE: _build_note,
    ContentKind.UNKNOWN: _ignore,
}


def classify(
    split: SplitResult,
    rel_path: str | PurePosixPath,
    *,
    include_drafts: bool = False,
    output_extension: str = OUTPUT_EXTENSION,
) -> ContentItem | None:
    """Build the entity for one content file.

    Args:
        split: Output of the splitter for the file.
        rel_path: Path of the file relative to the content root.
        include_drafts: Keep posts flagged ``draft: true``.
        output_extension: Extension used for the URL key.

    Returns:
        A Page, Post or Note; None for excluded drafts and unknown types.

    Raises:
        ParseError: If the frontmatter date is invalid.
    """
    rel = PurePosixPath(rel_path).as_posix()
    url = content_url(rel, output_extension)
    builder = _BUILDERS[split.metadata.kind]
    return builder(split, rel, url, include_drafts)
