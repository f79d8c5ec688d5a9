"""Markdown parsing with YAML frontmatter support."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import PurePath

import yaml
from frontmatter.default_handlers import YAMLHandler
from markdown_it import MarkdownIt
from pydantic import ValidationError

from ..models import Frontmatter

# The minimal well-formedness gate: a non-empty title line inside the block
TITLE_PATTERN = re.compile(r"^\s*title\s*:[ \t]*\S", re.MULTILINE)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_FORMAT = "%Y-%m-%d"

_handler = YAMLHandler()

# Cached converter; content is trusted so raw HTML passes through
_md: MarkdownIt | None = None


def _get_markdown() -> MarkdownIt:
    global _md
    if _md is None:
        _md = MarkdownIt("commonmark", {"html": True}).enable("table")
    return _md


class ParseError(Exception):
    """Raised when a content file is malformed. Always fatal for the build."""

    def __init__(self, path: str | PurePath, message: str) -> None:
        self.path = str(path)
        self.message = message
        super().__init__(f"{path}: {message}")


@dataclass(frozen=True)
class SplitResult:
    """Metadata and body of one content file."""

    metadata: Frontmatter
    raw_body: str
    html: str


def split_entry(text: str, path: str | PurePath) -> SplitResult | None:
    """Split a raw file into frontmatter and body, and convert the body.

    Files without a ``---`` delimited block at the top, or whose block has
    no title, are not content and yield None.

    Args:
        text: Raw file contents.
        path: Path of the file, used in diagnostics.

    Returns:
        SplitResult, or None if the file should be skipped.

    Raises:
        ParseError: If the block cannot be decoded, fails validation, or the
            body cannot be converted.
    """
    text = text.lstrip("\ufeff")

    if not _handler.detect(text):
        return None

    try:
        block, body = _handler.split(text)
    except ValueError:
        # Opening marker without a closing one
        return None

    if not TITLE_PATTERN.search(block):
        return None

    try:
        data = _handler.load(block)
    except yaml.YAMLError as e:
        raise ParseError(path, f"Failed to parse frontmatter: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(path, "Frontmatter must be a mapping")

    title = data.get("title")
    if title is None or (isinstance(title, str) and not title.strip()):
        return None

    try:
        metadata = Frontmatter.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        raise ParseError(path, "Invalid frontmatter:\n" + "\n".join(errors)) from e

    raw_body = body.lstrip("\r\n")
    return SplitResult(metadata=metadata, raw_body=raw_body, html=render_markdown(raw_body, path))


def render_markdown(body: str, path: str | PurePath = "<string>") -> str:
    """Convert a markdown body to HTML.

    Raises:
        ParseError: If conversion fails.
    """
    try:
        return _get_markdown().render(body)
    except Exception as e:
        raise ParseError(path, f"Failed to convert markdown: {e}") from e


def parse_date(value: str | None, path: str | PurePath) -> int:
    """Parse an ISO ``YYYY-MM-DD`` date into a Unix timestamp (UTC midnight).

    Missing dates map to 0.

    Raises:
        ParseError: If the value is not a valid date in that format.
    """
    if not value:
        return 0

    value = value.strip()
    if not DATE_PATTERN.match(value):
        raise ParseError(path, f"Invalid date {value!r} (expected YYYY-MM-DD)")

    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except ValueError as e:
        raise ParseError(path, f"Invalid date {value!r}: {e}") from e

    return int(parsed.replace(tzinfo=UTC).timestamp())
