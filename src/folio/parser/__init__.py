"""Markdown parsing with frontmatter and note reference extraction."""

from .links import (
    CompositeLinkStrategy,
    LinkStrategy,
    MarkdownLinkStrategy,
    WikiLinkStrategy,
    default_strategy,
    normalize_target,
)
from .markdown import ParseError, SplitResult, parse_date, render_markdown, split_entry
from .title_index import NoteLookup

__all__ = [
    "split_entry",
    "SplitResult",
    "ParseError",
    "parse_date",
    "render_markdown",
    "LinkStrategy",
    "WikiLinkStrategy",
    "MarkdownLinkStrategy",
    "CompositeLinkStrategy",
    "default_strategy",
    "normalize_target",
    "NoteLookup",
]
