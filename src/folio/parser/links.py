"""Note reference extraction.

The syntax used to reference another note is pluggable: a strategy only
has to report the raw link targets it finds in a body. Resolving those
targets to note URLs is done separately by ``NoteLookup``.
"""

from __future__ import annotations

import re
from typing import Iterable, Protocol
from urllib.parse import unquote, urlsplit

# Pattern for [[link]] syntax - captures content between double brackets
# Handles [[target]], [[target|label]] and [[target#heading]]
WIKI_LINK_PATTERN = re.compile(r"\[\[([^\[\]]+)\]\]")

# Inline markdown links: [label](target "optional title"), images excluded
MD_LINK_PATTERN = re.compile(r"(?<!!)\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")

# Fenced and inline code never carries references
CODE_PATTERN = re.compile(r"```.*?```|~~~.*?~~~|`[^`\n]*`", re.DOTALL)


class LinkStrategy(Protocol):
    """Finds raw note reference targets in a markdown body."""

    def find_targets(self, body: str) -> list[str]: ...


def _strip_code(body: str) -> str:
    return CODE_PATTERN.sub("", body)


def _unique(targets: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for target in targets:
        if target and target not in seen:
            seen.add(target)
            result.append(target)
    return result


class WikiLinkStrategy:
    """``[[target]]`` references, with optional ``|label`` and ``#heading``."""

    def find_targets(self, body: str) -> list[str]:
        targets = []
        for raw in WIKI_LINK_PATTERN.findall(_strip_code(body)):
            target = raw.split("|", 1)[0].split("#", 1)[0]
            targets.append(normalize_target(target))
        return _unique(targets)


class MarkdownLinkStrategy:
    """Internal ``[label](target)`` links. External URLs and bare anchors are ignored."""

    def find_targets(self, body: str) -> list[str]:
        targets = []
        for raw in MD_LINK_PATTERN.findall(_strip_code(body)):
            parts = urlsplit(raw)
            if parts.scheme or parts.netloc:
                continue
            if not parts.path:
                continue
            targets.append(normalize_target(unquote(parts.path)))
        return _unique(targets)


class CompositeLinkStrategy:
    """Runs several strategies and merges their targets in order."""

    def __init__(self, *strategies: LinkStrategy) -> None:
        self.strategies = strategies

    def find_targets(self, body: str) -> list[str]:
        return _unique(
            target for strategy in self.strategies for target in strategy.find_targets(body)
        )


def default_strategy() -> LinkStrategy:
    return CompositeLinkStrategy(WikiLinkStrategy(), MarkdownLinkStrategy())


def normalize_target(target: str) -> str:
    """Normalize a link target.

    - Strips whitespace
    - Normalizes path separators
    - Removes leading ``./`` and surrounding slashes
    """
    target = target.strip().replace("\\", "/")
    while target.startswith("./"):
        target = target[2:]
    return target.strip("/")
