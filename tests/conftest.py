"""Shared test fixtures for folio test suite.

Design:
- tmp_site: Creates an isolated site (content/ + layout/config.yml) in a temp directory
- write_entry: Writes a markdown file with frontmatter into a content tree
- MemoryTree: In-memory ContentTree for walker tests
- runner: CliRunner for CLI tests
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Callable, Generator

import pytest
from click.testing import CliRunner

from folio.indexer import TreeEntry


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def entry_text(
    title: str | None,
    body: str = "",
    *,
    type: str | None = None,
    date: str | None = None,
    draft: bool = False,
    tags: list[str] | None = None,
    collections: list[str] | None = None,
    extra: str = "",
) -> str:
    """Render a content file with a YAML frontmatter block."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if type:
        lines.append(f"type: {type}")
    if date:
        lines.append(f"date: {date}")
    if draft:
        lines.append("draft: true")
    if tags:
        lines.append(f"tags: [{', '.join(tags)}]")
    if collections:
        lines.append(f"collections: [{', '.join(collections)}]")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    lines.append("")
    lines.append(body)
    return "\n".join(lines) + "\n"


class MemoryTree:
    """ContentTree backed by a dict of relative path -> file text."""

    def __init__(self, files: dict[str, str | bytes]) -> None:
        self.files = {PurePosixPath(path): content for path, content in files.items()}
        self.reads: list[str] = []

    def iterdir(self, rel: PurePosixPath) -> list[TreeEntry]:
        children: dict[str, bool] = {}
        depth = len(rel.parts)
        for path in self.files:
            if path.parts[:depth] != rel.parts or len(path.parts) <= depth:
                continue
            name = path.parts[depth]
            is_dir = len(path.parts) > depth + 1
            children[name] = children.get(name, False) or is_dir
        return [TreeEntry(rel / name, children[name]) for name in sorted(children)]

    def read_bytes(self, rel: PurePosixPath) -> bytes:
        self.reads.append(rel.as_posix())
        content = self.files[rel]
        if isinstance(content, bytes):
            return content
        return content.encode("utf-8")


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def tmp_site(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Create an isolated site directory and point FOLIO_SITE_ROOT at it.

    Usage:
        def test_something(tmp_site, write_entry):
            write_entry("posts/hello.md", entry_text("Hello", type="post"))
    """
    site_root = tmp_path / "site"
    (site_root / "content").mkdir(parents=True)
    (site_root / "layout").mkdir()
    (site_root / "layout" / "config.yml").write_text(
        "siteTitle: Test Site\nbaseURL: https://example.com\nauthor: Tester\nnavbar:\n  - index\n  - posts\n",
        encoding="utf-8",
    )

    monkeypatch.setenv("FOLIO_SITE_ROOT", str(site_root))
    yield site_root


@pytest.fixture
def write_entry(tmp_site: Path) -> Callable[[str, str], Path]:
    """Write a file relative to the site's content directory."""

    def _write(rel_path: str, content: str) -> Path:
        path = tmp_site / "content" / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
