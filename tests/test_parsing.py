"""Tests for folio parsing modules.

Coverage:
- src/folio/parser/markdown.py - frontmatter splitting, markdown conversion, dates
- src/folio/parser/links.py - note reference strategies
- src/folio/parser/title_index.py - resolving references to note URLs

Philosophy: Test behaviors, not regex internals. Use parametrize for variations.
"""

from __future__ import annotations

import pytest

from conftest import entry_text
from folio.models import Frontmatter, Note
from folio.parser import (
    CompositeLinkStrategy,
    MarkdownLinkStrategy,
    NoteLookup,
    ParseError,
    WikiLinkStrategy,
    default_strategy,
    normalize_target,
    parse_date,
    render_markdown,
    split_entry,
)


def _note(url: str, title: str, source_path: str = "") -> Note:
    return Note(
        url=url,
        source_path=source_path,
        metadata=Frontmatter(title=title, type="note"),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Splitter Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestSplitEntry:
    """Tests for split_entry."""

    def test_splits_metadata_and_body(self):
        """Frontmatter is decoded and the body is converted to HTML."""
        text = entry_text("Hello", "Some *text*", type="post", tags=["python", "web"])

        result = split_entry(text, "posts/hello.md")

        assert result is not None
        assert result.metadata.title == "Hello"
        assert result.metadata.type == "post"
        assert result.metadata.tags == ("python", "web")
        assert result.raw_body.strip() == "Some *text*"
        assert "<em>text</em>" in result.html

    @pytest.mark.parametrize(
        "text",
        [
            "Just a plain file\n",
            "",
            "---\ntitle: Unclosed\n\nbody without closing marker\n",
            "Intro first\n---\ntitle: Late\n---\nbody\n",
        ],
        ids=["no-markers", "empty", "one-marker", "block-not-at-start"],
    )
    def test_files_without_block_are_skipped(self, text):
        """Files lacking a leading marker-delimited block are not content."""
        assert split_entry(text, "x.md") is None

    def test_block_without_title_is_skipped(self):
        """A block with no title line is not content."""
        text = "---\nauthor: someone\ntype: post\n---\n\nbody\n"

        assert split_entry(text, "x.md") is None

    def test_empty_title_value_is_skipped(self):
        """A bare ``title:`` key does not pass the title gate."""
        text = "---\ntitle:\ntype: post\n---\n\nbody\n"

        assert split_entry(text, "x.md") is None

    @pytest.mark.parametrize("value", ["~", "null", "''", "'   '"])
    def test_null_or_blank_title_is_skipped(self, value):
        """A title that decodes to nothing is the same as no title."""
        text = f"---\ntitle: {value}\ntype: note\n---\nbody\n"

        assert split_entry(text, "x.md") is None

    def test_malformed_yaml_is_fatal(self):
        """A decode failure raises ParseError naming the file."""
        text = "---\ntitle: [unclosed\ntype: post\n---\n\nbody\n"

        with pytest.raises(ParseError) as exc_info:
            split_entry(text, "posts/broken.md")

        assert exc_info.value.path == "posts/broken.md"
        assert "posts/broken.md" in str(exc_info.value)

    def test_invalid_field_is_fatal(self):
        """Validation failures are reported with the offending field."""
        text = "---\ntitle: Bad draft\ndraft: sometimes\n---\n\nbody\n"

        with pytest.raises(ParseError) as exc_info:
            split_entry(text, "bad.md")

        assert "draft" in exc_info.value.message

    def test_yaml_dates_are_normalized_to_strings(self):
        """Unquoted dates decode to YYYY-MM-DD strings."""
        result = split_entry(entry_text("Dated", date="2024-01-01"), "d.md")

        assert result is not None
        assert result.metadata.date == "2024-01-01"

    def test_numeric_title_is_accepted(self):
        """Titles YAML decodes as numbers are kept as text."""
        result = split_entry("---\ntitle: 2024\n---\n\nbody\n", "n.md")

        assert result is not None
        assert result.metadata.title == "2024"

    def test_horizontal_rule_in_body_is_preserved(self):
        """Only the first two markers delimit the block."""
        text = entry_text("Rules", "above\n\n---\n\nbelow")

        result = split_entry(text, "r.md")

        assert result is not None
        assert "---" in result.raw_body
        assert "<hr />" in result.html
        assert "below" in result.html

    def test_raw_html_passes_through(self):
        """Trusted content may embed raw HTML."""
        text = entry_text("Raw", '<div class="callout">hi</div>')

        result = split_entry(text, "raw.md")

        assert result is not None
        assert '<div class="callout">hi</div>' in result.html

    def test_unknown_keys_are_preserved(self):
        """Extra frontmatter keys stay available to templates."""
        result = split_entry(entry_text("Extra", extra="mood: happy"), "e.md")

        assert result is not None
        assert result.metadata.model_extra == {"mood": "happy"}

    def test_single_tag_string_becomes_tuple(self):
        """``tags: python`` is treated as a one-element list."""
        result = split_entry("---\ntitle: One\ntags: python\n---\n\nx\n", "o.md")

        assert result is not None
        assert result.metadata.tags == ("python",)


class TestRenderMarkdown:
    """Tests for render_markdown."""

    def test_renders_tables(self):
        html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n")

        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_renders_paragraphs(self):
        assert render_markdown("hello") == "<p>hello</p>\n"


class TestParseDate:
    """Tests for parse_date."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-01-01", 1704067200),
            ("2023-01-01", 1672531200),
            ("1970-01-01", 0),
        ],
    )
    def test_parses_iso_dates_as_utc_midnight(self, value, expected):
        assert parse_date(value, "x.md") == expected

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_date_is_zero(self, value):
        assert parse_date(value, "x.md") == 0

    @pytest.mark.parametrize("value", ["01/02/2024", "2024-13-01", "2024-1-1", "yesterday", "2024-02-30"])
    def test_invalid_dates_are_fatal(self, value):
        with pytest.raises(ParseError) as exc_info:
            parse_date(value, "posts/x.md")

        assert exc_info.value.path == "posts/x.md"


# ─────────────────────────────────────────────────────────────────────────────
# Link Strategy Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestWikiLinkStrategy:
    """Tests for [[target]] references."""

    def test_extracts_targets_in_order(self):
        body = "See [[Beta]], then [[alpha]]."

        assert WikiLinkStrategy().find_targets(body) == ["Beta", "alpha"]

    def test_labels_and_headings_are_stripped(self):
        body = "[[notes/a|the a note]] and [[b#Section]]"

        assert WikiLinkStrategy().find_targets(body) == ["notes/a", "b"]

    def test_duplicates_are_collapsed(self):
        body = "see [[N2]] and [[N2]] again, also [[N2|two]]"

        assert WikiLinkStrategy().find_targets(body) == ["N2"]

    def test_code_is_ignored(self):
        body = "`[[inline]]`\n\n```\n[[fenced]]\n```\n\n[[real]]"

        assert WikiLinkStrategy().find_targets(body) == ["real"]

    def test_no_links(self):
        assert WikiLinkStrategy().find_targets("no links here") == []


class TestMarkdownLinkStrategy:
    """Tests for [label](target) references."""

    def test_extracts_internal_links(self):
        body = "[b](notes/b.html) and [c](./c.md#part)"

        assert MarkdownLinkStrategy().find_targets(body) == ["notes/b.html", "c.md"]

    @pytest.mark.parametrize(
        "body",
        [
            "[ext](https://example.com/a.html)",
            "[mail](mailto:me@example.com)",
            "[top](#top)",
            "![image](pic.png)",
            "[proto](//cdn.example.com/x.js)",
        ],
    )
    def test_non_note_links_are_ignored(self, body):
        assert MarkdownLinkStrategy().find_targets(body) == []

    def test_escaped_paths_are_unquoted(self):
        assert MarkdownLinkStrategy().find_targets("[x](my%20note.html)") == ["my note.html"]


class TestCompositeLinkStrategy:
    """Tests for combining strategies."""

    def test_merges_without_duplicates(self):
        strategy = CompositeLinkStrategy(WikiLinkStrategy(), MarkdownLinkStrategy())
        body = "[[a.html]] [again](a.html) [b](b.html)"

        assert strategy.find_targets(body) == ["a.html", "b.html"]

    def test_default_strategy_handles_both_syntaxes(self):
        body = "[[wiki]] and [md](md.html)"

        assert default_strategy().find_targets(body) == ["wiki", "md.html"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  spaced  ", "spaced"),
        ("./local", "local"),
        ("/rooted/path/", "rooted/path"),
        ("win\\style", "win/style"),
    ],
)
def test_normalize_target(raw, expected):
    assert normalize_target(raw) == expected


# ─────────────────────────────────────────────────────────────────────────────
# Note Lookup Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestNoteLookup:
    """Tests for resolving targets to note URLs."""

    @pytest.fixture
    def lookup(self) -> NoteLookup:
        return NoteLookup(
            [
                _note("notes/a.html", "Alpha", "notes/a.md"),
                _note("notes/sub/b.html", "Beta", "notes/sub/b.md"),
                _note("c.html", "Gamma", "c.md"),
            ]
        )

    @pytest.mark.parametrize("target", ["notes/a.html", "notes/a", "notes/a.md", "Notes/A.html"])
    def test_resolves_paths(self, lookup, target):
        assert lookup.resolve(target) == "notes/a.html"

    def test_resolves_titles_case_insensitively(self, lookup):
        assert lookup.resolve("beta") == "notes/sub/b.html"
        assert lookup.resolve("GAMMA") == "c.html"

    def test_resolves_bare_filenames(self, lookup):
        assert lookup.resolve("b") == "notes/sub/b.html"

    def test_resolves_relative_to_source(self, lookup):
        assert lookup.resolve("../a.html", source_url="notes/sub/b.html") == "notes/a.html"
        assert lookup.resolve("sub/b", source_url="notes/a.html") == "notes/sub/b.html"

    def test_unknown_targets_resolve_to_none(self, lookup):
        assert lookup.resolve("missing") is None
        assert lookup.resolve("") is None
        assert lookup.resolve("../../outside.html", source_url="notes/a.html") is None

    def test_path_targets_skip_title_and_filename_matching(self, lookup):
        assert lookup.resolve("posts/a.html") is None
        assert lookup.resolve("elsewhere/b") is None
        assert lookup.resolve("b") == "notes/sub/b.html"

    def test_first_title_wins(self):
        lookup = NoteLookup([_note("one.html", "Same"), _note("two.html", "Same")])

        assert lookup.resolve("same") == "one.html"

    def test_contains_checks_urls(self, lookup):
        assert "notes/a.html" in lookup
        assert "notes/a" not in lookup
