"""Pydantic models for site content."""

import datetime
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _drop_nulls(data: Any) -> Any:
    # Empty YAML keys (``tags:``) decode to None; treat them as absent.
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


def _as_tuple(value: Any) -> Any:
    if isinstance(value, str):
        return (value,)
    return value


class ContentKind(str, Enum):
    """Entity type discriminator taken from the frontmatter ``type`` field."""

    POST = "post"
    PAGE = "page"
    NOTE = "note"
    UNKNOWN = "unknown"

    @classmethod
    def from_type(cls, value: str | None) -> "ContentKind":
        """Map a raw ``type`` value to a kind; anything unrecognised is UNKNOWN."""
        if isinstance(value, str):
            normalized = value.strip().lower()
            for kind in (cls.POST, cls.PAGE, cls.NOTE):
                if normalized == kind.value:
                    return kind
        return cls.UNKNOWN


class Frontmatter(BaseModel):
    """Frontmatter metadata for a content file."""

    model_config = ConfigDict(frozen=True, extra="allow")

    title: str
    date: str | None = None  # ISO YYYY-MM-DD
    draft: bool = False
    type: str | None = None
    description: str | None = None
    previewimage: str | None = None
    layout: str | None = None
    scripts: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    collections: tuple[str, ...] = ()
    authors: tuple[str, ...] = ()
    # Entry point into the note graph
    head: bool = False

    @model_validator(mode="before")
    @classmethod
    def drop_null_keys(cls, data: Any) -> Any:
        return _drop_nulls(data)

    @field_validator("title", mode="before")
    @classmethod
    def scalar_title(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("date", mode="before")
    @classmethod
    def date_to_string(cls, value: Any) -> Any:
        # PyYAML turns unquoted 2024-01-01 into a date object
        if isinstance(value, datetime.date):
            return value.isoformat()
        return value

    @field_validator("scripts", "tags", "collections", "authors", mode="before")
    @classmethod
    def single_value_list(cls, value: Any) -> Any:
        return _as_tuple(value)

    @property
    def kind(self) -> ContentKind:
        return ContentKind.from_type(self.type)


class LayoutConfig(BaseModel):
    """Site-wide settings from layout/config.yml."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    navbar: tuple[str, ...] = ()
    base_url: str = Field("", alias="baseURL")
    site_title: str = Field("", alias="siteTitle")
    site_scripts: tuple[str, ...] = Field((), alias="siteScripts")
    author: str = ""
    theme_url: str = Field("", alias="themeURL")

    @model_validator(mode="before")
    @classmethod
    def drop_null_keys(cls, data: Any) -> Any:
        return _drop_nulls(data)


class ContentItem(BaseModel):
    """A classified content file, keyed by its URL."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[ContentKind] = ContentKind.UNKNOWN

    url: str = Field(min_length=1)
    source_path: str = ""  # Path relative to the content root
    publish_date: int = 0  # Unix timestamp, 0 when undated
    metadata: Frontmatter
    rendered_body: str = ""

    @property
    def title(self) -> str:
        return self.metadata.title


class Page(ContentItem):
    """A standalone page with no chronological ordering."""

    kind: ClassVar[ContentKind] = ContentKind.PAGE


class Post(ContentItem):
    """A dated entry tracked in the chronological posts list."""

    kind: ClassVar[ContentKind] = ContentKind.POST


class Note(ContentItem):
    """A short free-form note participating in the note link graph."""

    kind: ClassVar[ContentKind] = ContentKind.NOTE

    excerpt: str = Field("", max_length=200)
    raw_body: str = ""  # Markdown source, scanned for note references
    linked_note_urls: tuple[str, ...] = ()  # Forward links, ordered and distinct
    backlink_sources: tuple[str, ...] = ()  # URLs of notes referencing this one
