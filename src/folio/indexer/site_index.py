"""Site-wide lookup structures accumulated during ingestion."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from ..config import TAG_KEY_PREFIX
from ..models import ContentItem, Note, Page, Post
from ..parser.markdown import ParseError

log = logging.getLogger(__name__)


class DuplicateURLError(ParseError):
    """Raised when two content files map to the same URL key."""

    def __init__(self, url: str, path: str, existing_path: str) -> None:
        self.url = url
        self.existing_path = existing_path
        super().__init__(path, f"URL {url!r} is already taken by {existing_path}")


def tag_key(tag: str) -> str:
    return f"{TAG_KEY_PREFIX}{tag}"


class SiteIndex:
    """Accumulates classified items for one build.

    Owns the URL map, the tag and collection buckets, the pending posts list
    and the notes collection. Items are added during the walk; ``finalize()``
    then orders the posts and closes the index to further additions.
    """

    def __init__(self) -> None:
        self._by_url: dict[str, Page | Post] = {}
        self._by_tag: dict[str, list[Page | Post]] = {}
        self._by_collection: dict[str, list[Page | Post]] = {}
        self._pending_posts: list[Post] = []
        self._notes: dict[str, Note] = {}
        self._posts_chronological: tuple[Post, ...] | None = None

    @property
    def finalized(self) -> bool:
        return self._posts_chronological is not None

    def add(self, item: ContentItem) -> None:
        """Insert a classified item into the indices.

        Raises:
            DuplicateURLError: If another item already uses the item's URL.
            RuntimeError: If the index has been finalized.
        """
        if self.finalized:
            raise RuntimeError("SiteIndex is finalized; no further items can be added")

        self._check_unique(item)

        if isinstance(item, Note):
            self._notes[item.url] = item
            return

        if isinstance(item, Post):
            self._pending_posts.append(item)
        elif not isinstance(item, Page):
            raise TypeError(f"Cannot index {type(item).__name__} at {item.url}")

        self._by_url[item.url] = item

        for tag in item.metadata.tags:
            self._by_tag.setdefault(tag_key(tag), []).append(item)
        for collection in item.metadata.collections:
            self._by_collection.setdefault(collection, []).append(item)

    def _check_unique(self, item: ContentItem) -> None:
        existing = self._by_url.get(item.url) or self._notes.get(item.url)
        if existing is not None:
            raise DuplicateURLError(item.url, item.source_path, existing.source_path)

    def finalize(self) -> tuple[Post, ...]:
        """Order the posts newest first and close the index.

        The sort is stable, so posts sharing a date keep their ingestion order.
        Calling it again returns the same ordering.
        """
        if self._posts_chronological is None:
            self._posts_chronological = tuple(
                sorted(self._pending_posts, key=lambda post: post.publish_date, reverse=True)
            )
            log.debug(
                "Indexed %d pages/posts, %d notes, %d tags, %d collections",
                len(self._by_url),
                len(self._notes),
                len(self._by_tag),
                len(self._by_collection),
            )
        return self._posts_chronological

    @property
    def by_url(self) -> Mapping[str, Page | Post]:
        return MappingProxyType(self._by_url)

    @property
    def by_tag(self) -> Mapping[str, Sequence[Page | Post]]:
        return MappingProxyType({key: tuple(items) for key, items in self._by_tag.items()})

    @property
    def by_collection(self) -> Mapping[str, Sequence[Page | Post]]:
        return MappingProxyType({key: tuple(items) for key, items in self._by_collection.items()})

    @property
    def notes(self) -> Mapping[str, Note]:
        return MappingProxyType(self._notes)

    @property
    def posts_chronological(self) -> tuple[Post, ...]:
        """Posts newest first.

        Raises:
            RuntimeError: If called before ``finalize()``.
        """
        if self._posts_chronological is None:
            raise RuntimeError("posts_chronological is only available after finalize()")
        return self._posts_chronological
