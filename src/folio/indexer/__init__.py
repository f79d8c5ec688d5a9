"""Content classification and site-wide indexing."""

from .classifier import classify, content_url, make_excerpt
from .site_index import DuplicateURLError, SiteIndex, tag_key
from .walker import ContentTree, FileSystemTree, IngestStats, TreeEntry, ingest_tree

__all__ = [
    "classify",
    "content_url",
    "make_excerpt",
    "SiteIndex",
    "DuplicateURLError",
    "tag_key",
    "ContentTree",
    "FileSystemTree",
    "TreeEntry",
    "IngestStats",
    "ingest_tree",
]
