"""folio: content ingestion and cross-reference engine for markdown sites."""

__version__ = "0.1.0"
