"""Configuration management for folio.

This module contains all configurable constants for site ingestion.
Magic numbers are documented here rather than scattered throughout the codebase.
"""

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import LayoutConfig


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


# =============================================================================
# Site Layout
# =============================================================================

# Directory (relative to the site root) holding the markdown content tree
CONTENT_DIR = "content"

# Site-wide layout configuration, relative to the site root
LAYOUT_CONFIG = "layout/config.yml"

# Only files with this extension are read as content; everything else is an asset
SOURCE_EXTENSION = ".md"

# Extension swapped in when deriving the URL key of a content item
OUTPUT_EXTENSION = ".html"

# Bucket prefix for the tag index, e.g. "tags/python"
TAG_KEY_PREFIX = "tags/"

# Maximum number of parent directories inspected when discovering the site root.
# Prevents runaway walks on unusual filesystems.
MAX_ROOT_SEARCH_DEPTH = 10


# =============================================================================
# Notes
# =============================================================================

# Note excerpts are capped to this many characters (after trimming)
EXCERPT_MAX_CHARS = 200


def _looks_like_site_root(path: Path) -> bool:
    return (path / CONTENT_DIR).is_dir() and (path / LAYOUT_CONFIG).is_file()


def _discover_site_root(start_dir: Path | None = None, max_depth: int = MAX_ROOT_SEARCH_DEPTH) -> Path | None:
    """Walk up from start_dir looking for a directory with content/ and layout/config.yml.

    Args:
        start_dir: Directory to start from (defaults to cwd)
        max_depth: Maximum directories to traverse up

    Returns:
        The site root if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()

    for _ in range(max_depth):
        if _looks_like_site_root(current):
            return current

        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    return None


def get_site_root(explicit: str | Path | None = None) -> Path:
    """Get the site root directory.

    Discovery order:
    1. Explicit argument (e.g. the CLI's SITE_ROOT)
    2. FOLIO_SITE_ROOT environment variable
    3. Walk up from cwd looking for content/ next to layout/config.yml

    Raises:
        ConfigurationError: If no site root can be found.
    """
    if explicit:
        root = Path(explicit)
        if not root.is_dir():
            raise ConfigurationError(f"Site root does not exist: {root}")
        return root

    env_root = os.environ.get("FOLIO_SITE_ROOT")
    if env_root:
        root = Path(env_root)
        if not root.is_dir():
            raise ConfigurationError(f"FOLIO_SITE_ROOT points to a missing directory: {root}")
        return root

    discovered = _discover_site_root()
    if discovered:
        return discovered

    raise ConfigurationError(
        "No site found. Options:\n"
        "  1. Pass the site root explicitly (folio build ./my-site)\n"
        "  2. Set FOLIO_SITE_ROOT to a directory containing content/\n"
        f"  3. Run from inside a site that has {CONTENT_DIR}/ and {LAYOUT_CONFIG}"
    )


def get_content_root(site_root: Path) -> Path:
    """Return the content directory of a site.

    Raises:
        ConfigurationError: If the site has no content directory.
    """
    content_root = site_root / CONTENT_DIR
    if not content_root.is_dir():
        raise ConfigurationError(f"Missing content directory: {content_root}")
    return content_root


def load_layout_config(path: Path) -> LayoutConfig:
    """Load the site-wide layout configuration.

    A missing file yields the defaults, so bare content trees still build.

    Args:
        path: Path to layout/config.yml.

    Returns:
        Parsed LayoutConfig.

    Raises:
        ConfigurationError: If the file cannot be read or is not valid YAML.
    """
    if not path.exists():
        return LayoutConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")

    try:
        return LayoutConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"{path}: invalid layout config: {e}") from e
