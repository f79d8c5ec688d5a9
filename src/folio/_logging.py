"""Logging configuration for folio.

Usage in other modules:
    import logging
    log = logging.getLogger(__name__)

Build summaries are logged at INFO. The walk, the classifier and the note
graph report what they leave out (skipped files, draft posts, unknown
content types, unresolved note references) at DEBUG, which ``folio -v``
turns on. FOLIO_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR) sets the default.
"""

import logging
import os
import sys

PACKAGE_LOGGER = "folio"
LOG_LEVEL_ENV = "FOLIO_LOG_LEVEL"


def _env_level() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging for the folio package.

    The first call installs a stderr handler on the ``folio`` logger. Later
    calls only adjust the level, so the CLI can call this again once it has
    parsed ``--verbose``.

    Args:
        verbose: Report skipped content and unresolved references (DEBUG).

    Returns:
        The package logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level = logging.DEBUG if verbose else _env_level()

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))
        package_logger.addHandler(handler)
        # Avoid duplicate messages through the root logger
        package_logger.propagate = False

    package_logger.setLevel(level)
    return package_logger
