"""Logging setup for the sizing command line."""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "actuator_sizing"


def configure_logging(level: int = logging.INFO, *, quiet_matcher: bool = True) -> None:
    """Send log records to stderr with timestamps and the emitting module.

    Args:
        level: Level applied to the root logger and the package logger.
        quiet_matcher: Keep the per-candidate matcher messages at INFO even
            when ``level`` is DEBUG; a single batch can emit one line per
            catalog record otherwise.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    matcher = logging.getLogger(f"{PACKAGE_LOGGER}.sizing.matcher")
    matcher.setLevel(logging.INFO if quiet_matcher and level < logging.INFO else logging.NOTSET)
