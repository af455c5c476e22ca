"""Shared logging configuration for the polyapi CLI.

Call ``setup()`` once at the top of ``main()`` to get ISO-8601
timestamps on every log line. Log records go to stderr so they do not
interleave with the menu text on stdout.
"""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def setup(*, verbose: bool = False) -> None:
    """Configure the root logger with timestamped output.

    Args:
        verbose: If True, set level to DEBUG; otherwise WARNING, which
            keeps the interactive menus free of routine store messages.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        datefmt=_DATE_FORMAT,
    )
