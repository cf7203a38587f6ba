"""Logging setup for the dashboard entry point.

Library modules only create loggers; handlers are installed here once.
"""
from __future__ import annotations

import logging

_QUIET_LOGGERS = ["websockets", "urllib3"]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Install a stream handler on the root logger and quiet noisy libraries."""

    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
