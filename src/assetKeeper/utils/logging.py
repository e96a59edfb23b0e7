"""Package logger for assetKeeper.

Every module logs below the ``assetKeeper`` logger so one handler and one
level cover the whole package. The CLI lowers the level with ``--verbose``.
"""

from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER_NAME = "assetKeeper"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def _configure() -> logging.Logger:
    global _configured
    root = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not _configured:
        if not root.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(handler)
        root.setLevel(logging.INFO)
        _configured = True
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or the ``assetKeeper.<name>`` child."""

    root = _configure()
    if not name or name == PACKAGE_LOGGER_NAME:
        return root
    if name.startswith(PACKAGE_LOGGER_NAME + "."):
        name = name[len(PACKAGE_LOGGER_NAME) + 1:]
    return root.getChild(name)


def set_level(level: int) -> None:
    _configure().setLevel(level)
