"""Logging for seqquantile.

All records go through the ``seqquantile`` logger; each estimator logs on a
child (``seqquantile.kll``, ``seqquantile.p2``) so applications can tune one
algorithm's verbosity without touching the rest. The parent is configured
lazily and defaults to WARNING, so a sketch outgrowing its level cap is the
only thing that speaks up out of the box.
"""
from __future__ import annotations

import logging
from typing import Optional

ROOT_NAME = "seqquantile"

_LOGGER: Optional[logging.Logger] = None


def _root() -> logging.Logger:
    global _LOGGER
    if _LOGGER is None:
        logger = logging.getLogger(ROOT_NAME)
        # Leave handlers alone if the embedding application configured them.
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
            logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
        _LOGGER = logger
    return _LOGGER


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or its child for ``component`` (e.g. ``"kll"``)."""
    root = _root()
    if not component:
        return root
    return root.getChild(component)


def set_level(level: int | str, component: Optional[str] = None) -> None:
    """Set the threshold for the whole package or for one estimator's child logger."""
    get_logger(component).setLevel(level)


__all__ = ["ROOT_NAME", "get_logger", "set_level"]
