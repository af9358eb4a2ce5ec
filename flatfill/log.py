"""Logger factory shared by the flatfill modules."""

from __future__ import annotations

import logging
import os

LOG_ENV_VAR = "FLATFILL_LOG"


def _resolve_level() -> int:
    level_name = os.getenv(LOG_ENV_VAR, "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger honouring ``FLATFILL_LOG``.

    A stream handler is attached only when nothing upstream has configured
    one, so an application calling ``logging.basicConfig`` keeps control of
    the output format.
    """

    logger = logging.getLogger(name)
    if not logger.handlers and not logging.getLogger().hasHandlers():
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(_resolve_level())
    return logger


__all__ = ["LOG_ENV_VAR", "get_logger"]
