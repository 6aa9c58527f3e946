"""Logging setup for command-line use.

Library modules only create loggers; nothing is emitted until a handler is
installed here or by the embedding application.
"""

from __future__ import annotations

import logging
from typing import Final, TextIO

LOGGER_NAME: Final = "kdlpy"
LOG_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Attach a stream handler to the `kdlpy` logger.

    Calling it again replaces the handler rather than stacking another one.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_kdlpy_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._kdlpy_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = ["LOGGER_NAME", "LOG_FORMAT", "configure_logging"]
