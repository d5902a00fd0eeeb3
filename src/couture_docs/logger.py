"""Logging setup shared by the rendering modules."""

import logging
from typing import Optional

_DEFAULT_LEVEL = logging.INFO
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module logger, configuring the root logger on first use."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=_DEFAULT_LEVEL, format=_FORMAT)
    return logger
