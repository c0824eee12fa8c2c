#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging module: one configured stream logger per module name.
"""

import logging
from typing import Optional

from .config import LOG_LEVEL, LOG_FORMAT


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger instance for a module.

    Args:
        name: Module name (typically __name__)
        level: Level name overriding LOG_LEVEL for this logger (e.g. "DEBUG")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Handlers are attached once per name; repeated calls only adjust the level
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    level_name = (level or LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    return logger
