"""Opt-in log output for the firestore_admin logger hierarchy.

Library modules log through logging.getLogger(__name__) and never touch the
root logger; a host application that configures logging itself does not need
this module.
"""

import logging
import sys

from firestore_admin.core.config import get_settings

LOGGER_NAME = "firestore_admin"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(stream=None) -> logging.Logger:
    """Attach a stream handler to the firestore_admin logger.

    Level is DEBUG when settings.debug is True, otherwise INFO. Calling it
    again replaces the handler it added earlier instead of stacking another.

    Args:
        stream: Where records go; stdout when omitted.

    Returns:
        The configured package logger.
    """
    settings = get_settings()
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_firestore_admin", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._firestore_admin = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    return logger
