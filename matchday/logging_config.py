"""Logging setup driven by settings."""

import logging
from typing import Optional

from .config import Config, settings as default_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_HANDLER_MARKER = "_matchday_handler"


def configure_logging(settings: Optional[Config] = None) -> logging.Logger:
    """Attach stream (and optional file) handlers to the ``matchday`` logger.

    Calling it again replaces the handlers it installed earlier.
    """
    settings = settings or default_settings
    logger = logging.getLogger("matchday")
    logger.setLevel(getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler()]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        logger.addHandler(handler)

    return logger
