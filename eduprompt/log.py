# Logger factory: one named logger per module, a single stream handler each.

import logging

from eduprompt.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(h)
    logger.setLevel(settings.LOG_LEVEL.upper())
    return logger
