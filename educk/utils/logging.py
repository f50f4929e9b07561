# educk/utils/logging.py
import logging

from educk.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.basicConfig(level=LOG_LEVEL, format=_FORMAT)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
