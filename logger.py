"""Console logging for the simulator; every module calls `setup_logger(__name__)`."""

import logging
import sys

from config import Config


def setup_logger(name):
    """Return the named logger, attaching a stdout handler on first use only."""
    logger = logging.getLogger(name)
    logger.setLevel(Config.LOG_LEVEL)
    if logger.handlers:
        return logger

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(Config.LOG_LEVEL)
    console.setFormatter(logging.Formatter(Config.LOG_FORMAT))
    logger.addHandler(console)
    return logger
