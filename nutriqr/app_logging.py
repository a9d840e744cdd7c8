"""Logging setup for the nutriqr package and its HTTP service."""

import logging

LOGGER_NAME = "nutriqr"
HANDLER_NAME = "nutriqr-stream"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach the nutriqr stream handler once and set the package log level.

    Handlers installed by other code (test runners, host applications) are
    left alone; only the handler named HANDLER_NAME counts as already configured.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if any(handler.get_name() == HANDLER_NAME for handler in logger.handlers):
        return logger

    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
