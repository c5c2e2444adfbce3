"""Logging setup for applications embedding the engine."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import LoggingConfig

LOGGER_NAME = 'optionscope'
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(config: LoggingConfig = None) -> logging.Logger:
    """
    Attach console (and optionally rotating file) handlers to the package logger.

    Calling it again replaces the handlers installed by the previous call.

    Parameters
    ----------
    config : LoggingConfig, optional
        Level and optional file path; defaults to INFO on the console only

    Returns
    -------
    logging.Logger
        The ``optionscope`` logger
    """
    config = config or LoggingConfig()
    level = getattr(logging, config.level.upper())

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.file_path:
        log_path = Path(config.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
