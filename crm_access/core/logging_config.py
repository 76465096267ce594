"""Logging setup for the access engine."""

import logging

from crm_access.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "crm_access"
INTEGRITY_LOGGER_NAME = f"{LOGGER_NAME}.integrity"


def setup_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    # Avoid duplicate handlers on re-import
    if logger.handlers:
        return logger

    logger.setLevel(settings.LOG_LEVEL.upper())

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    return logger


logger = setup_logger()
integrity_logger = logging.getLogger(INTEGRITY_LOGGER_NAME)


def report_integrity_issue(message: str, *args) -> None:
    """
    Log a data-integrity problem found while evaluating access.

    The engine never raises for these. The caller always fails closed
    (deny, or an empty subordinate set) after reporting.
    """
    integrity_logger.warning(message, *args)
