"""Logging setup for the API process."""

import logging
import sys
from typing import Optional

from portfolio_ledger.config.settings import get_settings

PACKAGE_LOGGER = "portfolio_ledger"
HANDLER_NAME = "portfolio_ledger.stdout"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Third-party loggers held at WARNING so ledger lines stay readable
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "uvicorn.access")


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Send ledger logs to stdout at `level`, or the configured log level.

    Calling it again only changes the level; the stdout handler is attached once.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel((level or get_settings().log_level).upper())

    if not any(handler.get_name() == HANDLER_NAME for handler in package_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return package_logger
