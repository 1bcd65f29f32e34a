"""
Logging Configuration

Import and sync scripts print their summaries to stdout, so log records go
to stderr (and optionally to a file kept next to a long supplier sync).
SQLAlchemy and urllib3 loggers are tamed separately: SQL statements are only
shown on request, and connection-pool chatter only in verbose mode.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "catalog_sync"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
    sql_echo: bool = False,
) -> logging.Logger:
    """
    Configure the catalog_sync logger for a script run.

    Args:
        verbose: DEBUG level, and urllib3 connection logging
        quiet: WARNING level (ignored when verbose)
        log_file: Also append records to this file
        sql_echo: Log every SQL statement through sqlalchemy.engine

    Returns:
        The configured package logger
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_level(verbose, quiet))

    # Re-running setup replaces handlers instead of stacking them
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    sql_logger = logging.getLogger("sqlalchemy.engine")
    sql_logger.setLevel(logging.INFO if sql_echo else logging.WARNING)
    if sql_echo and not sql_logger.handlers:
        sql_logger.addHandler(handlers[0])

    logging.getLogger("urllib3").setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
