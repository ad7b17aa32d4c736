"""
Centralized logging configuration for the ``ledger_pro`` package.

Entry points (the CLI) call ``configure_logging(...)`` once at startup.
Library modules only call ``get_logger(__name__)`` and never attach their
own handlers; until configured, the package logger stays silent.
"""
import logging
import os
import sys
from typing import IO, Optional, Union

_PKG_LOGGER_NAME = "ledger_pro"
_CONFIGURED = False

LOG_LEVEL_ENV_VAR = "LEDGER_PRO_LOG_LEVEL"


def _parse_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV_VAR)
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(
    level: Union[int, str, None] = None,
    fmt: Optional[str] = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """
    Configure the package root logger exactly once.

    Args:
        level: Level as int or name (e.g. "INFO"). If None, the
            LEDGER_PRO_LOG_LEVEL environment variable is used when set,
            otherwise INFO.
        fmt: Optional format string
        stream: Output stream for the single StreamHandler
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, keeping the package logger silent until configured"""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
