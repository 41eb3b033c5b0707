"""Logging configuration for the ``finance_ledger`` package.

Entrypoints (the CLI) call :func:`configure_logging` once at startup. Library
modules only ever call ``get_logger("finance_ledger.<module>")`` and never
attach handlers themselves; until an application configures logging, the
package logger carries a ``NullHandler`` and stays silent.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "finance_ledger"
LEVEL_ENV_VAR = "LEDGER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_handler: logging.Handler | None = None


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (int, name, numeric string or ``None``) into a logging level.

    ``None`` and unrecognized names fall back to ``LEDGER_LOG_LEVEL`` and then
    to ``WARNING``; the CLI should stay quiet unless asked otherwise.
    """

    if isinstance(level, int):
        return level
    if isinstance(level, str) and level.strip():
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = logging.getLevelName(name)
        if isinstance(numeric, int):
            return numeric
    env_val = os.getenv(LEVEL_ENV_VAR)
    if env_val and env_val.strip() and env_val != level:
        return resolve_level(env_val)
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Attach a single ``StreamHandler`` to the package logger.

    Calling this again replaces the level but never stacks a second handler.
    """

    global _handler

    logger = logging.getLogger(PACKAGE_LOGGER)
    numeric = resolve_level(level)

    if _handler is None:
        for h in list(logger.handlers):
            if isinstance(h, logging.NullHandler):
                logger.removeHandler(h)
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
        logger.addHandler(_handler)
        # Keep records out of the root logger.
        logger.propagate = False

    _handler.setLevel(numeric)
    logger.setLevel(numeric)


def get_logger(name: str) -> logging.Logger:
    """Return a logger, making sure the package logger is silent when unconfigured."""

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
