"""Logging for the Day Docket import.

The CLI calls :func:`configure_logging` once; every other module asks for a
``day_docket.<module>`` logger through :func:`get_logger` and never attaches
handlers of its own. Until the CLI (or a host application) configures the
package logger, records are dropped by a ``NullHandler``.

Problems an operator has to act on before the drafts are approved (balance
mismatches, records missing from the ledger) go through :func:`log_banner` so
they stand out in a long import log.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable
from typing import IO

_PKG_LOGGER_NAME = "day_docket"
_LEVEL_ENV = "DAY_DOCKET_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False

BANNER = "*" * 80


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(_LEVEL_ENV)
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = logging.getLevelName(name)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Send ``day_docket`` records to ``stream``; later calls are no-ops.

    ``level`` falls back to ``DAY_DOCKET_LOG_LEVEL`` and then ``INFO``.
    Propagation to the root logger is switched off so an import run prints
    each record once even when a host application also logs to stderr.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


def log_banner(
    logger: logging.Logger,
    heading: str,
    lines: Iterable[str],
    *,
    level: int = logging.WARNING,
) -> None:
    """Log ``heading`` and ``lines`` as one record framed by :data:`BANNER`."""

    body = "\n".join(lines)
    logger.log(level, "\n%s\n%s\n%s\n%s", BANNER, heading, body, BANNER)


__all__ = ["BANNER", "configure_logging", "get_logger", "log_banner"]
