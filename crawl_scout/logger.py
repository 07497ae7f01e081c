# === FILE: crawl_scout/logger.py ===
"""Logging setup for **CrawlScout**.

* One project logger, :data:`logger`::

      from crawl_scout.logger import logger
      logger.info("Crawl started")

* Console output goes to *stderr*: stdout is reserved for the JSON reports
  printed by ``crawl-scout crawl`` / ``crawl-scout scrape``.
* An optional rotating log file.
* aiohttp's server loggers (access log, server errors) share the same
  handlers, so ``crawl-scout serve`` writes one uniform log.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable, List, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "CrawlScout"

# aiohttp.web request log and unhandled handler errors
SERVER_LOGGERS: Final[tuple[str, ...]] = ("aiohttp.access", "aiohttp.server", "aiohttp.web")

_LevelT = Union[int, str]

_MAX_LOG_BYTES = 5 * 1024 * 1024
_LOG_BACKUPS = 3


def _build_handlers(log_file: str | Path | None, fmt: str) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=_MAX_LOG_BYTES,
                backupCount=_LOG_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _install(lg: logging.Logger, level: _LevelT, handlers: Iterable[logging.Handler], replace: bool) -> None:
    lg.setLevel(level)
    if replace:
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()
    for handler in handlers:
        lg.addHandler(handler)
    lg.propagate = False


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
    server_loggers: Iterable[str] = SERVER_LOGGERS,
) -> logging.Logger:
    """(Re)configure the project logger and the aiohttp server loggers.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Rotating logfile (5 MiB x 3). *None* → console only.
    log_format
        Format string for :class:`logging.Formatter`.
    replace_handlers
        *True* – drop and close existing handlers first; *False* – append.
    server_loggers
        Names of third-party loggers routed to the same handlers.
    """
    handlers = _build_handlers(log_file, log_format)
    lg = logging.getLogger(LOGGER_NAME)
    _install(lg, level, handlers, replace_handlers)
    for name in server_loggers:
        _install(logging.getLogger(name), level, handlers, replace_handlers)
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Shortcut for the CLI entry point."""
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "DEFAULT_FORMAT", "LOGGER_NAME", "SERVER_LOGGERS"]
