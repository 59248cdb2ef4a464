"""Logging setup for the refactor menu and its console script.

The menu runs inside a host editor that owns the root logger, so handlers
are only ever attached to the ``refactormenu`` package logger. Records still
propagate to whatever the host configured. The console script logs to
stderr; the rotating log file is opt-in.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Any, TextIO

__all__ = ["PACKAGE_LOGGER", "get_log_path", "level_for", "resolve_log_dir", "setup_logging"]

PACKAGE_LOGGER = "refactormenu"
LOG_FILE_NAME = "refactormenu.log"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DEFAULT_LOG_DIR = Path.home() / ".refactormenu" / "logs"
_LOG_DIR_ENV = "REFACTORMENU_LOG_DIR"
_OWNED_HANDLER_ATTR = "_refactormenu_owned"
_LOG_PATH: Path | None = None


def level_for(settings: Any | None = None, *, debug: bool = False) -> int:
    """Return ``DEBUG`` when asked for explicitly or by ``Settings.debug_logging``."""

    if debug or bool(getattr(settings, "debug_logging", False)):
        return logging.DEBUG
    return logging.INFO


def setup_logging(
    level: int = logging.INFO,
    *,
    console: bool = True,
    log_file: bool = False,
    log_dir: Path | str | None = None,
    stream: TextIO | None = None,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Path | None:
    """(Re)configure the package logger.

    Calling again replaces the handlers installed by the previous call, so
    the level can be raised once settings are loaded. Returns the log file
    path when ``log_file`` is set, otherwise ``None``.
    """

    global _LOG_PATH
    logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_owned_handlers(logger)
    logger.setLevel(level)

    if console:
        console_handler = logging.StreamHandler(stream)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        _install(logger, console_handler, level)

    log_path: Path | None = None
    if log_file:
        target_dir = resolve_log_dir(log_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        log_path = target_dir / LOG_FILE_NAME
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        _install(logger, file_handler, level)

    _LOG_PATH = log_path
    return log_path


def get_log_path() -> Path | None:
    """Return the log file written by the latest :func:`setup_logging` call."""

    return _LOG_PATH


def resolve_log_dir(log_dir: Path | str | None = None) -> Path:
    env_override = os.environ.get(_LOG_DIR_ENV)
    return Path(log_dir or env_override or _DEFAULT_LOG_DIR).expanduser()


def _install(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    setattr(handler, _OWNED_HANDLER_ATTR, True)
    logger.addHandler(handler)


def _remove_owned_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _OWNED_HANDLER_ATTR, False):
            logger.removeHandler(handler)
            handler.close()
