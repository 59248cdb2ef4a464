"""Tests covering the utilities modules."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from refactormenu import app
from refactormenu.services.settings import Settings
from refactormenu.utils import logging as logging_utils


@pytest.fixture(autouse=True)
def _restore_package_logger(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("REFACTORMENU_LOG_DIR", raising=False)
    logger = logging.getLogger(logging_utils.PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


def test_level_follows_debug_flag_and_settings() -> None:
    assert logging_utils.level_for() == logging.INFO
    assert logging_utils.level_for(debug=True) == logging.DEBUG
    assert logging_utils.level_for(Settings(debug_logging=True)) == logging.DEBUG
    assert logging_utils.level_for(Settings()) == logging.INFO


def test_console_logging_is_the_default() -> None:
    stream = io.StringIO()

    log_path = logging_utils.setup_logging(logging.DEBUG, stream=stream)
    logging.getLogger("refactormenu.menu.registry").debug("Registered refactor action: x")

    assert log_path is None
    assert logging_utils.get_log_path() is None
    assert stream.getvalue() == "DEBUG refactormenu.menu.registry: Registered refactor action: x\n"


def test_root_logger_is_left_to_the_host() -> None:
    root_handlers = list(logging.getLogger().handlers)

    logging_utils.setup_logging(logging.DEBUG, stream=io.StringIO())

    assert logging.getLogger().handlers == root_handlers
    assert logging.getLogger(logging_utils.PACKAGE_LOGGER).propagate is True


def test_reconfiguring_replaces_previous_handlers() -> None:
    first = io.StringIO()
    second = io.StringIO()
    logging_utils.setup_logging(logging.INFO, stream=first)
    logging_utils.setup_logging(logging.DEBUG, stream=second)

    logging.getLogger("refactormenu.app").debug("configured")

    assert first.getvalue() == ""
    assert "configured" in second.getvalue()
    owned = [
        handler
        for handler in logging.getLogger(logging_utils.PACKAGE_LOGGER).handlers
        if getattr(handler, "_refactormenu_owned", False)
    ]
    assert len(owned) == 1


def test_log_file_is_opt_in_and_rotating(tmp_path: Path) -> None:
    log_path = logging_utils.setup_logging(logging.INFO, console=False, log_file=True, log_dir=tmp_path)

    logging.getLogger("refactormenu.menu.session").warning("Refactor 'Extract function' failed")
    for handler in logging.getLogger(logging_utils.PACKAGE_LOGGER).handlers:
        handler.flush()

    assert log_path == tmp_path / "refactormenu.log"
    assert logging_utils.get_log_path() == log_path
    assert " | WARNING  | refactormenu.menu.session | Refactor 'Extract function' failed" in log_path.read_text(
        encoding="utf-8"
    )


def test_log_dir_respects_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("REFACTORMENU_LOG_DIR", str(tmp_path / "env-logs"))

    log_path = logging_utils.setup_logging(console=False, log_file=True)

    assert log_path is not None
    assert log_path.parent == tmp_path / "env-logs"


def test_configure_logging_uses_settings_level(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REFACTORMENU_LOG_DIR", str(tmp_path))

    log_path = app.configure_logging(settings=Settings(debug_logging=True), log_file=True)

    assert log_path == tmp_path / "refactormenu.log"
    assert logging.getLogger(logging_utils.PACKAGE_LOGGER).level == logging.DEBUG
