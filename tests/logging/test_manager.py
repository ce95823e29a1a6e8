"""Tests for the logging manager module.

Covers presets, configuration layering, output modes and structured context.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

import pytest
from rich.logging import RichHandler

from mailwright.logging import SUCCESS_LEVEL, TRACE_LEVEL, LogManager, get_logger, init_logging


class ListHandler(logging.Handler):
    """Collect formatted messages."""

    def __init__(self) -> None:
        super().__init__(level=TRACE_LEVEL)
        self.messages: list[tuple[str, str]] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append((record.levelname, record.getMessage()))


def _close(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_default_creation() -> None:
    """Default settings give a single Rich console handler at INFO."""
    logger = LogManager(name="test_default")

    assert isinstance(logger, logging.Logger)
    assert logger.level == TRACE_LEVEL  # handlers filter, not the logger
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)
    assert logger.handlers[0].level == logging.INFO


def test_dev_preset_lowers_console_level() -> None:
    logger = LogManager(name="test_dev", preset="dev")
    assert logger.handlers[0].level == logging.DEBUG


def test_prod_preset_writes_to_file(tmp_path: Path) -> None:
    logger = LogManager(name="test_prod", preset="prod")
    try:
        (handler,) = logger.handlers
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert handler.level == logging.INFO

        logger.info("Stored in file", host="smtp.example.com")
        handler.flush()
        content = (tmp_path / "logs" / "mailwright.log").read_text(encoding="utf-8")
        assert "Stored in file | host=smtp.example.com" in content
    finally:
        _close(logger)


def test_debug_preset_uses_both_outputs() -> None:
    logger = LogManager(name="test_debug", preset="debug")
    try:
        kinds = {type(handler) for handler in logger.handlers}
        assert kinds == {RichHandler, logging.handlers.RotatingFileHandler}
        assert all(handler.level == TRACE_LEVEL for handler in logger.handlers)
    finally:
        _close(logger)


def test_unknown_preset_is_ignored() -> None:
    logger = LogManager(name="test_unknown", preset="does-not-exist")
    assert logger.handlers[0].level == logging.INFO


def test_custom_config_wins_over_preset() -> None:
    logger = LogManager(name="test_custom", preset="dev", config={"console": {"level": "WARNING"}})
    assert logger.handlers[0].level == logging.WARNING


def test_configuration_file_defaults_are_used(tmp_path: Path) -> None:
    (tmp_path / "mailwright.conf.yml").write_text(
        "logger:\n  defaults:\n    console:\n      level: ERROR\n",
        encoding="utf-8",
    )
    logger = LogManager(name="test_from_file")
    assert logger.handlers[0].level == logging.ERROR


def test_broken_configuration_falls_back(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "mailwright.conf.yml").write_text("logger: [broken\n", encoding="utf-8")
    logger = LogManager(name="test_broken")
    assert logger.handlers[0].level == logging.INFO
    assert "ignoring logger configuration" in capsys.readouterr().err


def test_context_is_appended() -> None:
    logger = LogManager(name="test_context", config={"output": "none"})
    handler = ListHandler()
    logger.addHandler(handler)

    logger.info("Message sent", host="smtp.example.com", port=587)
    logger.warning("plain")
    logger.error("with exc_info", exc_info=False, attempt=2)

    assert handler.messages == [
        ("INFO", "Message sent | host=smtp.example.com port=587"),
        ("WARNING", "plain"),
        ("ERROR", "with exc_info | attempt=2"),
    ]


def test_custom_levels() -> None:
    logger = LogManager(name="test_levels", config={"output": "none"})
    handler = ListHandler()
    logger.addHandler(handler)

    logger.trace("low level detail")
    logger.success("all good", count=1)

    assert handler.messages == [("TRACE", "low level detail"), ("SUCCESS", "all good | count=1")]
    assert logging.getLevelName(SUCCESS_LEVEL) == "SUCCESS"


def test_traceback_logs_exception() -> None:
    logger = LogManager(name="test_traceback", config={"output": "none"})
    records: list[logging.LogRecord] = []
    handler = ListHandler()
    handler.emit = records.append  # type: ignore[method-assign]
    logger.addHandler(handler)

    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        logger.traceback(exc)

    (record,) = records
    assert record.levelno == logging.ERROR
    assert record.getMessage() == "boom"
    assert record.exc_info is not None and record.exc_info[0] is RuntimeError


class TestInitLogging:
    """Wiring the manager into the ``mailwright`` logger namespace."""

    def test_handlers_reach_module_loggers(self) -> None:
        manager = init_logging(preset="dev")
        root = logging.getLogger("mailwright")

        assert root.handlers == manager.handlers
        assert root.level == TRACE_LEVEL
        assert root.propagate is False
        assert get_logger() is manager

    def test_reinitialising_replaces_handlers(self) -> None:
        init_logging()
        second = init_logging(preset="dev")
        assert logging.getLogger("mailwright").handlers == second.handlers

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("cli", "mailwright.cli"), ("mailwright.mail", "mailwright.mail"), ("mailwright", "mailwright")],
    )
    def test_get_logger_names(self, name: str, expected: str) -> None:
        assert get_logger(name).name == expected
