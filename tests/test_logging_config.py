import logging

import pytest
from PySide6.QtCore import QtMsgType

from shockglobe.logging_config import LEVEL_NAMES, _qt_message_handler, parse_level, setup_logging


@pytest.fixture()
def clean_logger():
    logger = logging.getLogger("shockglobe")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


@pytest.mark.parametrize("name", LEVEL_NAMES)
def test_parse_level_accepts_names(name):
    assert parse_level(name) == getattr(logging, name)
    assert parse_level(name.lower()) == getattr(logging, name)


def test_parse_level_passes_ints_through():
    assert parse_level(logging.WARNING) == logging.WARNING


def test_parse_level_rejects_unknown_names():
    with pytest.raises(ValueError):
        parse_level("chatty")


def test_setup_logging_does_not_stack_handlers(clean_logger, tmp_path):
    setup_logging("debug", log_file=str(tmp_path / "run.log"), capture_qt=False)
    setup_logging("debug", log_file=str(tmp_path / "run.log"), capture_qt=False)

    assert clean_logger.level == logging.DEBUG
    assert len(clean_logger.handlers) == 2
    for handler in clean_logger.handlers:
        handler.close()
    assert "Logging initialized at DEBUG" in (tmp_path / "run.log").read_text(encoding="utf-8")


def test_qt_messages_are_forwarded(caplog):
    with caplog.at_level(logging.DEBUG, logger="shockglobe.qt"):
        _qt_message_handler(QtMsgType.QtWarningMsg, None, "QPainter::end: Painter ended with 1 saved states")
        _qt_message_handler(QtMsgType.QtDebugMsg, None, "debug chatter")

    records = [(r.name, r.levelno, r.getMessage()) for r in caplog.records]
    assert ("shockglobe.qt", logging.WARNING, "QPainter::end: Painter ended with 1 saved states") in records
    assert ("shockglobe.qt", logging.DEBUG, "debug chatter") in records
