"""
Logging Configuration
Sets up the 'shockglobe' logger and routes Qt's own diagnostics into it.

Qt reports problems (painter misuse, missing fonts, platform plugin issues)
through its message handler, which by default prints to stderr and bypasses
any log file. ``install_qt_message_handler`` forwards them to the
'shockglobe.qt' logger so they land next to the application's own records.
"""
import logging
import sys
from typing import Optional, Union

from PySide6.QtCore import QMessageLogContext, QtMsgType, qInstallMessageHandler

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR")

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def parse_level(level: Union[int, str]) -> int:
    """
    Accepts a logging level as int or as a name ('debug', 'INFO', ...).

    Raises:
        ValueError: for an unknown level name.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _qt_message_handler(mode: QtMsgType, context: QMessageLogContext, message: str) -> None:
    qt_logger = logging.getLogger("shockglobe.qt")
    level = _QT_LEVELS.get(mode, logging.WARNING)
    if context is not None and context.category and context.category != "default":
        message = f"[{context.category}] {message}"
    qt_logger.log(level, message)


def install_qt_message_handler() -> None:
    """Route qDebug/qWarning/... output to the 'shockglobe.qt' logger."""
    qInstallMessageHandler(_qt_message_handler)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    capture_qt: bool = True,
) -> None:
    """
    Configures the root logger for the 'shockglobe' namespace.

    Args:
        level: Logging level, as int (logging.DEBUG) or name ("DEBUG").
        log_file: Optional path to save logs to a file.
        capture_qt: Also forward Qt's internal messages to the log.
    """
    level = parse_level(level)
    logger = logging.getLogger("shockglobe")
    logger.setLevel(level)

    # Re-running setup (e.g. from tests) must not stack handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    # 1. Console Handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    # 2. File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # 3. Qt diagnostics
    if capture_qt:
        install_qt_message_handler()

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
