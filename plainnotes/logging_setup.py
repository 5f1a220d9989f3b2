from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler

from PySide6.QtCore import QtMsgType, qInstallMessageHandler

from plainnotes.settings import APP_NAME, LOG_DIR, LOG_PATH

SESSION_ID = uuid.uuid4().hex[:8]

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


class EnsureSessionFilter(logging.Filter):
    """Ensure record.session exists so Formatter never crashes."""
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session"):
            record.session = SESSION_ID
        return True


class SessionAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        extra.setdefault("session", SESSION_ID)
        return msg, kwargs


def setup_logging() -> SessionAdapter:
    """
    Configure application-wide logging.

    Every module logs through logging.getLogger(__name__), which lands under
    the APP_NAME logger configured here. Safe to call more than once.
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Prevent duplicate handlers on re-import
    if logger.handlers:
        return SessionAdapter(logger, {})

    LOG_DIR.mkdir(parents=True, exist_ok=True)

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s | sid=%(session)s"
    )
    session_filter = EnsureSessionFilter()

    fh = RotatingFileHandler(
        LOG_PATH, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    fh.addFilter(session_filter)

    ch = logging.StreamHandler(sys.stdout or sys.stderr)
    ch.setLevel(logging.INFO)
    ch.setFormatter(fmt)
    ch.addFilter(session_filter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    logger.info("Logging initialized. log_file=%s", LOG_PATH)
    return SessionAdapter(logger, {})


def qt_message_level(mode) -> int:
    """Map a Qt message type to a logging level (unknown types log as WARNING)."""
    return _QT_LEVELS.get(mode, logging.WARNING)


def _qt_context(context) -> str:
    file = getattr(context, "file", None)
    line = getattr(context, "line", None)
    func = getattr(context, "function", None)
    return f"{file}:{line} {func}" if file or line or func else "unknown"


def install_global_exception_hooks(log: logging.LoggerAdapter) -> None:
    """
    Route uncaught Python exceptions and Qt's own messages into the log.
    """
    def _excepthook(exc_type, exc, tb):
        log.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    def _qt_message_handler(mode, context, message):
        log.log(qt_message_level(mode), "Qt: %s | where=%s", message, _qt_context(context))

    sys.excepthook = _excepthook
    qInstallMessageHandler(_qt_message_handler)
    log.info("Exception and Qt message hooks installed")
