"""Loguru setup for the POS service.

Every line carries the request id (``X-Request-ID``) and the acting user so a
single checkout or login can be followed across the access log, the audit
trail and any errors it raised.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[request_id]}</magenta> "
    "<yellow>{extra[actor]}</yellow> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_NO_REQUEST = "-"
_ANONYMOUS = "anon"

_REQUEST_ID: ContextVar[str] = ContextVar("request_id", default=_NO_REQUEST)
_ACTOR: ContextVar[str] = ContextVar("actor", default=_ANONYMOUS)

# Sink ids by name, so a second setup_logging() replaces rather than duplicates.
_SINKS: dict[str, int] = {}

_logger.configure(extra={"request_id": _NO_REQUEST, "actor": _ANONYMOUS})


def _default_log_file() -> str:
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../../instance"))
    return os.path.join(root, "pos-backend.log")


class _StdlibBridge(logging.Handler):
    """Route werkzeug and SQLAlchemy records through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)
        _logger.opt(depth=6, exception=record.exc_info).bind(**_context()).log(
            level, record.getMessage()
        )


def _context() -> dict[str, str]:
    return {"request_id": _REQUEST_ID.get(), "actor": _ACTOR.get()}


class ContextualLogger:
    """Proxy for loguru that binds the current request id and actor."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(**_context()), name)


def set_correlation_id(value: str | None) -> None:
    _REQUEST_ID.set(value or _NO_REQUEST)


def set_actor(user_id: int, role: str) -> None:
    _ACTOR.set(f"user={user_id}/{role}")


def clear_correlation_id() -> None:
    _REQUEST_ID.set(_NO_REQUEST)
    _ACTOR.set(_ANONYMOUS)


def _replace_sink(name: str, sink, **options) -> None:
    previous = _SINKS.pop(name, None)
    if previous is not None:
        _logger.remove(previous)
    _SINKS[name] = _logger.add(
        sink,
        format=_FMT,
        filter=sanitize_record,
        backtrace=False,
        diagnose=False,
        **options,
    )


def setup_logging(
    level: str | None = None,
    *,
    log_file: str | None = None,
    rotation: str = "20 MB",
    retention: str = "14 days",
) -> None:
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_file = log_file or os.getenv("LOG_FILE") or _default_log_file()
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    if not _SINKS:
        # Drop loguru's stock stderr handler the first time through.
        _logger.remove()
    _replace_sink("console", sys.stderr, level=level, colorize=True)
    _replace_sink(
        "file",
        log_file,
        level=level,
        colorize=False,
        enqueue=True,
        rotation=rotation,
        retention=retention,
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    logging.getLogger("werkzeug").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


logger = ContextualLogger()

__all__ = [
    "clear_correlation_id",
    "logger",
    "set_actor",
    "set_correlation_id",
    "setup_logging",
]
