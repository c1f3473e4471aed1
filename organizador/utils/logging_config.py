"""Structured logging configuration for production monitoring."""

import json
import logging
import os
import tempfile
import time
import traceback
from logging.handlers import TimedRotatingFileHandler
from time import perf_counter
from typing import Optional

from sqlalchemy import event


class JsonFormatter(logging.Formatter):
    """JSON formatter for cleaner machine-parsable logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        if hasattr(record, "request_id"):
            payload["request_id"] = getattr(record, "request_id")
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class SafeTimedRotatingFileHandler(TimedRotatingFileHandler):
    """TimedRotatingFileHandler that tolerates Windows file-lock rollover failures.

    When another process holds the log file open, os.rename() fails with
    WinError 32. Rollover is skipped for this interval and the base file is
    reopened so logging continues.
    """

    def doRollover(self) -> None:  # type: ignore[override]
        try:
            super().doRollover()
        except PermissionError as exc:
            if getattr(exc, "winerror", None) != 32:
                raise

            self.stream = self._open()
            self.rolloverAt = int(time.time()) + self.interval


def _clear_logger_handlers(logger_name: str) -> logging.Logger:
    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    return logger


def _resolve_log_dir(app) -> str:
    """Resolve a writable log directory, with fallback when the primary is unavailable."""
    log_dir = app.config.get("APP_LOG_DIR") or os.getenv("APP_LOG_DIR")
    if not log_dir:
        root_dir = os.path.abspath(os.path.join(app.root_path, ".."))
        log_dir = os.path.join(root_dir, "logs")

    try:
        os.makedirs(log_dir, exist_ok=True)
        test_path = os.path.join(log_dir, ".write-test")
        with open(test_path, "w", encoding="utf-8") as test_file:
            test_file.write("ok")
        os.remove(test_path)
        return log_dir
    except OSError:
        fallback_dir = os.path.join(tempfile.gettempdir(), "organizador-logs")
        os.makedirs(fallback_dir, exist_ok=True)
        return fallback_dir


def _rotating_handler(path: str, level: int, formatter: logging.Formatter, backup_count: int, when: str = 'midnight'):
    handler = SafeTimedRotatingFileHandler(
        path,
        when=when,
        interval=1,
        backupCount=backup_count,
        encoding='utf-8',
        delay=True,
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _register_slow_query_listener(engine, slow_query_logger: logging.Logger, threshold_ms: float) -> None:
    """Attach SQLAlchemy event listeners to emit slow queries to the dedicated logger."""

    @event.listens_for(engine, "before_cursor_execute")
    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        context._query_start_time = perf_counter()

    @event.listens_for(engine, "after_cursor_execute")
    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        start = getattr(context, "_query_start_time", None)
        if start is None:
            return
        duration_ms = (perf_counter() - start) * 1000
        if duration_ms < threshold_ms:
            return
        slow_query_logger.warning(
            statement.replace("\n", " "),
            extra={
                "duration": duration_ms / 1000,  # formatter expects seconds
                "statement": statement,
            },
        )


def setup_logging(app, engine: Optional[object] = None):
    """Configure structured logging with rotation.

    Creates logs in the 'logs' directory (or ``APP_LOG_DIR``) with:
    - app.log: General application logs (rotated daily, keeps 60 days)
    - app.jsonl: Same records as JSON lines
    - error.log: Error-level logs only (rotated daily, keeps 90 days)
    - slow_queries.log: Database queries above SLOW_QUERY_THRESHOLD_MS (rotated weekly)
    """
    log_dir = _resolve_log_dir(app)

    app.logger.handlers.clear()
    app.logger.setLevel(logging.INFO)

    text_formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s (%(funcName)s:%(lineno)d): %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    json_formatter = JsonFormatter()

    handlers = [
        _rotating_handler(os.path.join(log_dir, 'app.log'), logging.INFO, text_formatter, 60),
        _rotating_handler(os.path.join(log_dir, 'app.jsonl'), logging.INFO, json_formatter, 60),
        _rotating_handler(os.path.join(log_dir, 'error.log'), logging.ERROR, text_formatter, 90),
    ]

    if app.debug:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(text_formatter)
        handlers.append(console_handler)

    # app.logger e o logger "organizador": os modulos do pacote propagam para ele
    for handler in handlers:
        app.logger.addHandler(handler)

    slow_query_handler = _rotating_handler(
        os.path.join(log_dir, 'slow_queries.log'),
        logging.WARNING,
        logging.Formatter(
            '[%(asctime)s] SLOW QUERY (%(duration).3fs): %(statement)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ),
        12,  # Keep 3 months
        when='W0',  # Rotate weekly on Monday
    )
    slow_query_logger = _clear_logger_handlers('sqlalchemy.slow_queries')
    slow_query_logger.setLevel(logging.WARNING)
    slow_query_logger.addHandler(slow_query_handler)
    slow_query_logger.propagate = False
    slow_query_threshold_ms = float(app.config.get("SLOW_QUERY_THRESHOLD_MS", 1000))
    if engine is not None:
        _register_slow_query_listener(engine, slow_query_logger, slow_query_threshold_ms)

    app.logger.info("Logging configured - logs directory: %s", log_dir, extra={"request_id": "startup"})

    return app.logger


def log_request_info(request, response, duration_ms, request_id=None):
    """Log request information for monitoring.

    Args:
        request: Flask request object
        response: Flask response object
        duration_ms: Request duration in milliseconds
        request_id: Optional correlation identifier
    """
    from flask import current_app

    prefix = f"[req_id={request_id}]" if request_id else "[req_id=na]"
    threshold_ms = current_app.config.get("SLOW_REQUEST_THRESHOLD_MS", 0) or 0

    if threshold_ms > 0 and duration_ms > threshold_ms:
        current_app.logger.warning(
            "%s SLOW REQUEST (%s ms): %s %s from %s -> %s",
            prefix,
            f"{duration_ms:.0f}",
            request.method,
            request.path,
            request.remote_addr,
            response.status_code,
            extra={"request_id": request_id},
        )
    elif response.status_code >= 500:
        current_app.logger.error(
            "%s ERROR RESPONSE: %s %s from %s -> %s",
            prefix,
            request.method,
            request.path,
            request.remote_addr,
            response.status_code,
            extra={"request_id": request_id},
        )
    elif current_app.debug:
        current_app.logger.debug(
            "%s %s %s -> %s (%s ms)",
            prefix,
            request.method,
            request.path,
            response.status_code,
            f"{duration_ms:.0f}",
            extra={"request_id": request_id},
        )


def log_exception(error, request=None):
    """Log exception with full context and stack trace.

    Args:
        error: Exception object
        request: Flask request object (optional)
    """
    from flask import current_app, g

    error_msg = f"EXCEPTION: {type(error).__name__}: {str(error)}"

    request_id = getattr(g, "request_id", None) if request else None

    if request:
        error_msg += f"\nRequest: {request.method} {request.path}"
        error_msg += f"\nUser-Agent: {request.headers.get('User-Agent', 'N/A')}"
        error_msg += f"\nIP: {request.remote_addr}"

    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    error_msg += f"\n{'='*80}\nStack trace:\n{trace}"
    error_msg += f"{'='*80}"

    current_app.logger.error(error_msg, extra={"request_id": request_id})
