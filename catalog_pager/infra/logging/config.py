"""Logging configuration setup.

Uses dictConfig for logger levels, and a QueueHandler + QueueListener pair
so formatting and I/O happen off the event loop thread. Application loggers
only propagate to root.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from .context import ContextInjectingFilter
from .formatters import JSONFormatter

if TYPE_CHECKING:
    from catalog_pager.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
_LOGGING_INITIALIZED = False
_ATEXIT_REGISTERED = False


def shutdown() -> None:
    """Stop the QueueListener, flushing pending records, and detach the queue handler."""
    global _log_queue, _listener, _queue_handler

    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
        _listener = None
    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None
    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Configure logging once per process.

    Args:
        log_settings: Optional logging settings. Loaded via
            get_logging_settings() when omitted.
        force: Reconfigure even if logging was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from catalog_pager.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **configure_kwargs})
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    service_name: str = "catalog-pager",
    sql_echo: bool = False,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
) -> None:
    """Configure root logging.

    Args:
        log_level: Root logger level.
        file_path: Path of a rotating log file. None disables file logging.
        json_logs: Emit JSON Lines instead of plain text.
        console_enabled: Log to stderr.
        include_context: Inject set_log_context() fields into every record.
        service_name: Static ``service`` field of JSON records.
        sql_echo: Raise the ``sqlalchemy.engine`` logger to INFO.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated files kept.

    Example:
        ```python
        from catalog_pager.core.settings import get_logging_settings

        configure_logging(**get_logging_settings().to_logging_kwargs())
        ```
    """
    global _log_queue, _listener, _queue_handler, _ATEXIT_REGISTERED

    shutdown()

    path = Path(file_path) if file_path else None
    if path:
        path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {
                "level": log_level.upper(),
                "handlers": [],
            },
            "loggers": {
                "sqlalchemy.engine": {
                    "level": "INFO" if sql_echo else "WARNING",
                },
            },
        }
    )

    handlers: list[logging.Handler] = []
    if console_enabled:
        console = logging.StreamHandler()
        console.setFormatter(_build_formatter(json_logs, service_name))
        handlers.append(console)
    if path:
        file_handler = RotatingFileHandler(
            path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(_build_formatter(json_logs, service_name))
        handlers.append(file_handler)

    if not handlers:
        return

    _log_queue = Queue()
    _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
    _listener.start()
    if not _ATEXIT_REGISTERED:
        atexit.register(shutdown)
        _ATEXIT_REGISTERED = True

    # Handler-level filter: runs in the emitting task for records from every logger
    _queue_handler = QueueHandler(_log_queue)
    if include_context:
        _queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(_queue_handler)
    logger.debug(
        "Logging configured",
        extra={"json_logs": json_logs, "file_logging": path is not None},
    )


def _build_formatter(json_logs: bool, service_name: str) -> logging.Formatter:
    if json_logs:
        return JSONFormatter(static={"service": service_name})
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)
