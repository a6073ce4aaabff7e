"""
Logging for the studiosync package.

Records carry the active studio and request ids from context variables.
Output goes to stdout as JSON lines (python-json-logger) or plain text,
plus an optional file rotated at midnight. structlog is configured over the
same stdlib loggers for callers that prefer bound loggers.
"""

import inspect
import logging
import logging.handlers
import sys
import time
from contextvars import ContextVar
from functools import wraps
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from .config import LoggingSettings, settings

PACKAGE_LOGGER = "studiosync"
SERVICE_NAME = "studiosync-fees"

request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
studio_id: ContextVar[Optional[str]] = ContextVar('studio_id', default=None)


def current_context() -> Dict[str, str]:
    """Context ids that are set, keyed by variable name."""
    context = {}
    for var in (request_id, studio_id):
        value = var.get()
        if value:
            context[var.name] = value
    return context


class RequestContextProcessor:
    """structlog processor adding context ids, service name and environment"""

    def __call__(self, logger, method_name, event_dict):
        for key, value in current_context().items():
            event_dict.setdefault(key, value)
        event_dict['service'] = SERVICE_NAME
        event_dict['environment'] = settings.ENVIRONMENT
        return event_dict


class StudioJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines with level, logger, source location and context ids"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['source'] = f"{record.module}.{record.funcName}:{record.lineno}"
        for key, value in current_context().items():
            log_record.setdefault(key, value)


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter merging bound fields into each record's `extra`.

    Fields passed at the call site win over bound ones.

    Example:
        logger = get_logger("FeeDistributionService").bind(fee_id=fee.id)
        logger.info("Families resolved", extra={"family_count": 3})
    """

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None):
        super().__init__(logger, dict(context or {}))

    def bind(self, **fields: Any) -> "ContextLogger":
        return ContextLogger(self.logger, {**self.extra, **fields})

    def process(self, msg, kwargs):
        kwargs['extra'] = {**self.extra, **(kwargs.get('extra') or {})}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Package logger; bare names (usually class names) nest under "studiosync"."""
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return ContextLogger(logging.getLogger(name))


def log_execution_time(logger_name: Optional[str] = None):
    """
    Log how long a sync or async callable took.

    Success is logged at DEBUG. A raised exception is logged at ERROR with
    its type and then re-raised.
    """
    def decorator(func):
        logger = get_logger(logger_name or func.__module__)

        def report(started: float, error: Optional[BaseException] = None) -> None:
            fields = {
                'function': func.__name__,
                'execution_time': round(time.perf_counter() - started, 6),
            }
            if error is None:
                logger.debug(f"{func.__qualname__} finished", extra=fields)
            else:
                fields['error_type'] = type(error).__name__
                logger.error(f"{func.__qualname__} failed", extra=fields)

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                started = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    report(started, e)
                    raise
                report(started)
                return result

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                report(started, e)
                raise
            report(started)
            return result

        return sync_wrapper

    return decorator


def _build_formatter(config: LoggingSettings) -> logging.Formatter:
    if config.LOG_FORMAT == "json":
        return StudioJsonFormatter('%(asctime)s %(name)s %(levelname)s %(message)s')
    return logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')


def _configure_structlog(config: LoggingSettings) -> None:
    if config.LOG_FORMAT == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.processors.KeyValueRenderer(key_order=['event'])

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            RequestContextProcessor(),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def setup_logging(config: Optional[LoggingSettings] = None) -> logging.Logger:
    """
    Configure the package logger.

    Repeated calls replace the handlers installed by the previous one.

    Args:
        config: Logging settings (defaults to the global settings)

    Returns:
        The "studiosync" logger
    """
    config = config or settings.logging
    level = logging.DEBUG if settings.DEBUG else getattr(logging, config.LOG_LEVEL)
    formatter = _build_formatter(config)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if config.LOG_FILE:
        log_path = Path(config.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.TimedRotatingFileHandler(log_path, when='midnight', backupCount=30)
        )
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    if config.ENABLE_STRUCTURED_LOGGING:
        _configure_structlog(config)

    package_logger.debug("Logging configured", extra={
        'log_level': logging.getLevelName(level),
        'log_format': config.LOG_FORMAT,
        'structured_logging': config.ENABLE_STRUCTURED_LOGGING,
    })
    return package_logger


__all__ = [
    'get_logger',
    'setup_logging',
    'log_execution_time',
    'current_context',
    'ContextLogger',
    'StudioJsonFormatter',
    'RequestContextProcessor',
    'request_id',
    'studio_id',
]


setup_logging()
