"""
Structured Logging Setup

Consistent logging configuration across all services.
Every service logs through a child of the "device_aggregator" logger,
so one call to setup_logging() configures the whole process.
"""

import json
import logging
import sys
from datetime import datetime, timezone

ROOT_LOGGER_NAME = "device_aggregator"

# Attributes present on every LogRecord; anything else came in via `extra`
_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "service",
    "message", "taskName",
))


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": getattr(record, "service", "unknown"),
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ServiceLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds service name to all logs"""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = dict(kwargs.get("extra") or {})
        extra["service"] = self.extra.get("service", "unknown")
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = False,
) -> logging.Logger:
    """
    Set up logging for the whole process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format (True for production, False for dev)

    Returns:
        The configured root logger of the package
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)

    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger


def get_service_logger(service_name: str) -> ServiceLoggerAdapter:
    """
    Get a logger adapter with service context.

    Args:
        service_name: Name of the service (e.g., "device.task", "supervisor")

    Returns:
        Logger adapter with service name in all logs
    """
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{service_name}")
    return ServiceLoggerAdapter(logger, {"service": service_name})


def log_device_value(
    logger: logging.Logger | logging.LoggerAdapter,
    device_name: str,
    value: float,
    timestamp: str,
) -> None:
    """Log the per-tick observability line of a device"""
    logger.info(
        f"{timestamp} {device_name}: {value:.2f}",
        extra={"device": device_name, "value": value},
    )


def log_summary(
    logger: logging.Logger | logging.LoggerAdapter,
    total: float,
    device_count: int,
    timestamp: str,
) -> None:
    """Log an aggregated summary line"""
    logger.info(
        f"{timestamp} Devices Summary: {total:.2f}",
        extra={"total": total, "device_count": device_count},
    )
