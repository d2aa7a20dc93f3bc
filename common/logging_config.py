# -*- coding: utf-8 -*-
"""
Centralized logging configuration for the provisioner.

Every line goes to the console and is appended to the provisioning log file
with a timestamp. A JSON formatter is available for hosts whose logs are
shipped to a collector.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

TEXT_LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_RESERVED_RECORD_KEYS = frozenset(
    [
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
        "message",
        "asctime",
    ]
)


class JSONFormatter(logging.Formatter):
    """
    Formats log records as a single JSON object per line.

    Fields: timestamp (ISO, UTC), level, service, logger, message, module,
    function, line, hostname, plus any ``extra`` passed to the log call.
    """

    def __init__(self, service_name: str = "host-provisioner"):
        super().__init__()
        self.service_name = service_name
        self.hostname = os.uname().nodename

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "hostname": self.hostname,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(
    service_name: str,
    log_level: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = True,
    log_file_path: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Set up logging for the provisioner.

    Args:
        service_name: Name of the service logger to return.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Falls back to the LOG_LEVEL environment variable, then INFO.
        enable_console: Whether to log to stdout.
        enable_file: Whether to append to ``log_file_path``.
        log_file_path: Path of the append-only log file.
        json_format: Use JSONFormatter instead of the timestamped text format.

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL", "INFO")

    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    if json_format:
        formatter: logging.Formatter = JSONFormatter(service_name)
    else:
        formatter = logging.Formatter(TEXT_LOG_FORMAT, datefmt=TEXT_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    logger = logging.getLogger(service_name)

    if enable_file and log_file_path:
        try:
            file_handler = logging.FileHandler(
                log_file_path, mode="a", encoding="utf-8"
            )
        except OSError as e:
            logger.warning(
                f"Cannot open log file '{log_file_path}': {e}. Logging to console only."
            )
        else:
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    logger.debug(
        "Logging initialized",
        extra={
            "log_level": logging.getLevelName(numeric_level),
            "console_enabled": enable_console,
            "log_file": log_file_path if enable_file else None,
        },
    )
    return logger
