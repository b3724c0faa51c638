"""Plugin logging configuration with JSON formatting.

This module provides structured logging for the plugin process:
- JSON-formatted log output for easy parsing by log aggregation systems
- A human-readable text format for development
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from netplugin.config import settings

# LogRecord attributes that are never reported as "extra"
STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}


class PluginJSONFormatter(logging.Formatter):
    """JSON log formatter for plugin structured logging.

    Formats log records as JSON objects with consistent fields:
    - timestamp: ISO8601 formatted timestamp
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - plugin: The plugin name Docker knows us by
    - extra: Additional context fields
    """

    def __init__(self, plugin_name: str = ""):
        super().__init__()
        self.plugin_name = plugin_name

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.plugin_name:
            log_entry["plugin"] = self.plugin_name

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra = {}
        for key, value in record.__dict__.items():
            if key not in STANDARD_ATTRS:
                try:
                    json.dumps(value)
                    extra[key] = value
                except (TypeError, ValueError):
                    extra[key] = str(value)

        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry)


class PluginTextFormatter(logging.Formatter):
    """Text log formatter (development use).

    [timestamp] LEVEL [plugin] logger: message
    """

    def __init__(self, plugin_name: str = ""):
        super().__init__()
        self.plugin_name = plugin_name

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        plugin_part = f" [{self.plugin_name}]" if self.plugin_name else ""

        message = f"[{timestamp}] {record.levelname:8}{plugin_part} {record.name}: {record.getMessage()}"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


def setup_logging(plugin_name: str = "") -> None:
    """Configure the root logger based on settings.

    Args:
        plugin_name: Included in every log entry when set
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)

    if settings.log_format.lower() == "json":
        handler.setFormatter(PluginJSONFormatter(plugin_name))
    else:
        handler.setFormatter(PluginTextFormatter(plugin_name))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)

    root_logger.addHandler(handler)

    # aiohttp logs every request at INFO
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
