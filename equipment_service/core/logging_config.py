"""Shared logging configuration for the service."""

from __future__ import annotations

import logging
import os
from collections import deque
from datetime import datetime, timezone
from typing import Optional

from pythonjsonlogger import jsonlogger

_CONFIGURED = False
_LOG_BUFFER: deque[dict[str, str]] = deque(maxlen=200)


class _ServiceNameFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        return True


class _BufferHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
            entry = {
                "time": timestamp,
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
                "service": getattr(record, "service", ""),
            }
            _LOG_BUFFER.appendleft(entry)
        except Exception:
            self.handleError(record)


def setup_logging(service_name: Optional[str] = None) -> None:
    """Configure root logging with a JSON formatter and consistent metadata."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    service = service_name or os.getenv("SERVICE_NAME", "equipment-service")

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(service)s")
    )
    handler.addFilter(_ServiceNameFilter(service))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    buffer_handler = _BufferHandler()
    buffer_handler.addFilter(_ServiceNameFilter(service))
    root.addHandler(buffer_handler)
    root.setLevel(log_level)
    logging.captureWarnings(True)
    _CONFIGURED = True


def get_log_buffer(limit: int = 100, level: Optional[str] = None) -> list[dict[str, str]]:
    """Most recent entries first, optionally only those at ``level`` or above."""

    entries = list(_LOG_BUFFER)
    if level:
        threshold = logging.getLevelName(level.upper())
        if isinstance(threshold, int):
            entries = [e for e in entries if logging.getLevelName(e["level"]) >= threshold]
    return entries[:limit]


__all__ = ["setup_logging", "get_log_buffer"]
