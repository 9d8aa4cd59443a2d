from __future__ import annotations

import logging
import time
from logging.config import dictConfig
from typing import Any, Iterable, Sequence

from settings import get_settings

_CONTEXT_KEYS = (
    "ir_triggered",
    "rfid_authorized",
    "last_updated",
    "status",
    "reason",
    "key_count",
    "host",
    "port",
)

_configured = False


class RelayLogFormatter(logging.Formatter):
    """Formatter that stamps UTC times and appends known ``extra`` fields."""

    converter = time.gmtime

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        context_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._context_keys: Sequence[str] = tuple(context_keys or _CONTEXT_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            f"{key}={_render(getattr(record, key))}"
            for key in self._context_keys
            if getattr(record, key, None) is not None
        ]
        if not context:
            return message
        return f"{message} | {' '.join(context)}"


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def configure_logging(level: str | int | None = None) -> None:
    """Install the relay's root handler once per process."""
    global _configured
    if _configured:
        return

    log_level = level if level is not None else get_settings().log_level

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "relay": {
                    "()": "logging_config.RelayLogFormatter",
                    "fmt": "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "context_keys": list(_CONTEXT_KEYS),
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "relay",
                }
            },
            "root": {"handlers": ["console"], "level": log_level},
            "loggers": {
                "uvicorn.access": {"level": "WARNING"},
            },
        }
    )

    _configured = True
