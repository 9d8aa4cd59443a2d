from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_WATCH_INTERVAL = 2.0
DEFAULT_TIMEOUT = 10.0

_BASE_URL_ENV = "RELAY_BASE_URL"
_API_KEY_ENV = "RELAY_API_KEY"
_WATCH_INTERVAL_ENV = "RELAY_WATCH_INTERVAL"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    watch_interval: float = DEFAULT_WATCH_INTERVAL
    timeout: float = DEFAULT_TIMEOUT


def _read_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_config(
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    watch_interval: Optional[float] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    key = api_key or (os.getenv(_API_KEY_ENV) or "").strip() or None
    if watch_interval is None:
        watch_interval = _read_float(os.getenv(_WATCH_INTERVAL_ENV), DEFAULT_WATCH_INTERVAL)
    return CLIConfig(
        base_url=url.rstrip("/"),
        api_key=key,
        watch_interval=watch_interval,
    )
