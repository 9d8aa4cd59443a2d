from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_PORT_ENV = "PORT"
_HOST_ENV = "HOST"
_REQUIRE_API_KEY_ENV = "REQUIRE_API_KEY"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    port: int
    host: str
    require_api_key: bool
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_port(default: int) -> int:
    value = os.getenv(_PORT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if 0 < parsed <= 65535 else default


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        port=_read_port(3000),
        host=_read_str_env(_HOST_ENV, "0.0.0.0"),
        require_api_key=_read_bool_env(_REQUIRE_API_KEY_ENV, False),
        log_level=_read_log_level("INFO"),
    )
