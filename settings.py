from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_COLLECTION_NAME_ENV = "SENSORS_COLLECTION_NAME"
_COLLECTION_PATH_ENV = "SENSORS_PERSISTENCE_PATH"
_BUFFER_CAPACITY_ENV = "LIVE_BUFFER_CAPACITY"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    collection_name: str
    collection_persistence_path: Optional[str]
    live_buffer_capacity: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


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
        collection_name=_read_str_env(_COLLECTION_NAME_ENV, "readings"),
        collection_persistence_path=_read_optional_env(
            _COLLECTION_PATH_ENV, "./tmp/readings.jsonl"
        ),
        live_buffer_capacity=_read_positive_int(_BUFFER_CAPACITY_ENV, 50),
        log_level=_read_log_level("INFO"),
    )
