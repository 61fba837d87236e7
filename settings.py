from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_STORE_NAME_ENV = "READING_STORE_NAME"
_STORE_PATH_ENV = "READING_STORE_PATH"
_CIRCLE_RADIUS_ENV = "DEFAULT_CIRCLE_RADIUS_M"
_CIRCLE_STEPS_ENV = "CIRCLE_STEPS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    reading_store_name: str
    reading_store_path: Optional[str]
    default_circle_radius_m: float
    circle_steps: int
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


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
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


def _read_circle_steps(default: int) -> int:
    value = os.getenv(_CIRCLE_STEPS_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    # a ring needs at least three distinct vertices
    return parsed if parsed >= 4 else default


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
        reading_store_name=_read_str_env(_STORE_NAME_ENV, "latest_readings"),
        reading_store_path=_read_optional_env(_STORE_PATH_ENV, "./tmp/readings.json"),
        default_circle_radius_m=_read_positive_float(_CIRCLE_RADIUS_ENV, 1000.0),
        circle_steps=_read_circle_steps(64),
        log_level=_read_log_level("INFO"),
    )
