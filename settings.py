from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_TICK_INTERVAL_ENV = "SENSOR_TICK_INTERVAL_MS"
_SENSOR_COUNT_ENV = "SENSOR_COUNT"
_MAX_RETAINED_ENV = "SENSOR_MAX_RETAINED"
_PAGE_SIZE_ENV = "SENSOR_DEFAULT_PAGE_SIZE"
_TIMING_LOG_ENV = "SENSOR_TIMING_LOG"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    tick_interval_ms: int
    sensor_count: int
    max_retained: int
    default_page_size: int
    timing_log: bool
    log_level: str

    @property
    def tick_interval_seconds(self) -> float:
        return self.tick_interval_ms / 1000.0


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


def _read_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if not candidate:
        return default
    return candidate in _TRUTHY


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
        tick_interval_ms=_read_positive_int(_TICK_INTERVAL_ENV, 2000),
        sensor_count=_read_positive_int(_SENSOR_COUNT_ENV, 5),
        max_retained=_read_positive_int(_MAX_RETAINED_ENV, 1000),
        default_page_size=_read_positive_int(_PAGE_SIZE_ENV, 10),
        timing_log=_read_flag(_TIMING_LOG_ENV, False),
        log_level=_read_log_level("INFO"),
    )
