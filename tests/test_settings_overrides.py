from __future__ import annotations

from typing import Iterable

from datastore.sensor_store import build_default_store
from services.instrumentation import LoggingTimingHook, default_timing_hook, noop_timing_hook
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("SENSOR_TICK_INTERVAL_MS", "500")
    monkeypatch.setenv("SENSOR_COUNT", "3")
    monkeypatch.setenv("SENSOR_MAX_RETAINED", "50")
    monkeypatch.setenv("SENSOR_DEFAULT_PAGE_SIZE", "25")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    caches = (get_settings, build_default_store)
    _clear_caches(caches)

    settings = get_settings()
    store = build_default_store()

    try:
        assert settings.default_page_size == 25
        assert settings.log_level == "DEBUG"
        assert store.roster == ["Sensor-1", "Sensor-2", "Sensor-3"]
        assert store.max_retained == 50
        assert store.tick_interval == 0.5
        assert {reading.sensor_id for reading in store.get_snapshot().data} == set(store.roster)
    finally:
        store.destroy()
        _clear_caches(caches)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("SENSOR_TICK_INTERVAL_MS", "soon")
    monkeypatch.setenv("SENSOR_COUNT", "-2")
    monkeypatch.setenv("SENSOR_MAX_RETAINED", "   ")
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.tick_interval_ms == 2000
        assert settings.tick_interval_seconds == 2.0
        assert settings.sensor_count == 5
        assert settings.max_retained == 1000
    finally:
        get_settings.cache_clear()


def test_timing_log_flag_selects_hook(monkeypatch) -> None:
    get_settings.cache_clear()
    try:
        monkeypatch.setenv("SENSOR_TIMING_LOG", "yes")
        get_settings.cache_clear()
        assert isinstance(default_timing_hook(), LoggingTimingHook)

        monkeypatch.setenv("SENSOR_TIMING_LOG", "off")
        get_settings.cache_clear()
        assert default_timing_hook() is noop_timing_hook
    finally:
        get_settings.cache_clear()
