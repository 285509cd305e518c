"""Unit tests for the statistics step."""

from __future__ import annotations

from datetime import datetime, timezone

from models.records import Reading
from services.aggregator import compute_statistics


def _reading(temperature: float, humidity: float = 50.0, air_quality: float = 40.0) -> Reading:
    """Helper to build deterministic sensor readings."""

    return Reading(
        sensor_id="Sensor-1",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        temperature=temperature,
        humidity=humidity,
        air_quality=air_quality,
    )


def test_empty_input_has_no_statistics() -> None:
    assert compute_statistics([]) is None


def test_statistics_for_each_metric() -> None:
    readings = [
        _reading(10.0, humidity=30.0, air_quality=0.0),
        _reading(20.0, humidity=60.0, air_quality=100.0),
        _reading(30.0, humidity=90.0, air_quality=200.0),
    ]

    stats = compute_statistics(readings)

    assert stats is not None
    assert stats.count == 3
    assert (stats.temperature.avg, stats.temperature.min, stats.temperature.max) == (20.0, 10.0, 30.0)
    assert (stats.humidity.avg, stats.humidity.min, stats.humidity.max) == (60.0, 30.0, 90.0)
    assert (stats.air_quality.avg, stats.air_quality.min, stats.air_quality.max) == (100.0, 0.0, 200.0)


def test_statistics_are_rounded_to_one_decimal() -> None:
    stats = compute_statistics([_reading(1.24), _reading(1.26), _reading(3.33)])

    assert stats is not None
    assert stats.temperature.avg == 1.9
    assert stats.temperature.min == 1.2
    assert stats.temperature.max == 3.3


def test_statistics_accept_a_generator() -> None:
    stats = compute_statistics(_reading(float(t)) for t in (15, 25))

    assert stats is not None
    assert stats.count == 2
    assert stats.temperature.avg == 20.0


def test_statistics_round_ties_up() -> None:
    stats = compute_statistics([_reading(12.25, humidity=40.05), _reading(14.25, humidity=40.05)])

    assert stats is not None
    assert (stats.temperature.min, stats.temperature.avg, stats.temperature.max) == (12.3, 13.3, 14.3)
    assert (stats.humidity.min, stats.humidity.max) == (40.0, 40.0)
