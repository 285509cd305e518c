"""Synthetic reading source standing in for a greenhouse sensor network."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Callable, List, Optional

from models.records import Reading

Clock = Callable[[], datetime]

TEMPERATURE_RANGE = (10.0, 40.0)
HUMIDITY_RANGE = (30.0, 90.0)
AIR_QUALITY_RANGE = (0.0, 200.0)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def sensor_roster(count: int) -> List[str]:
    """Sequential sensor labels, ``Sensor-1`` through ``Sensor-<count>``."""
    return [f"Sensor-{index}" for index in range(1, count + 1)]


class ReadingGenerator:
    """Produces one reading per call from a random source and a clock."""

    def __init__(self, rng: Optional[random.Random] = None, clock: Clock = utc_now) -> None:
        self._rng = rng or random.Random()
        self._clock = clock

    def generate(self, sensor_id: str) -> Reading:
        return Reading(
            sensor_id=sensor_id,
            timestamp=self._clock(),
            temperature=self._sample(TEMPERATURE_RANGE),
            humidity=self._sample(HUMIDITY_RANGE),
            air_quality=self._sample(AIR_QUALITY_RANGE),
        )

    def _sample(self, bounds: tuple[float, float]) -> float:
        low, high = bounds
        return round(low + self._rng.random() * (high - low), 2)
