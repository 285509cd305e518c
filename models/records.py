"""Domain models shared across the store, the query pipeline and the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class AirQualityLevel(str, Enum):
    """AQI bands used when presenting air quality values."""

    good = "Good"
    moderate = "Moderate"
    sensitive = "Unhealthy for Sensitive Groups"
    unhealthy = "Unhealthy"
    very_unhealthy = "Very Unhealthy"

    @classmethod
    def classify(cls, aqi: float) -> "AirQualityLevel":
        if aqi <= 50:
            return cls.good
        if aqi <= 100:
            return cls.moderate
        if aqi <= 150:
            return cls.sensitive
        if aqi <= 200:
            return cls.unhealthy
        return cls.very_unhealthy


@dataclass(frozen=True, slots=True)
class Reading:
    """A single timestamped measurement triple from one simulated sensor."""

    sensor_id: str
    timestamp: datetime
    temperature: float
    humidity: float
    air_quality: float

    @property
    def air_quality_level(self) -> AirQualityLevel:
        return AirQualityLevel.classify(self.air_quality)


class SortKey(str, Enum):
    sensor_id = "sensor_id"
    timestamp = "timestamp"
    temperature = "temperature"
    humidity = "humidity"
    air_quality = "air_quality"


class SortDirection(str, Enum):
    ascending = "asc"
    descending = "desc"


@dataclass(frozen=True, slots=True)
class FilterState:
    """Inclusive per-metric bounds. A bound of exactly 0 leaves that side open."""

    temperature_min: float = 0.0
    temperature_max: float = 0.0
    humidity_min: float = 0.0
    humidity_max: float = 0.0
    air_quality_min: float = 0.0
    air_quality_max: float = 0.0

    @classmethod
    def reset(cls) -> "FilterState":
        return cls()

    @property
    def is_active(self) -> bool:
        return any(
            bound != 0
            for bound in (
                self.temperature_min,
                self.temperature_max,
                self.humidity_min,
                self.humidity_max,
                self.air_quality_min,
                self.air_quality_max,
            )
        )


@dataclass(frozen=True, slots=True)
class SortConfig:
    key: Optional[SortKey] = SortKey.timestamp
    direction: SortDirection = SortDirection.descending

    @classmethod
    def from_strings(cls, key: Optional[str], direction: str = "desc") -> "SortConfig":
        """Build a config from raw names; ``None``/``"none"`` disables sorting.

        Raises ``ValueError`` for unknown keys or directions.
        """
        sort_key = None
        if key is not None and key.strip().lower() != "none":
            sort_key = SortKey(key.strip())
        return cls(key=sort_key, direction=SortDirection(direction.strip().lower()))

    def toggled(self, key: SortKey) -> "SortConfig":
        """Return the config produced by selecting ``key`` as a column header.

        Re-selecting the current key while descending flips to ascending; any
        other selection sorts by ``key`` descending.
        """
        if self.key == key and self.direction is SortDirection.descending:
            return SortConfig(key=key, direction=SortDirection.ascending)
        return SortConfig(key=key, direction=SortDirection.descending)


@dataclass(frozen=True, slots=True)
class PageRequest:
    page_size: int
    page_number: int = 1


@dataclass(frozen=True, slots=True)
class Page:
    items: Tuple[Reading, ...]
    total: int
    page_size: int
    page_number: int
    total_pages: int
    has_next: bool
    has_prev: bool


@dataclass(frozen=True, slots=True)
class MetricStatistics:
    avg: float
    min: float
    max: float


@dataclass(frozen=True, slots=True)
class ReadingStatistics:
    """Rounded summary of the three metrics over a non-empty sequence."""

    count: int
    temperature: MetricStatistics
    humidity: MetricStatistics
    air_quality: MetricStatistics


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    """Immutable view of the store state handed to consumers."""

    data: Tuple[Reading, ...] = field(default_factory=tuple)
    is_connected: bool = False
    error: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.data)
