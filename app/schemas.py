"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from models.records import AirQualityLevel, MetricStatistics, Page, Reading, ReadingStatistics


class ReadingOut(BaseModel):
    """One retained reading as exposed over the API."""

    sensor_id: str
    timestamp: datetime
    temperature: float
    humidity: float
    air_quality: float
    air_quality_level: AirQualityLevel

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingOut":
        return cls(
            sensor_id=reading.sensor_id,
            timestamp=reading.timestamp,
            temperature=reading.temperature,
            humidity=reading.humidity,
            air_quality=reading.air_quality,
            air_quality_level=reading.air_quality_level,
        )


class MetricStatisticsOut(BaseModel):
    avg: float
    min: float
    max: float


class StatisticsOut(BaseModel):
    """Rounded summary over every reading that matched the filters."""

    count: int = Field(..., ge=1)
    temperature: MetricStatisticsOut
    humidity: MetricStatisticsOut
    air_quality: MetricStatisticsOut

    @classmethod
    def from_statistics(cls, stats: ReadingStatistics) -> "StatisticsOut":
        return cls(
            count=stats.count,
            temperature=_metric(stats.temperature),
            humidity=_metric(stats.humidity),
            air_quality=_metric(stats.air_quality),
        )


def _metric(metric: MetricStatistics) -> MetricStatisticsOut:
    return MetricStatisticsOut(avg=metric.avg, min=metric.min, max=metric.max)


class ReadingsPage(BaseModel):
    """A page of the filtered and sorted history plus store connectivity."""

    items: List[ReadingOut] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_prev: bool
    is_connected: bool
    error: Optional[str] = None
    statistics: Optional[StatisticsOut] = None

    @classmethod
    def build(
        cls,
        page: Page,
        statistics: Optional[ReadingStatistics],
        is_connected: bool,
        error: Optional[str],
    ) -> "ReadingsPage":
        return cls(
            items=[ReadingOut.from_reading(reading) for reading in page.items],
            total=page.total,
            page=page.page_number,
            page_size=page.page_size,
            total_pages=page.total_pages,
            has_next=page.has_next,
            has_prev=page.has_prev,
            is_connected=is_connected,
            error=error,
            statistics=StatisticsOut.from_statistics(statistics) if statistics else None,
        )


class StoreStatus(BaseModel):
    is_connected: bool
    error: Optional[str] = None
    total_readings: int = Field(..., ge=0)
    sensor_count: int = Field(..., ge=1)
    tick_interval_seconds: float = Field(..., gt=0)
