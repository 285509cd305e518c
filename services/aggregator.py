"""Summary statistics for sequences of readings."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from models.records import MetricStatistics, Reading, ReadingStatistics

_ONE_DECIMAL = Decimal("0.1")


def round_half_up(value: float) -> float:
    """Round to one decimal with ties going away from zero.

    The exact binary value is rounded, so 12.25 becomes 12.3 while 40.05
    (stored just below the tie) becomes 40.0.
    """
    return float(Decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def _summarize(values: List[float]) -> MetricStatistics:
    return MetricStatistics(
        avg=round_half_up(sum(values) / len(values)),
        min=round_half_up(min(values)),
        max=round_half_up(max(values)),
    )


def compute_statistics(readings: Iterable[Reading]) -> Optional[ReadingStatistics]:
    """Average, minimum and maximum of each metric, rounded to one decimal.

    Returns ``None`` when ``readings`` is empty so callers can show a
    "no data" state instead of zero-filled figures.
    """
    temperatures: List[float] = []
    humidities: List[float] = []
    air_qualities: List[float] = []

    for reading in readings:
        temperatures.append(reading.temperature)
        humidities.append(reading.humidity)
        air_qualities.append(reading.air_quality)

    if not temperatures:
        return None

    return ReadingStatistics(
        count=len(temperatures),
        temperature=_summarize(temperatures),
        humidity=_summarize(humidities),
        air_quality=_summarize(air_qualities),
    )
