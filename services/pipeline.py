"""Pure query pipeline: filter, sort, paginate and summarize readings.

Every function here returns a newly allocated sequence and never mutates its
input, so results can be derived straight from a store snapshot without
copying it first.
"""

from __future__ import annotations

import locale
import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence

from models.records import (
    FilterState,
    Page,
    PageRequest,
    Reading,
    ReadingStatistics,
    SortConfig,
    SortDirection,
    SortKey,
)
from services.aggregator import compute_statistics
from services.instrumentation import TimingHook, noop_timing_hook, timed

__all__ = [
    "InvalidPageRequest",
    "QueryResult",
    "compute_statistics",
    "filter_and_sort",
    "filter_readings",
    "paginate",
    "run_query",
    "sort_readings",
]


_NUMERIC_KEYS = frozenset({SortKey.temperature, SortKey.humidity, SortKey.air_quality})


class InvalidPageRequest(ValueError):
    """Raised when a caller asks for a page with a non-positive size or number."""


@dataclass(frozen=True, slots=True)
class QueryResult:
    page: Page
    statistics: Optional[ReadingStatistics]


def _within(value: float, low: float, high: float) -> bool:
    return (low == 0 or value >= low) and (high == 0 or value <= high)


def _passes(reading: Reading, filters: FilterState) -> bool:
    return (
        _within(reading.temperature, filters.temperature_min, filters.temperature_max)
        and _within(reading.humidity, filters.humidity_min, filters.humidity_max)
        and _within(reading.air_quality, filters.air_quality_min, filters.air_quality_max)
    )


def filter_readings(readings: Iterable[Reading], filters: FilterState) -> List[Reading]:
    return [reading for reading in readings if _passes(reading, filters)]


def _sort_key_for(key: SortKey) -> Callable[[Reading], Any]:
    attribute = key.value
    if key is SortKey.timestamp:
        return lambda reading: reading.timestamp
    if key in _NUMERIC_KEYS:
        return lambda reading: float(getattr(reading, attribute))
    return lambda reading: locale.strxfrm(str(getattr(reading, attribute)))


def sort_readings(readings: Iterable[Reading], sort: SortConfig) -> List[Reading]:
    """Stable sort by ``sort.key``; equal keys keep their input order either way."""
    if sort.key is None:
        return list(readings)
    return sorted(
        readings,
        key=_sort_key_for(sort.key),
        reverse=sort.direction is SortDirection.descending,
    )


def filter_and_sort(
    history: Sequence[Reading],
    filters: FilterState,
    sort: SortConfig,
    timing_hook: TimingHook = noop_timing_hook,
) -> List[Reading]:
    with timed(timing_hook, "filtering"):
        filtered = filter_readings(history, filters)
    with timed(timing_hook, "sorting"):
        return sort_readings(filtered, sort)


def paginate(readings: Sequence[Reading], request: PageRequest) -> Page:
    """Slice one 1-indexed page out of ``readings``.

    A page past the end yields no items; clamping back to a valid page is the
    caller's job.
    """
    if request.page_size <= 0:
        raise InvalidPageRequest(f"page_size must be positive, got {request.page_size}.")
    if request.page_number < 1:
        raise InvalidPageRequest(f"page_number must be >= 1, got {request.page_number}.")

    total = len(readings)
    total_pages = math.ceil(total / request.page_size)
    start = (request.page_number - 1) * request.page_size
    items = tuple(readings[start : start + request.page_size])
    return Page(
        items=items,
        total=total,
        page_size=request.page_size,
        page_number=request.page_number,
        total_pages=total_pages,
        has_next=request.page_number < total_pages,
        has_prev=request.page_number > 1,
    )


def run_query(
    history: Sequence[Reading],
    filters: FilterState,
    sort: SortConfig,
    request: PageRequest,
    timing_hook: TimingHook = noop_timing_hook,
) -> QueryResult:
    """Filter, sort and paginate ``history``; statistics cover every match."""
    ordered = filter_and_sort(history, filters, sort, timing_hook=timing_hook)
    page = paginate(ordered, request)
    with timed(timing_hook, "statistics"):
        statistics = compute_statistics(ordered)
    return QueryResult(page=page, statistics=statistics)
