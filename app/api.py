"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import ReadingsPage, StatisticsOut, StoreStatus
from datastore.sensor_store import SensorDataStore, build_default_store
from models.records import FilterState, PageRequest, SortConfig
from services.instrumentation import default_timing_hook, timed
from services.pipeline import compute_statistics, filter_readings, run_query
from settings import get_settings

router = APIRouter()

MAX_PAGE_SIZE = 1000


def get_store() -> SensorDataStore:
    return build_default_store()


def get_filters(
    temperature_min: float = Query(0.0, description="Lower temperature bound; 0 means unbounded."),
    temperature_max: float = Query(0.0, description="Upper temperature bound; 0 means unbounded."),
    humidity_min: float = Query(0.0, description="Lower humidity bound; 0 means unbounded."),
    humidity_max: float = Query(0.0, description="Upper humidity bound; 0 means unbounded."),
    air_quality_min: float = Query(0.0, description="Lower AQI bound; 0 means unbounded."),
    air_quality_max: float = Query(0.0, description="Upper AQI bound; 0 means unbounded."),
) -> FilterState:
    return FilterState(
        temperature_min=temperature_min,
        temperature_max=temperature_max,
        humidity_min=humidity_min,
        humidity_max=humidity_max,
        air_quality_min=air_quality_min,
        air_quality_max=air_quality_max,
    )


def get_sort(
    sort_key: str = Query(
        "timestamp",
        description="sensor_id, timestamp, temperature, humidity, air_quality or none.",
    ),
    sort_direction: str = Query("desc", description="asc or desc."),
) -> SortConfig:
    try:
        return SortConfig.from_strings(sort_key, sort_direction)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid sort parameters: {exc}",
        ) from exc


def get_page_request(
    page: int = Query(1, ge=1, description="1-indexed page number."),
    page_size: Optional[int] = Query(None, ge=1, le=MAX_PAGE_SIZE),
) -> PageRequest:
    size = page_size if page_size is not None else get_settings().default_page_size
    return PageRequest(page_size=size, page_number=page)


@router.get(
    "/readings",
    response_model=ReadingsPage,
    summary="Filtered, sorted and paginated view of the retained readings.",
)
async def list_readings(
    filters: FilterState = Depends(get_filters),
    sort: SortConfig = Depends(get_sort),
    page_request: PageRequest = Depends(get_page_request),
    store: SensorDataStore = Depends(get_store),
) -> ReadingsPage:
    snapshot = store.get_snapshot()
    result = run_query(
        snapshot.data,
        filters,
        sort,
        page_request,
        timing_hook=default_timing_hook(),
    )
    return ReadingsPage.build(
        result.page,
        result.statistics,
        is_connected=snapshot.is_connected,
        error=snapshot.error,
    )


@router.get(
    "/statistics",
    response_model=StatisticsOut,
    summary="Average, minimum and maximum of each metric over matching readings.",
)
async def get_statistics(
    filters: FilterState = Depends(get_filters),
    store: SensorDataStore = Depends(get_store),
) -> StatisticsOut:
    snapshot = store.get_snapshot()
    hook = default_timing_hook()
    with timed(hook, "filtering"):
        matching = filter_readings(snapshot.data, filters)
    with timed(hook, "statistics"):
        stats = compute_statistics(matching)
    if stats is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No readings match the current filters.",
        )
    return StatisticsOut.from_statistics(stats)


@router.get(
    "/status",
    response_model=StoreStatus,
    summary="Connectivity and retention state of the sensor store.",
)
async def get_status(store: SensorDataStore = Depends(get_store)) -> StoreStatus:
    snapshot = store.get_snapshot()
    return StoreStatus(
        is_connected=snapshot.is_connected,
        error=snapshot.error,
        total_readings=snapshot.total,
        sensor_count=len(store.roster),
        tick_interval_seconds=store.tick_interval,
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /readings for sensor data."}
