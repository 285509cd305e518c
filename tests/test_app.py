from datetime import datetime, timedelta, timezone
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from datastore.sensor_store import CYCLE_FAILURE_MESSAGE, SensorDataStore, build_default_store
from models.records import Reading


class RosterGenerator:
    """Sensor-N always reports temperature 10*N, humidity 40+N and AQI 30*N."""

    def __init__(self) -> None:
        self.calls = 0
        self.failing = False
        self._base = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def generate(self, sensor_id: str) -> Reading:
        if self.failing:
            raise RuntimeError("generator fault")
        self.calls += 1
        index = int(sensor_id.rsplit("-", 1)[1])
        return Reading(
            sensor_id=sensor_id,
            timestamp=self._base + timedelta(seconds=self.calls),
            temperature=10.0 * index,
            humidity=40.0 + index,
            air_quality=30.0 * index,
        )


@pytest.fixture
def test_store() -> Iterator[SensorDataStore]:
    store = SensorDataStore(RosterGenerator(), autostart=False)  # type: ignore[arg-type]
    yield store
    store.destroy()


@pytest.fixture
def api_client(test_store: SensorDataStore, monkeypatch) -> Iterator[TestClient]:
    def build_test_store() -> SensorDataStore:
        return test_store

    build_test_store.cache_clear = lambda: None  # type: ignore[attr-defined]

    monkeypatch.setattr("app.main.build_default_store", build_test_store)
    monkeypatch.setattr("app.api.build_default_store", build_test_store)

    app = create_app()
    with TestClient(app) as client:
        yield client


def test_lifespan_destroys_store_and_clears_cache() -> None:
    app = create_app()

    with TestClient(app):
        store_during = build_default_store()
        assert store_during.is_running is True

    assert store_during.is_destroyed is True
    store_after = build_default_store()
    try:
        assert store_after is not store_during
    finally:
        store_after.destroy()
        build_default_store.cache_clear()


def test_readings_default_view_is_newest_first(api_client: TestClient) -> None:
    response = api_client.get("/readings", params={"page_size": 10})

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 5
    assert payload["total_pages"] == 1
    assert payload["is_connected"] is True
    assert payload["error"] is None
    assert [item["sensor_id"] for item in payload["items"]] == [
        "Sensor-5",
        "Sensor-4",
        "Sensor-3",
        "Sensor-2",
        "Sensor-1",
    ]
    assert payload["items"][-1]["air_quality_level"] == "Good"


def test_readings_apply_filters_and_sorting(api_client: TestClient) -> None:
    response = api_client.get(
        "/readings",
        params={
            "temperature_min": 20,
            "temperature_max": 40,
            "sort_key": "temperature",
            "sort_direction": "asc",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert [item["temperature"] for item in payload["items"]] == [20.0, 30.0, 40.0]
    assert payload["statistics"]["count"] == 3
    assert payload["statistics"]["temperature"] == {"avg": 30.0, "min": 20.0, "max": 40.0}


def test_readings_pagination(api_client: TestClient) -> None:
    response = api_client.get(
        "/readings",
        params={"page": 2, "page_size": 2, "sort_key": "temperature", "sort_direction": "asc"},
    )

    payload = response.json()
    assert [item["sensor_id"] for item in payload["items"]] == ["Sensor-3", "Sensor-4"]
    assert payload["total_pages"] == 3
    assert payload["has_next"] is True
    assert payload["has_prev"] is True
    assert payload["statistics"]["count"] == 5


def test_readings_page_past_the_end_is_empty(api_client: TestClient) -> None:
    payload = api_client.get("/readings", params={"page": 9, "page_size": 2}).json()

    assert payload["items"] == []
    assert payload["has_next"] is False


@pytest.mark.parametrize(
    "params",
    [
        {"page_size": 0},
        {"page": 0},
        {"sort_key": "pressure"},
        {"sort_direction": "sideways"},
        {"temperature_min": "warm"},
    ],
)
def test_readings_rejects_invalid_parameters(api_client: TestClient, params: dict) -> None:
    response = api_client.get("/readings", params=params)

    assert response.status_code == 422


def test_readings_surface_production_failures(
    api_client: TestClient, test_store: SensorDataStore
) -> None:
    test_store.generator.failing = True  # type: ignore[attr-defined]
    test_store.run_cycle()

    payload = api_client.get("/readings").json()

    assert payload["is_connected"] is False
    assert payload["error"] == CYCLE_FAILURE_MESSAGE
    assert payload["total"] == 5


def test_statistics_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/statistics", params={"air_quality_max": 90})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["air_quality"] == {"avg": 60.0, "min": 30.0, "max": 90.0}
    assert body["humidity"] == {"avg": 42.0, "min": 41.0, "max": 43.0}


def test_statistics_without_matches_returns_not_found(api_client: TestClient) -> None:
    response = api_client.get("/statistics", params={"temperature_min": 500})

    assert response.status_code == 404
    assert response.json()["detail"] == "No readings match the current filters."


def test_status_endpoint(api_client: TestClient, test_store: SensorDataStore) -> None:
    test_store.run_cycle()

    body = api_client.get("/status").json()

    assert body == {
        "is_connected": True,
        "error": None,
        "total_readings": 10,
        "sensor_count": 5,
        "tick_interval_seconds": 2.0,
    }


def test_health_and_root(api_client: TestClient) -> None:
    assert api_client.get("/health").json() == {"status": "ok"}
    assert api_client.get("/").json()["status"] == "ok"
