from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer

_METRICS = (
    ("temperature", "Temperature (C)"),
    ("humidity", "Humidity (%)"),
    ("air_quality", "Air Quality (AQI)"),
)

_ROW_FORMAT = "{:<10} {:<26} {:>8} {:>8} {:>8}  {}"


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_status(payload: Dict[str, Any]) -> None:
    echo_heading("Store Status")
    connected = bool(payload.get("is_connected"))
    typer.secho(
        "connected" if connected else "disconnected",
        fg=typer.colors.GREEN if connected else typer.colors.RED,
    )
    echo_key_values(
        [
            ("total_readings", payload.get("total_readings")),
            ("sensor_count", payload.get("sensor_count")),
            ("tick_interval_seconds", payload.get("tick_interval_seconds")),
        ]
    )
    error = payload.get("error")
    if error:
        typer.secho(f"error: {error}", fg=typer.colors.RED)


def render_statistics(payload: Optional[Dict[str, Any]]) -> None:
    echo_heading("Statistics")
    if not payload:
        typer.echo("No readings match the current filters.")
        return
    typer.echo(f"count: {payload.get('count')}")
    for key, label in _METRICS:
        metric = payload.get(key) or {}
        typer.echo(
            f"{label}: avg {metric.get('avg')} | range {metric.get('min')} - {metric.get('max')}"
        )


def render_readings(payload: Dict[str, Any]) -> None:
    if payload.get("error"):
        typer.secho(f"Store error: {payload['error']}", fg=typer.colors.RED, err=True)

    echo_heading("Readings")
    items = payload.get("items") or []
    if not items:
        typer.echo("No sensor data available for this page.")
    else:
        typer.echo(
            _ROW_FORMAT.format("sensor_id", "timestamp", "temp", "humidity", "aqi", "level")
        )
        for item in items:
            typer.echo(
                _ROW_FORMAT.format(
                    item.get("sensor_id", ""),
                    item.get("timestamp", ""),
                    item.get("temperature", ""),
                    item.get("humidity", ""),
                    item.get("air_quality", ""),
                    item.get("air_quality_level", ""),
                )
            )

    typer.echo()
    typer.echo(
        f"page {payload.get('page')} of {payload.get('total_pages')} "
        f"({payload.get('total')} matching readings)"
    )
    typer.echo()
    render_statistics(payload.get("statistics"))
