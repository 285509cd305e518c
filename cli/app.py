from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import typer

from cli.client import ApiClient
from cli.config import DEFAULT_WATCH_INTERVAL, CLIConfig, load_config
from cli.render import render_readings, render_statistics, render_status


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for querying the greenhouse sensor feed service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


def _filter_params(
    temperature_min: float,
    temperature_max: float,
    humidity_min: float,
    humidity_max: float,
    air_quality_min: float,
    air_quality_max: float,
) -> Dict[str, Any]:
    bounds = {
        "temperature_min": temperature_min,
        "temperature_max": temperature_max,
        "humidity_min": humidity_min,
        "humidity_max": humidity_max,
        "air_quality_min": air_quality_min,
        "air_quality_max": air_quality_max,
    }
    # 0 is the service's "unbounded" value, so there is no need to send it.
    return {name: value for name, value in bounds.items() if value != 0}


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Sensor feed API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("readings")
def readings_command(
    ctx: typer.Context,
    temperature_min: float = typer.Option(0.0, help="Lower temperature bound (0 = none)."),
    temperature_max: float = typer.Option(0.0, help="Upper temperature bound (0 = none)."),
    humidity_min: float = typer.Option(0.0, help="Lower humidity bound (0 = none)."),
    humidity_max: float = typer.Option(0.0, help="Upper humidity bound (0 = none)."),
    air_quality_min: float = typer.Option(0.0, help="Lower AQI bound (0 = none)."),
    air_quality_max: float = typer.Option(0.0, help="Upper AQI bound (0 = none)."),
    sort_key: str = typer.Option(
        "timestamp",
        "--sort-key",
        help="sensor_id, timestamp, temperature, humidity, air_quality or none.",
    ),
    sort_direction: str = typer.Option("desc", "--sort-direction", help="asc or desc."),
    page: int = typer.Option(1, "--page", min=1, help="1-indexed page number."),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Readings per page."),
) -> None:
    """Show one page of filtered and sorted readings with statistics."""
    state = _get_state(ctx)
    params = _filter_params(
        temperature_min,
        temperature_max,
        humidity_min,
        humidity_max,
        air_quality_min,
        air_quality_max,
    )
    params.update({"sort_key": sort_key, "sort_direction": sort_direction, "page": page})
    if page_size is not None:
        params["page_size"] = page_size
    payload = state.client.get_readings(params)
    render_readings(payload)


@app.command("stats")
def stats_command(
    ctx: typer.Context,
    temperature_min: float = typer.Option(0.0, help="Lower temperature bound (0 = none)."),
    temperature_max: float = typer.Option(0.0, help="Upper temperature bound (0 = none)."),
    humidity_min: float = typer.Option(0.0, help="Lower humidity bound (0 = none)."),
    humidity_max: float = typer.Option(0.0, help="Upper humidity bound (0 = none)."),
    air_quality_min: float = typer.Option(0.0, help="Lower AQI bound (0 = none)."),
    air_quality_max: float = typer.Option(0.0, help="Upper AQI bound (0 = none)."),
) -> None:
    """Show statistics over every reading that matches the filters."""
    state = _get_state(ctx)
    params = _filter_params(
        temperature_min,
        temperature_max,
        humidity_min,
        humidity_max,
        air_quality_min,
        air_quality_max,
    )
    render_statistics(state.client.get_statistics(params))


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show connectivity and retention state of the store."""
    state = _get_state(ctx)
    render_status(state.client.get_status())


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    interval: float = typer.Option(
        DEFAULT_WATCH_INTERVAL,
        "--interval",
        min=0.1,
        help="Seconds between refreshes.",
    ),
    count: int = typer.Option(0, "--count", min=0, help="Number of refreshes (0 = until interrupted)."),
) -> None:
    """Print status and statistics on every refresh."""
    state = _get_state(ctx)
    iteration = 0
    try:
        while count == 0 or iteration < count:
            if iteration:
                time.sleep(interval)
                typer.echo()
            render_status(state.client.get_status())
            typer.echo()
            render_statistics(state.client.get_statistics({}))
            iteration += 1
    except KeyboardInterrupt:
        typer.echo()
        typer.echo("Stopped watching.")
