from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_analysis, render_operation, render_reading


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the zone pollution analyzer service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Analyzer API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
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


@app.command("analyze")
def analyze_command(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="JSON file describing the zone and its sensors."
    ),
    at: Optional[datetime] = typer.Option(
        None,
        "--at",
        help="Treat the supplied readings as a historical snapshot taken at this time.",
    ),
) -> None:
    """Analyse pollution levels of one zone."""
    state = _get_state(ctx)
    payload = _load_json(file)
    if not isinstance(payload, dict):
        raise typer.BadParameter("Zone file must contain a JSON object.")
    if at is not None:
        payload["at"] = at.isoformat()
    render_analysis(state.client.analyze_zone(payload))


@app.command("operate")
def operate_command(
    ctx: typer.Context,
    operation: str = typer.Argument(..., help="union, intersection, buffer-1km or contains."),
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="JSON file with a list of zones."
    ),
) -> None:
    """Run a geometry operation over zones."""
    state = _get_state(ctx)
    payload = _load_json(file)
    if isinstance(payload, dict):
        payload = payload.get("zones", [])
    if not isinstance(payload, list):
        raise typer.BadParameter("Zones file must contain a list of zones.")
    zones: List[Dict[str, Any]] = payload
    result = state.client.perform_operation(operation, zones)
    render_operation(operation, result)


@app.command("record")
def record_command(
    ctx: typer.Context,
    sensor_id: str = typer.Argument(..., help="Sensor identifier."),
    value: float = typer.Argument(..., help="Measured value."),
    unit: Optional[str] = typer.Option(None, "--unit", "-u", help="Unit such as PPM or CELSIUS."),
) -> None:
    """Record the latest reading of a sensor."""
    state = _get_state(ctx)
    payload = state.client.record_reading(sensor_id, value, unit)
    typer.secho(f"Reading recorded. sensor_id={sensor_id}", fg=typer.colors.GREEN)
    render_reading(sensor_id, payload)


@app.command("reading")
def reading_command(
    ctx: typer.Context,
    sensor_id: str = typer.Argument(..., help="Sensor identifier."),
) -> None:
    """Show the latest stored reading of a sensor."""
    state = _get_state(ctx)
    render_reading(sensor_id, state.client.get_reading(sensor_id))
