from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer

_ALERT_COLORS = {
    "critical": typer.colors.RED,
    "high": typer.colors.RED,
    "medium": typer.colors.YELLOW,
    "low": typer.colors.CYAN,
    "none": typer.colors.GREEN,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def echo_list(title: str, items: Iterable[str], empty: str) -> None:
    typer.echo()
    echo_heading(title)
    items = list(items)
    if not items:
        typer.echo(empty)
        return
    for item in items:
        typer.echo(f"  - {item}")


def render_analysis(payload: Dict[str, Any]) -> None:
    echo_heading("Zone Analysis")
    echo_key_values(
        [
            ("zone", f"{payload.get('zoneName')} ({payload.get('zoneId')})"),
            ("overall_level", payload.get("overallLevel")),
            ("risk_score", payload.get("riskScore")),
        ]
    )
    alert_level = payload.get("alertLevel")
    typer.secho(
        f"alert_level: {alert_level}",
        fg=_ALERT_COLORS.get(str(alert_level), typer.colors.WHITE),
    )

    sensors = payload.get("sensors") or []
    typer.echo()
    echo_heading("Sensors")
    if sensors:
        for sensor in sensors:
            value = sensor.get("value")
            reading = "no reading" if value is None else value
            typer.echo(
                f"  - {sensor.get('sensorId')} [{sensor.get('type')}]: "
                f"{sensor.get('level')} ({reading})"
            )
    else:
        typer.echo("No sensors in zone.")

    echo_list("Factors", payload.get("factors") or [], "No pollution factors identified.")
    echo_list("Recommendations", payload.get("recommendations") or [], "No recommendations.")


def render_operation(operation: str, payload: Optional[Dict[str, Any]]) -> None:
    echo_heading("Zone Operation")
    if payload is None:
        typer.echo(f"Operation {operation!r} produced no result.")
        return

    echo_key_values(
        [
            ("id", payload.get("id")),
            ("name", payload.get("name")),
            ("type", payload.get("type")),
            ("color", payload.get("color")),
        ]
    )
    if payload.get("compliant") is not None:
        echo_key_values(
            [
                ("contained_count", payload.get("containedCount")),
                ("compliant", payload.get("compliant")),
            ]
        )

    impact = payload.get("environmentalAnalysis") or {}
    typer.echo()
    echo_heading("Environmental Impact")
    echo_key_values(
        [
            ("total_area_km2", round(float(impact.get("totalAreaKm2") or 0.0), 3)),
            ("affected_population", impact.get("affectedPopulation")),
            ("risk_level", impact.get("riskLevel")),
            ("compliance_status", impact.get("complianceStatus")),
        ]
    )
    echo_list("Recommendations", impact.get("recommendations") or [], "No recommendations.")


def render_reading(sensor_id: str, payload: Dict[str, Any]) -> None:
    echo_heading("Latest Reading")
    echo_key_values(
        [
            ("sensor_id", sensor_id),
            ("value", payload.get("value")),
            ("unit", payload.get("unit")),
            ("timestamp", payload.get("timestamp")),
        ]
    )
