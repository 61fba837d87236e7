from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the analyzer service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def analyze_zone(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._post("/zones/analysis", payload)

    def perform_operation(
        self, operation: str, zones: List[Dict[str, Any]]
    ) -> Optional[Dict[str, Any]]:
        return self._post("/zones/operations", {"operation": operation, "zones": zones})

    def record_reading(
        self, sensor_id: str, value: float, unit: Optional[str] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"sensorId": sensor_id, "value": value}
        if unit:
            payload["unit"] = unit
        return self._post("/readings", payload)

    def get_reading(self, sensor_id: str) -> Dict[str, Any]:
        try:
            response = self._client.get(f"/sensors/{sensor_id}/reading")
            if response.status_code == 404:
                raise typer.BadParameter(f"No reading recorded for sensor {sensor_id}.")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        try:
            response = self._client.post(path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: Any = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
