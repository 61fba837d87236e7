from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
from typer.testing import CliRunner

from cli.app import app
from cli.config import load_config


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.analysis_payloads: List[Dict[str, Any]] = []
        self.operations: List[tuple[str, List[Dict[str, Any]]]] = []
        self.recorded: List[tuple[str, float, Optional[str]]] = []
        self.operation_result: Optional[Dict[str, Any]] = {
            "id": "union-1",
            "name": "Combined Zone (2 areas)",
            "type": "polygon",
            "geometry": {"type": "Polygon", "coordinates": []},
            "color": "#ff4444",
            "environmentalAnalysis": {
                "totalAreaKm2": 30.7712,
                "affectedPopulation": 15386,
                "riskLevel": "critical",
                "complianceStatus": "violation",
                "recommendations": ["Emergency response required"],
            },
        }
        self.closed = False

    def analyze_zone(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.analysis_payloads.append(payload)
        return {
            "zoneId": payload["zoneId"],
            "zoneName": "Harbour",
            "overallLevel": "dangerous",
            "riskScore": 60,
            "alertLevel": "medium",
            "factors": ["High CO2 levels (6000 PPM)"],
            "recommendations": ["Immediate evacuation recommended"],
            "sensors": [
                {"sensorId": "co2-1", "type": "CO2", "level": "dangerous", "value": 6000},
                {"sensorId": "n-1", "type": "NOISE", "level": "no-data", "value": None},
            ],
        }

    def perform_operation(
        self, operation: str, zones: List[Dict[str, Any]]
    ) -> Optional[Dict[str, Any]]:
        self.operations.append((operation, zones))
        return self.operation_result

    def record_reading(
        self, sensor_id: str, value: float, unit: Optional[str] = None
    ) -> Dict[str, Any]:
        self.recorded.append((sensor_id, value, unit))
        return {"value": value, "unit": unit, "timestamp": "2024-01-01T00:00:00Z"}

    def get_reading(self, sensor_id: str) -> Dict[str, Any]:
        return {"value": 42.0, "unit": "DB", "timestamp": "2024-01-01T00:00:00Z"}

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    client = StubClient(config=None)

    def factory(config):
        client.config = config
        return client

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return client


def test_analyze_command(stub: StubClient, runner: CliRunner, tmp_path) -> None:
    zone_file = tmp_path / "zone.json"
    zone_file.write_text(json.dumps({"zoneId": "z1", "sensors": []}))

    result = runner.invoke(app, ["analyze", str(zone_file)])

    assert result.exit_code == 0
    assert "Zone Analysis" in result.stdout
    assert "overall_level: dangerous" in result.stdout
    assert "co2-1 [CO2]: dangerous (6000)" in result.stdout
    assert "n-1 [NOISE]: no-data (no reading)" in result.stdout
    assert "High CO2 levels (6000 PPM)" in result.stdout
    assert stub.analysis_payloads == [{"zoneId": "z1", "sensors": []}]
    assert stub.closed is True


def test_analyze_command_with_snapshot_time(
    stub: StubClient, runner: CliRunner, tmp_path
) -> None:
    zone_file = tmp_path / "zone.json"
    zone_file.write_text(json.dumps({"zoneId": "z1", "sensors": []}))

    result = runner.invoke(app, ["analyze", str(zone_file), "--at", "2024-02-03T04:05:06"])

    assert result.exit_code == 0
    assert stub.analysis_payloads[0]["at"] == "2024-02-03T04:05:06"


def test_analyze_rejects_invalid_json(stub: StubClient, runner: CliRunner, tmp_path) -> None:
    zone_file = tmp_path / "zone.json"
    zone_file.write_text("{broken")

    result = runner.invoke(app, ["analyze", str(zone_file)])

    assert result.exit_code != 0
    assert not stub.analysis_payloads


def test_operate_command(stub: StubClient, runner: CliRunner, tmp_path) -> None:
    zones = [{"id": "a"}, {"id": "b"}]
    zones_file = tmp_path / "zones.json"
    zones_file.write_text(json.dumps({"zones": zones}))

    result = runner.invoke(app, ["operate", "union", str(zones_file)])

    assert result.exit_code == 0
    assert "Combined Zone (2 areas)" in result.stdout
    assert "total_area_km2: 30.771" in result.stdout
    assert "Emergency response required" in result.stdout
    assert stub.operations == [("union", zones)]


def test_operate_command_without_result(
    stub: StubClient, runner: CliRunner, tmp_path
) -> None:
    stub.operation_result = None
    zones_file = tmp_path / "zones.json"
    zones_file.write_text(json.dumps([{"id": "a"}, {"id": "b"}]))

    result = runner.invoke(app, ["operate", "intersection", str(zones_file)])

    assert result.exit_code == 0
    assert "Operation 'intersection' produced no result." in result.stdout


def test_record_and_reading_commands(stub: StubClient, runner: CliRunner) -> None:
    recorded = runner.invoke(app, ["record", "co2-1", "1500", "--unit", "PPM"])
    fetched = runner.invoke(app, ["reading", "noise-1"])

    assert recorded.exit_code == 0
    assert "Reading recorded. sensor_id=co2-1" in recorded.stdout
    assert stub.recorded == [("co2-1", 1500.0, "PPM")]
    assert fetched.exit_code == 0
    assert "sensor_id: noise-1" in fetched.stdout
    assert "unit: DB" in fetched.stdout


def test_base_url_option_reaches_client(stub: StubClient, runner: CliRunner) -> None:
    result = runner.invoke(
        app, ["--base-url", "http://analyzer:9000/", "--timeout", "5", "reading", "x"]
    )

    assert result.exit_code == 0
    assert stub.config.base_url == "http://analyzer:9000"
    assert stub.config.timeout == 5.0


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "http://env-host:1234")
    monkeypatch.setenv("CLI_TIMEOUT", "not-a-number")

    config = load_config()

    assert config.base_url == "http://env-host:1234"
    assert config.timeout == 30.0
