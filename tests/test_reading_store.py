"""Unit tests for the latest-reading datastore."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone

from datastore.readings import ReadingStore
from models.records import Reading, SensorUnit

EARLIER = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
LATER = EARLIER + timedelta(minutes=5)


def _reading(value: float, timestamp: datetime = EARLIER) -> Reading:
    return Reading(value=value, unit=SensorUnit.PPM, timestamp=timestamp)


def test_put_and_get_latest_reading() -> None:
    store = ReadingStore(name="latest_readings")

    store.put("co2-1", _reading(400))
    store.put("co2-1", _reading(900, LATER))

    fetched = store.get("co2-1")
    assert fetched is not None
    assert fetched.value == 900


def test_older_reading_does_not_replace_newer_one() -> None:
    store = ReadingStore(name="latest_readings")

    store.put("co2-1", _reading(900, LATER))
    store.put("co2-1", _reading(400, EARLIER))

    fetched = store.get("co2-1")
    assert fetched is not None
    assert fetched.value == 900


def test_get_returns_none_when_missing() -> None:
    store = ReadingStore(name="latest_readings")

    assert store.get("missing") is None
    assert asyncio.run(store.get_latest("missing")) is None


def test_scan_returns_a_snapshot() -> None:
    store = ReadingStore(name="latest_readings")
    store.put("a", _reading(1))
    store.put("b", _reading(2))

    snapshot = store.scan()
    snapshot.pop("a")

    assert sorted(store.scan()) == ["a", "b"]


def test_put_persists_to_disk_and_reloads(tmp_path) -> None:
    path = tmp_path / "readings.json"
    store = ReadingStore(name="latest_readings", persistence_path=path)

    store.put("co2-1", _reading(1500))

    payload = json.loads(path.read_text())
    assert payload["co2-1"]["value"] == 1500
    assert payload["co2-1"]["unit"] == "PPM"

    reloaded = ReadingStore(name="latest_readings", persistence_path=path)
    fetched = reloaded.get("co2-1")
    assert fetched is not None
    assert fetched.value == 1500
    assert fetched.unit is SensorUnit.PPM
    assert fetched.timestamp == EARLIER


def test_unreadable_file_is_ignored(tmp_path, caplog) -> None:
    path = tmp_path / "readings.json"
    path.write_text("{not json")

    with caplog.at_level(logging.WARNING, logger="datastore.readings"):
        store = ReadingStore(name="latest_readings", persistence_path=path)

    assert store.scan() == {}
    assert any("Ignoring unreadable" in record.getMessage() for record in caplog.records)
