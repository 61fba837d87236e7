from __future__ import annotations
import json
import logging
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

from app.schemas import ReadingPayload
from models.records import Reading
from settings import get_settings

logger = logging.getLogger(__name__)


class ReadingStore:
    """Latest reading per sensor, optionally mirrored to a JSON file.

    Implements the reading provider protocol used by the pollution analyzer.
    """

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self._readings: Dict[str, Reading] = {}
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def put(self, sensor_id: str, reading: Reading) -> None:
        """Record ``reading`` unless a newer one is already stored."""
        with self._lock:
            current = self._readings.get(sensor_id)
            if current is not None and current.timestamp > reading.timestamp:
                return
            self._readings[sensor_id] = reading
            self._persist()

    def get(self, sensor_id: str) -> Optional[Reading]:
        with self._lock:
            return self._readings.get(sensor_id)

    def scan(self) -> Dict[str, Reading]:
        with self._lock:
            return dict(self._readings)

    async def get_latest(self, sensor_id: str) -> Optional[Reading]:
        return self.get(sensor_id)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = {
            sensor_id: ReadingPayload.from_domain(reading).model_dump(mode="json")
            for sensor_id, reading in self._readings.items()
        }
        self.persistence_path.write_text(json.dumps(payload, indent=2, sort_keys=True))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(
                "Ignoring unreadable reading store file",
                extra={"reason": str(exc)},
            )
            data = {}

        for sensor_id, payload in data.items():
            self._readings[sensor_id] = ReadingPayload.model_validate(payload).to_domain()


@lru_cache
def build_default_store(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> ReadingStore:
    settings = get_settings()
    store_name = settings.reading_store_name if name is None else name
    store_path = settings.reading_store_path if path is None else path
    persistence = Path(store_path) if store_path else None
    return ReadingStore(name=store_name, persistence_path=persistence)
