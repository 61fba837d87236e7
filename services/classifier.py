"""Per-sensor pollution classification."""

from __future__ import annotations

from typing import Optional

from models.records import (
    PollutionLevel,
    Reading,
    Sensor,
    SensorClassification,
    SensorType,
)
from services.thresholds import DEFAULT_THRESHOLDS, ThresholdTable


class SensorClassifier:
    """Maps readings onto pollution bands using an injected threshold table."""

    def __init__(self, thresholds: ThresholdTable = DEFAULT_THRESHOLDS) -> None:
        self.thresholds = thresholds

    def classify(self, sensor_type: SensorType, value: float) -> PollutionLevel:
        """Return the first band containing ``value``; never ``no-data``."""
        bands = self.thresholds.for_type(sensor_type)
        if bands.good.contains(value):
            return PollutionLevel.good
        if bands.moderate.contains(value):
            return PollutionLevel.moderate
        if bands.unhealthy.contains(value):
            return PollutionLevel.unhealthy
        return PollutionLevel.dangerous

    def classify_sensor(
        self, sensor: Sensor, reading: Optional[Reading] = None
    ) -> SensorClassification:
        """Classify a sensor, falling back to ``no-data`` when it cannot be read.

        ``reading`` overrides the reading embedded in ``sensor``.
        """
        current = reading if reading is not None else sensor.reading
        if not sensor.active or current is None:
            return SensorClassification(
                sensor_id=sensor.id,
                display_name=sensor.display_name,
                type=sensor.type,
                level=PollutionLevel.no_data,
                active=sensor.active,
            )

        return SensorClassification(
            sensor_id=sensor.id,
            display_name=sensor.display_name,
            type=sensor.type,
            level=self.classify(sensor.type, current.value),
            active=True,
            value=current.value,
            unit=current.unit,
            timestamp=current.timestamp,
        )
