"""Static band and weight tables used by the pollution engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from models.records import PollutionLevel, SensorType


@dataclass(frozen=True)
class Band:
    """Inclusive value range."""

    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class SensorBands:
    """Nested bands for one sensor type; anything outside ``unhealthy`` is dangerous."""

    good: Band
    moderate: Band
    unhealthy: Band


def _require_all_types(name: str, table: Mapping[SensorType, object]) -> None:
    missing = [sensor_type.value for sensor_type in SensorType if sensor_type not in table]
    if missing:
        raise ValueError(f"{name} is missing sensor types: {', '.join(missing)}")


@dataclass(frozen=True)
class ThresholdTable:
    """Per-sensor-type band definitions.

    Construction fails when a sensor type has no entry, so an incomplete
    table is caught where it is configured rather than during an analysis.
    """

    bands: Mapping[SensorType, SensorBands]

    def __post_init__(self) -> None:
        _require_all_types("ThresholdTable", self.bands)
        object.__setattr__(self, "bands", MappingProxyType(dict(self.bands)))

    def for_type(self, sensor_type: SensorType) -> SensorBands:
        return self.bands[sensor_type]


@dataclass(frozen=True)
class RiskWeights:
    """Scores and weights feeding the zone risk score."""

    type_weights: Mapping[SensorType, float]
    base_scores: Mapping[PollutionLevel, int] = field(
        default_factory=lambda: {
            PollutionLevel.good: 5,
            PollutionLevel.moderate: 35,
            PollutionLevel.unhealthy: 70,
            PollutionLevel.dangerous: 95,
        }
    )
    repeated_problem_boost: float = 1.2

    def __post_init__(self) -> None:
        _require_all_types("RiskWeights", self.type_weights)
        missing = [
            level.value
            for level in PollutionLevel
            if level is not PollutionLevel.no_data and level not in self.base_scores
        ]
        if missing:
            raise ValueError(f"RiskWeights is missing base scores: {', '.join(missing)}")
        object.__setattr__(self, "type_weights", MappingProxyType(dict(self.type_weights)))
        object.__setattr__(self, "base_scores", MappingProxyType(dict(self.base_scores)))


DEFAULT_THRESHOLDS = ThresholdTable(
    bands={
        SensorType.TEMPERATURE: SensorBands(
            good=Band(18, 26), moderate=Band(15, 30), unhealthy=Band(10, 35)
        ),
        SensorType.HUMIDITY: SensorBands(
            good=Band(40, 60), moderate=Band(30, 70), unhealthy=Band(20, 80)
        ),
        SensorType.AIR_QUALITY: SensorBands(
            good=Band(0, 50), moderate=Band(51, 100), unhealthy=Band(101, 200)
        ),
        SensorType.CO2: SensorBands(
            good=Band(350, 1000), moderate=Band(1001, 2000), unhealthy=Band(2001, 5000)
        ),
        SensorType.NOISE: SensorBands(
            good=Band(0, 55), moderate=Band(56, 70), unhealthy=Band(71, 85)
        ),
        SensorType.LIGHT: SensorBands(
            good=Band(200, 1000), moderate=Band(100, 2000), unhealthy=Band(50, 5000)
        ),
    }
)

DEFAULT_WEIGHTS = RiskWeights(
    type_weights={
        SensorType.AIR_QUALITY: 1.5,
        SensorType.CO2: 1.5,
        SensorType.NOISE: 1.2,
        SensorType.TEMPERATURE: 1.2,
        SensorType.HUMIDITY: 1.0,
        SensorType.LIGHT: 1.0,
    }
)
