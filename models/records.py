"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SensorType(str, Enum):
    """Kinds of environmental sensors a zone may contain."""

    TEMPERATURE = "TEMPERATURE"
    HUMIDITY = "HUMIDITY"
    AIR_QUALITY = "AIR_QUALITY"
    CO2 = "CO2"
    NOISE = "NOISE"
    LIGHT = "LIGHT"


class SensorUnit(str, Enum):
    CELSIUS = "CELSIUS"
    FAHRENHEIT = "FAHRENHEIT"
    RH_PERCENTAGE = "RH_PERCENTAGE"
    PPM = "PPM"
    LUX = "LUX"
    DB = "DB"
    AQI = "AQI"


class PollutionLevel(str, Enum):
    """Pollution bands. ``no_data`` is a sentinel and is not ordered."""

    good = "good"
    moderate = "moderate"
    unhealthy = "unhealthy"
    dangerous = "dangerous"
    no_data = "no-data"

    @property
    def is_problem(self) -> bool:
        return self in (PollutionLevel.unhealthy, PollutionLevel.dangerous)


class AlertLevel(str, Enum):
    none = "none"
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


@dataclass(slots=True)
class Reading:
    """The latest value reported by a sensor."""

    value: float
    unit: Optional[SensorUnit]
    timestamp: datetime


@dataclass(slots=True)
class Sensor:
    """Sensor metadata together with its latest reading, if any."""

    id: str
    display_name: str
    type: SensorType
    active: bool = True
    reading: Optional[Reading] = None


@dataclass(slots=True)
class SensorClassification:
    """Pollution level assigned to one sensor during a zone analysis."""

    sensor_id: str
    display_name: str
    type: SensorType
    level: PollutionLevel
    active: bool
    value: Optional[float] = None
    unit: Optional[SensorUnit] = None
    timestamp: Optional[datetime] = None

    @property
    def counts(self) -> bool:
        """Whether this classification takes part in aggregation."""
        return self.active and self.level is not PollutionLevel.no_data
