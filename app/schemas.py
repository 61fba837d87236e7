"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.records import (
    AlertLevel,
    PollutionLevel,
    Reading,
    Sensor,
    SensorClassification,
    SensorType,
    SensorUnit,
)


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ZoneShape(str, Enum):
    circle = "circle"
    rectangle = "rectangle"
    polygon = "polygon"


class RiskLevel(str, Enum):
    low = "low"
    moderate = "moderate"
    high = "high"
    critical = "critical"


class ComplianceStatus(str, Enum):
    compliant = "compliant"
    warning = "warning"
    violation = "violation"


class ReadingPayload(CamelModel):
    """A single sensor reading as exchanged over HTTP."""

    value: float
    unit: Optional[SensorUnit] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_domain(self) -> Reading:
        timestamp = self.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return Reading(value=self.value, unit=self.unit, timestamp=timestamp)

    @classmethod
    def from_domain(cls, reading: Reading) -> "ReadingPayload":
        return cls(value=reading.value, unit=reading.unit, timestamp=reading.timestamp)


class RecordReadingRequest(ReadingPayload):
    sensor_id: str = Field(..., min_length=1)


class SensorPayload(CamelModel):
    """Sensor metadata, optionally with the reading to analyse."""

    id: str = Field(..., min_length=1)
    display_name: Optional[str] = None
    type: SensorType
    active: bool = True
    reading: Optional[ReadingPayload] = None

    def to_domain(self) -> Sensor:
        return Sensor(
            id=self.id,
            display_name=self.display_name or f"Sensor {self.id}",
            type=self.type,
            active=self.active,
            reading=self.reading.to_domain() if self.reading else None,
        )


class SensorClassificationOut(CamelModel):
    sensor_id: str
    display_name: str
    type: SensorType
    level: PollutionLevel
    active: bool
    value: Optional[float] = None
    unit: Optional[SensorUnit] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_domain(cls, item: SensorClassification) -> "SensorClassificationOut":
        return cls(
            sensor_id=item.sensor_id,
            display_name=item.display_name,
            type=item.type,
            level=item.level,
            active=item.active,
            value=item.value,
            unit=item.unit,
            timestamp=item.timestamp,
        )


class ZonePollutionAnalysis(CamelModel):
    """Sensor based pollution assessment of one zone."""

    overall_level: PollutionLevel
    risk_score: int = Field(..., ge=0, le=100)
    alert_level: AlertLevel
    factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    sensors: List[SensorClassificationOut] = Field(default_factory=list)


class ZoneAnalysisRequest(CamelModel):
    zone_id: str = Field(..., min_length=1)
    zone_name: Optional[str] = None
    sensors: List[SensorPayload] = Field(default_factory=list)
    at: Optional[datetime] = Field(
        default=None,
        description="Analyse the supplied readings as a historical snapshot taken at this time.",
    )


class ZoneAnalysisResponse(ZonePollutionAnalysis):
    zone_id: str
    zone_name: str


class Zone(CamelModel):
    """A named monitoring area. Circles are a GeoJSON Point plus ``radius`` in metres."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: ZoneShape = ZoneShape.polygon
    geometry: Dict[str, Any]
    color: str = "#10b981"
    radius: Optional[float] = Field(default=None, gt=0)


class EnvironmentalImpact(CamelModel):
    """Area and compliance summary attached to a geometry operation result."""

    total_area_km2: float = Field(..., ge=0)
    affected_population: int = Field(..., ge=0)
    risk_level: RiskLevel
    compliance_status: ComplianceStatus
    recommendations: List[str] = Field(default_factory=list)


class ZoneOperationResult(CamelModel):
    id: str
    name: str
    type: ZoneShape
    geometry: Dict[str, Any]
    color: str
    radius: Optional[float] = None
    environmental_analysis: EnvironmentalImpact
    contained_count: Optional[int] = None
    compliant: Optional[bool] = None


class ZoneOperationRequest(CamelModel):
    operation: str = Field(..., description="union, intersection, buffer-1km or contains.")
    zones: List[Zone] = Field(default_factory=list)


class ZoneAlert(CamelModel):
    id: str
    zone_id: str
    zone_name: str
    type: str
    level: PollutionLevel
    alert_level: AlertLevel
    risk_score: int
    factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    sensor_count: int = 0
    active_sensor_count: int = 0
    timestamp: datetime
    persistent: bool = False


class MonitorStats(CamelModel):
    total_zones: int = 0
    zones_with_alerts: int = 0
    critical_alerts: int = 0
    high_alerts: int = 0
    medium_alerts: int = 0
    low_alerts: int = 0
    total_sensors: int = 0
    active_sensors: int = 0
    average_risk_score: int = 0


class MonitorRequest(CamelModel):
    zones: List[ZoneAnalysisRequest] = Field(default_factory=list)


class MonitorResponse(CamelModel):
    zones: List[ZoneAnalysisResponse] = Field(default_factory=list)
    alerts: List[ZoneAlert] = Field(default_factory=list)
    stats: MonitorStats


class LevelPresentation(CamelModel):
    level: PollutionLevel
    color: str
    icon: str
