"""Zone pollution analysis orchestration."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from functools import lru_cache
from typing import Dict, List, Optional, Protocol, Sequence

from app.schemas import SensorClassificationOut, ZonePollutionAnalysis
from models.records import (
    PollutionLevel,
    Reading,
    Sensor,
    SensorClassification,
)
from services.aggregator import ZoneAggregator
from services.alerts import AlertClassifier
from services.classifier import SensorClassifier
from services.factors import FactorRecommendationGenerator

logger = logging.getLogger(__name__)

LEVEL_COLORS: Dict[PollutionLevel, str] = {
    PollutionLevel.good: "#22c55e",
    PollutionLevel.moderate: "#f59e0b",
    PollutionLevel.unhealthy: "#ef4444",
    PollutionLevel.dangerous: "#7c2d12",
    PollutionLevel.no_data: "#6b7280",
}

LEVEL_ICONS: Dict[PollutionLevel, str] = {
    PollutionLevel.good: "solar:shield-check-bold",
    PollutionLevel.moderate: "solar:shield-warning-bold",
    PollutionLevel.unhealthy: "solar:shield-cross-bold",
    PollutionLevel.dangerous: "solar:danger-triangle-bold",
    PollutionLevel.no_data: "solar:question-circle-bold",
}


def level_to_color(level: PollutionLevel) -> str:
    return LEVEL_COLORS[level]


def level_to_icon(level: PollutionLevel) -> str:
    return LEVEL_ICONS[level]


class ReadingProvider(Protocol):
    async def get_latest(self, sensor_id: str) -> Optional[Reading]:
        ...


class PollutionAnalyzer:
    """Runs classification, aggregation, alerting and diagnostics for a zone."""

    def __init__(
        self,
        classifier: SensorClassifier,
        aggregator: ZoneAggregator,
        alerts: AlertClassifier,
        diagnostics: FactorRecommendationGenerator,
    ) -> None:
        self.classifier = classifier
        self.aggregator = aggregator
        self.alerts = alerts
        self.diagnostics = diagnostics

    def analyze(
        self, sensors: Sequence[Sensor], zone_id: Optional[str] = None
    ) -> ZonePollutionAnalysis:
        """Analyse sensors using the readings they carry."""
        classifications = [self.classifier.classify_sensor(sensor) for sensor in sensors]
        return self._assemble(classifications, zone_id)

    async def analyze_zone(
        self,
        sensors: Sequence[Sensor],
        provider: ReadingProvider,
        zone_id: Optional[str] = None,
    ) -> ZonePollutionAnalysis:
        """Fetch each active sensor's latest reading concurrently, then analyse.

        A sensor whose fetch fails is treated as having no reading.
        """
        readings = await asyncio.gather(
            *(self._fetch_reading(sensor, provider, zone_id) for sensor in sensors)
        )
        classifications = [
            self.classifier.classify_sensor(sensor, reading)
            for sensor, reading in zip(sensors, readings)
        ]
        return self._assemble(classifications, zone_id)

    def analyze_historical(
        self,
        sensors: Sequence[Sensor],
        at: datetime,
        zone_id: Optional[str] = None,
    ) -> ZonePollutionAnalysis:
        """Analyse a point-in-time snapshot of readings taken at ``at``."""
        analysis = self.analyze(sensors, zone_id)
        banner = f"Historical data from {at:%Y-%m-%d} at {at:%H:%M:%S}"
        analysis.recommendations = [banner, *analysis.recommendations]
        return analysis

    async def _fetch_reading(
        self,
        sensor: Sensor,
        provider: ReadingProvider,
        zone_id: Optional[str],
    ) -> Optional[Reading]:
        if not sensor.active:
            return None
        try:
            return await provider.get_latest(sensor.id)
        except Exception as exc:  # noqa: BLE001 - provider failures mean "no reading"
            logger.warning(
                "Reading fetch failed; treating sensor as having no reading",
                extra={"zone_id": zone_id, "sensor_id": sensor.id, "reason": str(exc)},
            )
            return None

    def _assemble(
        self,
        classifications: List[SensorClassification],
        zone_id: Optional[str],
    ) -> ZonePollutionAnalysis:
        summary = self.aggregator.aggregate(classifications)
        alert_level = self.alerts.alert_level(summary.risk_score, summary.overall_level)

        if summary.overall_level is PollutionLevel.no_data:
            logger.info(
                "Analysis incomplete: no active sensor reported a reading",
                extra={"zone_id": zone_id, "sensor_count": summary.total_count},
            )
        else:
            logger.debug(
                "Zone analysed",
                extra={
                    "zone_id": zone_id,
                    "sensor_count": summary.total_count,
                    "overall_level": summary.overall_level,
                    "risk_score": summary.risk_score,
                    "alert_level": alert_level,
                },
            )

        return ZonePollutionAnalysis(
            overall_level=summary.overall_level,
            risk_score=summary.risk_score,
            alert_level=alert_level,
            factors=self.diagnostics.factors(classifications),
            recommendations=self.diagnostics.recommendations(
                classifications, summary.overall_level
            ),
            sensors=[SensorClassificationOut.from_domain(item) for item in classifications],
        )


@lru_cache
def build_default_analyzer() -> PollutionAnalyzer:
    """Factory that wires the analyzer with the default tables."""
    return PollutionAnalyzer(
        classifier=SensorClassifier(),
        aggregator=ZoneAggregator(),
        alerts=AlertClassifier(),
        diagnostics=FactorRecommendationGenerator(),
    )


class OverlayReadingProvider:
    """Serves caller-supplied readings first and defers to ``fallback`` otherwise."""

    def __init__(self, readings: Dict[str, Reading], fallback: ReadingProvider) -> None:
        self._readings = dict(readings)
        self._fallback = fallback

    async def get_latest(self, sensor_id: str) -> Optional[Reading]:
        reading = self._readings.get(sensor_id)
        if reading is not None:
            return reading
        return await self._fallback.get_latest(sensor_id)
