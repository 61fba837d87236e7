"""Alert feed and fleet statistics over analysed zones."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from app.schemas import MonitorStats, ZoneAlert, ZoneAnalysisResponse
from models.records import AlertLevel, PollutionLevel
from services.aggregator import round_half_up

_ALERT_TYPES = {
    PollutionLevel.dangerous: "Critical Pollution",
    PollutionLevel.unhealthy: "Unhealthy Air Quality",
    PollutionLevel.moderate: "Moderate Pollution",
}

_PRIORITY_LEVELS = (AlertLevel.critical, AlertLevel.high)


def _needs_alert(zone: ZoneAnalysisResponse) -> bool:
    if zone.overall_level is PollutionLevel.no_data:
        return False
    return zone.alert_level in _PRIORITY_LEVELS or zone.overall_level is PollutionLevel.dangerous


def _active_count(zone: ZoneAnalysisResponse) -> int:
    return sum(1 for sensor in zone.sensors if sensor.active)


class ZoneMonitor:
    """Turns zone analyses into alerts and summary statistics."""

    def build_alerts(
        self, zones: Iterable[ZoneAnalysisResponse], now: Optional[datetime] = None
    ) -> List[ZoneAlert]:
        timestamp = now or datetime.now(timezone.utc)
        alerts: List[ZoneAlert] = []
        for zone in zones:
            if not _needs_alert(zone):
                continue
            alerts.append(
                ZoneAlert(
                    id=f"alert-{zone.zone_id}-{int(timestamp.timestamp() * 1000)}",
                    zone_id=zone.zone_id,
                    zone_name=zone.zone_name,
                    type=_ALERT_TYPES.get(zone.overall_level, "Environmental Condition"),
                    level=zone.overall_level,
                    alert_level=zone.alert_level,
                    risk_score=zone.risk_score,
                    factors=list(zone.factors),
                    recommendations=list(zone.recommendations),
                    sensor_count=len(zone.sensors),
                    active_sensor_count=_active_count(zone),
                    timestamp=timestamp,
                    persistent=zone.alert_level in _PRIORITY_LEVELS,
                )
            )
        return alerts

    def summarize(self, zones: Sequence[ZoneAnalysisResponse]) -> MonitorStats:
        total_sensors = sum(len(zone.sensors) for zone in zones)
        average = 0
        if total_sensors > 0 and zones:
            average = round_half_up(sum(zone.risk_score for zone in zones) / len(zones))

        def with_alert(level: AlertLevel) -> int:
            return sum(1 for zone in zones if zone.alert_level is level)

        return MonitorStats(
            total_zones=len(zones),
            zones_with_alerts=sum(1 for zone in zones if zone.alert_level is not AlertLevel.none),
            critical_alerts=with_alert(AlertLevel.critical),
            high_alerts=with_alert(AlertLevel.high),
            medium_alerts=with_alert(AlertLevel.medium),
            low_alerts=with_alert(AlertLevel.low),
            total_sensors=total_sensors,
            active_sensors=sum(_active_count(zone) for zone in zones),
            average_risk_score=average,
        )

    @staticmethod
    def by_level(alerts: Iterable[ZoneAlert], level: AlertLevel) -> List[ZoneAlert]:
        return [alert for alert in alerts if alert.alert_level is level]

    @staticmethod
    def high_priority(alerts: Iterable[ZoneAlert]) -> List[ZoneAlert]:
        return [alert for alert in alerts if alert.alert_level in _PRIORITY_LEVELS]
