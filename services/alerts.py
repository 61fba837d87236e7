"""Alert level lookup for zone analyses."""

from __future__ import annotations

from models.records import AlertLevel, PollutionLevel

_SCORE_BANDS = (
    (90, AlertLevel.critical),
    (80, AlertLevel.high),
    (60, AlertLevel.medium),
    (35, AlertLevel.low),
)

_LOW_SCORE_FALLBACK = {
    PollutionLevel.dangerous: AlertLevel.high,
    PollutionLevel.unhealthy: AlertLevel.medium,
    PollutionLevel.moderate: AlertLevel.low,
    PollutionLevel.good: AlertLevel.none,
}


class AlertClassifier:
    """Score bands first, then the overall level decides low-score zones."""

    def alert_level(self, risk_score: int, overall_level: PollutionLevel) -> AlertLevel:
        for threshold, level in _SCORE_BANDS:
            if risk_score >= threshold:
                return level
        return _LOW_SCORE_FALLBACK.get(overall_level, AlertLevel.none)
