"""Aggregation logic for classified zone sensors."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from models.records import PollutionLevel, SensorClassification, SensorType
from services.thresholds import DEFAULT_WEIGHTS, RiskWeights


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class ZoneSummary:
    """Computed level and risk score for one zone's sensors."""

    total_count: int = 0
    active_count: int = 0
    level_counts: Dict[PollutionLevel, int] = field(default_factory=dict)
    type_scores: Dict[SensorType, int] = field(default_factory=dict)
    type_weights: Dict[SensorType, float] = field(default_factory=dict)
    diversity_multiplier: float = 1.0
    risk_score: int = 0
    overall_level: PollutionLevel = PollutionLevel.no_data


class ZoneAggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def __init__(self, weights: RiskWeights = DEFAULT_WEIGHTS) -> None:
        self.weights = weights

    def aggregate(self, classifications: Iterable[SensorClassification]) -> ZoneSummary:
        summary = ZoneSummary()
        active: List[SensorClassification] = []

        for classification in classifications:
            summary.total_count += 1
            if classification.counts:
                active.append(classification)
                summary.level_counts[classification.level] = (
                    summary.level_counts.get(classification.level, 0) + 1
                )

        summary.active_count = len(active)
        if not active:
            return summary

        summary.overall_level = self.overall_level(summary.level_counts, len(active))
        self._score(active, summary)
        return summary

    def overall_level(
        self, level_counts: Dict[PollutionLevel, int], total: int
    ) -> PollutionLevel:
        if total <= 0:
            return PollutionLevel.no_data

        def pct(level: PollutionLevel) -> float:
            return level_counts.get(level, 0) / total * 100

        dangerous_pct = pct(PollutionLevel.dangerous)
        unhealthy_pct = pct(PollutionLevel.unhealthy)
        moderate_pct = pct(PollutionLevel.moderate)
        good_pct = pct(PollutionLevel.good)

        problem_pct = dangerous_pct + unhealthy_pct
        concern_pct = problem_pct + moderate_pct

        if dangerous_pct >= 50 or problem_pct >= 80:
            return PollutionLevel.dangerous
        if dangerous_pct >= 25 or problem_pct >= 50:
            return PollutionLevel.unhealthy
        if dangerous_pct > 0 or unhealthy_pct >= 25 or concern_pct >= 50:
            return PollutionLevel.moderate
        if good_pct >= 70:
            return PollutionLevel.good
        return PollutionLevel.moderate

    def _score(self, active: List[SensorClassification], summary: ZoneSummary) -> None:
        by_type: Dict[SensorType, List[SensorClassification]] = {}
        for classification in active:
            by_type.setdefault(classification.type, []).append(classification)

        base_scores = self.weights.base_scores
        weighted_score = 0.0
        total_weight = 0.0
        problem_types = 0

        for sensor_type, members in by_type.items():
            # strict comparison keeps the first maximum found
            type_score = 0
            for member in members:
                score = base_scores[member.level]
                if score > type_score:
                    type_score = score

            weight = self.weights.type_weights[sensor_type]
            problem_count = sum(1 for member in members if member.level.is_problem)
            if problem_count > 1:
                weight *= self.weights.repeated_problem_boost
            if problem_count:
                problem_types += 1

            summary.type_scores[sensor_type] = type_score
            summary.type_weights[sensor_type] = weight
            weighted_score += type_score * weight
            total_weight += weight

        average = weighted_score / total_weight if total_weight > 0 else 0.0

        type_count = len(by_type)
        multiplier = 1.0
        if type_count >= 4:
            if problem_types < type_count * 0.5:
                multiplier = 0.9
        elif type_count <= 2:
            multiplier = 1.1

        summary.diversity_multiplier = multiplier
        summary.risk_score = max(0, min(100, round_half_up(average * multiplier)))
