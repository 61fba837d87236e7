"""Rule-based pollution factors and recommendations."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from models.records import PollutionLevel, SensorClassification, SensorType


def format_value(value: float) -> str:
    """Render integral floats without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _co2(value: float) -> str:
    return f"High CO2 levels ({format_value(value)} PPM)"


def _air_quality(value: float) -> str:
    return f"Poor air quality ({format_value(value)} AQI)"


def _noise(value: float) -> str:
    return f"Excessive noise ({format_value(value)} dB)"


def _temperature(value: float) -> str:
    if value > 30:
        return f"High temperature ({format_value(value)}°C)"
    return f"Low temperature ({format_value(value)}°C)"


def _humidity(value: float) -> str:
    if value > 70:
        return f"High humidity ({format_value(value)}%)"
    return f"Low humidity ({format_value(value)}%)"


def _light(value: float) -> str:
    if value < 100:
        return f"Insufficient lighting ({format_value(value)} LUX)"
    return f"Excessive brightness ({format_value(value)} LUX)"


FACTOR_RULES: Dict[SensorType, Callable[[float], str]] = {
    SensorType.CO2: _co2,
    SensorType.AIR_QUALITY: _air_quality,
    SensorType.NOISE: _noise,
    SensorType.TEMPERATURE: _temperature,
    SensorType.HUMIDITY: _humidity,
    SensorType.LIGHT: _light,
}

REMEDIATIONS: Dict[SensorType, Tuple[str, ...]] = {
    SensorType.CO2: ("Improve ventilation in the area",),
    SensorType.AIR_QUALITY: (
        "Check for pollution sources nearby",
        "Consider air filtration systems",
    ),
    SensorType.NOISE: ("Implement noise reduction measures",),
    SensorType.TEMPERATURE: ("Adjust heating/cooling systems",),
    SensorType.HUMIDITY: ("Use dehumidifiers or humidifiers as needed",),
    SensorType.LIGHT: ("Adjust lighting systems for optimal conditions",),
}

BANNERS: Dict[PollutionLevel, Tuple[str, ...]] = {
    PollutionLevel.dangerous: (
        "Immediate evacuation recommended",
        "Contact emergency services if health symptoms occur",
    ),
    PollutionLevel.unhealthy: (
        "Limit outdoor activities",
        "Use protective equipment if necessary",
    ),
    PollutionLevel.moderate: (
        "Monitor conditions closely",
        "Consider reducing prolonged exposure",
    ),
    PollutionLevel.good: ("Safe environmental conditions",),
    PollutionLevel.no_data: ("Install more sensors for better monitoring",),
}


def _check_complete(name: str, table: Dict[SensorType, object]) -> None:
    missing = [sensor_type.value for sensor_type in SensorType if sensor_type not in table]
    if missing:
        raise ValueError(f"{name} is missing sensor types: {', '.join(missing)}")


_check_complete("FACTOR_RULES", FACTOR_RULES)
_check_complete("REMEDIATIONS", REMEDIATIONS)


class FactorRecommendationGenerator:
    """Turns problem sensors into human readable diagnostics."""

    def factors(self, classifications: Iterable[SensorClassification]) -> List[str]:
        """One factor per unhealthy or dangerous sensor, in input order."""
        factors: List[str] = []
        for classification in classifications:
            factor = self._factor(classification)
            if factor is not None:
                factors.append(factor)
        return factors

    def recommendations(
        self,
        classifications: Iterable[SensorClassification],
        overall_level: PollutionLevel,
    ) -> List[str]:
        recommendations: List[str] = list(BANNERS[overall_level])
        for classification in classifications:
            if classification.level.is_problem:
                recommendations.extend(REMEDIATIONS[classification.type])
        return list(dict.fromkeys(recommendations))

    @staticmethod
    def _factor(classification: SensorClassification) -> Optional[str]:
        if not classification.level.is_problem or classification.value is None:
            return None
        return FACTOR_RULES[classification.type](classification.value)
