"""Set operations over monitoring zones with an environmental impact summary."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from pyproj.exceptions import ProjError
from shapely.errors import GEOSException

from app.schemas import (
    ComplianceStatus,
    EnvironmentalImpact,
    RiskLevel,
    Zone,
    ZoneOperationResult,
    ZoneShape,
)
from services.aggregator import round_half_up
from services.geometry import GeometryBackend, UnsupportedGeometryError, build_default_backend

logger = logging.getLogger(__name__)

POPULATION_DENSITY_PER_KM2 = 500
BUFFER_DISTANCE_KM = 1.0

COMPLIANT_COLOR = "#00cc66"
VIOLATION_COLOR = "#ff4444"


class ZoneOperation(str, Enum):
    union = "union"
    intersection = "intersection"
    buffer_1km = "buffer-1km"
    contains = "contains"


MIN_ZONES: Dict[ZoneOperation, int] = {
    ZoneOperation.union: 2,
    ZoneOperation.intersection: 2,
    ZoneOperation.buffer_1km: 1,
    ZoneOperation.contains: 2,
}

RESULT_COLORS: Dict[ZoneOperation, str] = {
    ZoneOperation.union: "#ff4444",
    ZoneOperation.intersection: "#ff8800",
    ZoneOperation.buffer_1km: "#0088ff",
}

_GEOMETRY_FAULTS = (UnsupportedGeometryError, GEOSException, ProjError, ValueError, TypeError)


def estimate_population(area_km2: float) -> int:
    return round_half_up(area_km2 * POPULATION_DENSITY_PER_KM2)


def area_risk_level(area_km2: float) -> RiskLevel:
    if area_km2 > 10:
        return RiskLevel.high
    if area_km2 > 2:
        return RiskLevel.moderate
    return RiskLevel.low


def derived_impact(operation: ZoneOperation, area_km2: float) -> EnvironmentalImpact:
    """Impact summary for union, intersection and buffer results."""
    risk_level = area_risk_level(area_km2)
    compliance = ComplianceStatus.compliant
    recommendations: List[str] = []

    if operation is ZoneOperation.union:
        if area_km2 > 25:
            risk_level = RiskLevel.critical
            compliance = ComplianceStatus.violation
            recommendations.append("Emergency response required")
        elif area_km2 > 10:
            recommendations.append("Monitor combined impact")
        else:
            recommendations.append("Combined area acceptable")
    elif operation is ZoneOperation.intersection:
        if area_km2 > 5:
            recommendations.append("High population exposure")
        else:
            recommendations.append("Limited overlap")
    elif operation is ZoneOperation.buffer_1km:
        recommendations.append("Safety zone established")

    return EnvironmentalImpact(
        total_area_km2=area_km2,
        affected_population=estimate_population(area_km2),
        risk_level=risk_level,
        compliance_status=compliance,
        recommendations=recommendations,
    )


def containment_impact(area_km2: float, compliant: bool) -> EnvironmentalImpact:
    return EnvironmentalImpact(
        total_area_km2=area_km2,
        affected_population=estimate_population(area_km2),
        risk_level=RiskLevel.low if compliant else RiskLevel.high,
        compliance_status=ComplianceStatus.compliant if compliant else ComplianceStatus.violation,
        recommendations=(
            ["Full compliance achieved"] if compliant else ["Expand protection zone"]
        ),
    )


class GeometricZoneOperator:
    """Derives zones from existing ones.

    Every expected failure (unknown operation, too few zones, unsupported or
    malformed geometry, empty intersection) yields ``None``.
    """

    def __init__(self, backend: GeometryBackend) -> None:
        self.backend = backend
        self._handlers: Dict[
            ZoneOperation, Callable[[Sequence[Zone]], Optional[ZoneOperationResult]]
        ] = {
            ZoneOperation.union: self._union,
            ZoneOperation.intersection: self._intersection,
            ZoneOperation.buffer_1km: self._buffer,
            ZoneOperation.contains: self._contains,
        }

    def perform_operation(
        self, operation: str, zones: Sequence[Zone]
    ) -> Optional[ZoneOperationResult]:
        context = {"operation": operation, "zone_count": len(zones)}
        try:
            requested = ZoneOperation(operation)
        except ValueError:
            logger.info("Unsupported zone operation", extra=context)
            return None

        if len(zones) < MIN_ZONES[requested]:
            logger.info(
                "Not enough zones for operation",
                extra={**context, "reason": f"requires {MIN_ZONES[requested]}"},
            )
            return None

        try:
            result = self._handlers[requested](zones)
        except _GEOMETRY_FAULTS as exc:
            logger.warning("Zone operation failed", extra={**context, "reason": str(exc)})
            return None

        if result is None:
            logger.info("Zone operation produced no area", extra=context)
        else:
            logger.debug(
                "Zone operation completed",
                extra={
                    **context,
                    "zone_id": result.id,
                    "area_km2": result.environmental_analysis.total_area_km2,
                },
            )
        return result

    def _union(self, zones: Sequence[Zone]) -> Optional[ZoneOperationResult]:
        shapes = [self.backend.to_shape(zone) for zone in zones]
        return self._derived(
            ZoneOperation.union,
            self.backend.union(shapes),
            f"Combined Zone ({len(zones)} areas)",
        )

    def _intersection(self, zones: Sequence[Zone]) -> Optional[ZoneOperationResult]:
        shapes = [self.backend.to_shape(zone) for zone in zones]
        return self._derived(
            ZoneOperation.intersection,
            self.backend.intersect(shapes),
            f"Overlap Area ({len(zones)} zones)",
        )

    def _buffer(self, zones: Sequence[Zone]) -> Optional[ZoneOperationResult]:
        base = self.backend.to_shape(zones[0])
        return self._derived(
            ZoneOperation.buffer_1km,
            self.backend.buffer_km(base, BUFFER_DISTANCE_KM),
            "1km Safety Buffer",
        )

    def _contains(self, zones: Sequence[Zone]) -> Optional[ZoneOperationResult]:
        container_zone = zones[0]
        container = self.backend.to_shape(container_zone)
        candidates = [self.backend.to_shape(zone) for zone in zones[1:]]

        contained_count = sum(
            1 for candidate in candidates if self.backend.contains(container, candidate)
        )
        total = len(candidates)
        compliant = contained_count == total

        name = (
            f"All {total} areas protected"
            if compliant
            else f"Only {contained_count}/{total} areas protected"
        )
        return ZoneOperationResult(
            id=container_zone.id,
            name=name,
            type=container_zone.type,
            geometry=dict(container_zone.geometry),
            color=COMPLIANT_COLOR if compliant else VIOLATION_COLOR,
            radius=container_zone.radius,
            environmental_analysis=containment_impact(
                self.backend.area_km2(container), compliant
            ),
            contained_count=contained_count,
            compliant=compliant,
        )

    def _derived(
        self, operation: ZoneOperation, geometry: Optional[Any], name: str
    ) -> Optional[ZoneOperationResult]:
        if geometry is None:
            return None
        return ZoneOperationResult(
            id=f"{operation.value}-{uuid4().hex}",
            name=name,
            type=ZoneShape.polygon,
            geometry=self.backend.to_geojson(geometry),
            color=RESULT_COLORS[operation],
            environmental_analysis=derived_impact(
                operation, self.backend.area_km2(geometry)
            ),
        )


def build_default_operator() -> GeometricZoneOperator:
    return GeometricZoneOperator(backend=build_default_backend())
