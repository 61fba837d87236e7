"""Geometry capability used by the zone operator.

Set operations run on lng/lat coordinates with shapely. Distances and areas
are metric: circles and buffers are built in a local azimuthal equidistant
projection centred on the geometry, and areas are geodesic on the WGS84
ellipsoid.
"""

from __future__ import annotations

from functools import lru_cache, reduce
from typing import Any, Dict, Optional, Protocol, Sequence

from pyproj import CRS, Geod, Transformer
from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, MultiPolygon, Point, Polygon, mapping, shape
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import transform, unary_union

from app.schemas import Zone, ZoneShape
from settings import get_settings

CRS_WGS84 = "EPSG:4326"

_GEOD = Geod(ellps="WGS84")


class UnsupportedGeometryError(ValueError):
    """Raised when a zone cannot be turned into a polygonal shape."""


class GeometryBackend(Protocol):
    def to_shape(self, zone: Zone) -> Any:
        ...

    def union(self, shapes: Sequence[Any]) -> Optional[Any]:
        ...

    def intersect(self, shapes: Sequence[Any]) -> Optional[Any]:
        ...

    def buffer_km(self, geometry: Any, distance_km: float) -> Optional[Any]:
        ...

    def area_km2(self, geometry: Any) -> float:
        ...

    def contains(self, container: Any, candidate: Any) -> bool:
        ...

    def to_geojson(self, geometry: Any) -> Dict[str, Any]:
        ...


@lru_cache(maxsize=256)
def _local_transformers(lng: float, lat: float) -> tuple[Transformer, Transformer]:
    local = CRS.from_proj4(
        f"+proj=aeqd +lat_0={lat} +lon_0={lng} +datum=WGS84 +units=m +no_defs"
    )
    forward = Transformer.from_crs(CRS_WGS84, local, always_xy=True)
    backward = Transformer.from_crs(local, CRS_WGS84, always_xy=True)
    return forward, backward


def polygonal(geometry: Optional[BaseGeometry]) -> Optional[BaseGeometry]:
    """Return the polygonal part of ``geometry`` or ``None`` when there is none."""
    if geometry is None or geometry.is_empty:
        return None
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry
    if isinstance(geometry, GeometryCollection):
        parts = [part for part in geometry.geoms if isinstance(part, (Polygon, MultiPolygon))]
        if not parts:
            return None
        return polygonal(unary_union(parts))
    return None


class ShapelyGeometryBackend:
    """Default backend built on shapely and pyproj."""

    def __init__(self, default_radius_m: float = 1000.0, circle_steps: int = 64) -> None:
        self.default_radius_m = default_radius_m
        self.circle_steps = circle_steps

    def to_shape(self, zone: Zone) -> BaseGeometry:
        geometry = zone.geometry or {}
        geometry_type = geometry.get("type")
        try:
            if geometry_type == "Point":
                if zone.type is not ZoneShape.circle:
                    raise UnsupportedGeometryError(
                        f"Point geometry requires a circle zone, got {zone.type.value!r}"
                    )
                lng, lat = (float(part) for part in geometry["coordinates"][:2])
                _check_lng_lat(lng, lat, lng, lat)
                return self.circle(lng, lat, zone.radius or self.default_radius_m)
            if geometry_type in ("Polygon", "MultiPolygon"):
                result = shape(geometry)
            else:
                raise UnsupportedGeometryError(f"Unsupported geometry type: {geometry_type!r}")
        except UnsupportedGeometryError:
            raise
        except (KeyError, IndexError, TypeError, ValueError, AttributeError, GEOSException) as exc:
            raise UnsupportedGeometryError(f"Malformed {geometry_type} geometry: {exc}") from exc

        if result.is_empty or not result.is_valid:
            raise UnsupportedGeometryError(f"Invalid {geometry_type} geometry for zone {zone.id!r}")
        _check_lng_lat(*result.bounds)
        return result

    def circle(self, lng: float, lat: float, radius_m: float) -> Polygon:
        """Approximate a circle as a polygon with ``circle_steps`` vertices."""
        _forward, backward = _local_transformers(lng, lat)
        quad_segs = max(1, self.circle_steps // 4)
        local = Point(0.0, 0.0).buffer(radius_m, quad_segs=quad_segs)
        return transform(backward.transform, local)

    def union(self, shapes: Sequence[BaseGeometry]) -> Optional[BaseGeometry]:
        return polygonal(unary_union(list(shapes)))

    def intersect(self, shapes: Sequence[BaseGeometry]) -> Optional[BaseGeometry]:
        if not shapes:
            return None
        return polygonal(reduce(lambda left, right: left.intersection(right), shapes))

    def buffer_km(self, geometry: BaseGeometry, distance_km: float) -> Optional[BaseGeometry]:
        centre = geometry.centroid
        forward, backward = _local_transformers(centre.x, centre.y)
        local = transform(forward.transform, geometry)
        expanded = local.buffer(distance_km * 1000.0, quad_segs=max(1, self.circle_steps // 4))
        return polygonal(transform(backward.transform, expanded))

    def area_km2(self, geometry: BaseGeometry) -> float:
        parts = geometry.geoms if isinstance(geometry, MultiPolygon) else [geometry]
        area_m2 = sum(
            _GEOD.geometry_area_perimeter(orient(part, sign=1.0))[0] for part in parts
        )
        return abs(area_m2) / 1_000_000

    def contains(self, container: BaseGeometry, candidate: BaseGeometry) -> bool:
        return bool(container.contains(candidate))

    def to_geojson(self, geometry: BaseGeometry) -> Dict[str, Any]:
        return _as_lists(mapping(geometry))


def _check_lng_lat(west: float, south: float, east: float, north: float) -> None:
    if west < -180 or east > 180 or south < -90 or north > 90:
        raise UnsupportedGeometryError(
            f"Coordinates outside the lng/lat range: ({west}, {south}, {east}, {north})"
        )


def _as_lists(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _as_lists(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_as_lists(item) for item in value]
    return value


def build_default_backend() -> ShapelyGeometryBackend:
    settings = get_settings()
    return ShapelyGeometryBackend(
        default_radius_m=settings.default_circle_radius_m,
        circle_steps=settings.circle_steps,
    )

