"""Tests for the shapely/pyproj geometry backend."""

from __future__ import annotations

import pytest

from app.schemas import Zone, ZoneShape
from services.geometry import ShapelyGeometryBackend, UnsupportedGeometryError


def _rectangle(zone_id: str, west: float, south: float, east: float, north: float) -> Zone:
    ring = [[west, south], [east, south], [east, north], [west, north], [west, south]]
    return Zone(
        id=zone_id,
        name=f"Zone {zone_id}",
        type=ZoneShape.rectangle,
        geometry={"type": "Polygon", "coordinates": [ring]},
    )


@pytest.fixture()
def backend() -> ShapelyGeometryBackend:
    return ShapelyGeometryBackend(default_radius_m=1000.0, circle_steps=64)


def test_circle_zone_area_matches_inscribed_polygon(backend: ShapelyGeometryBackend) -> None:
    zone = Zone(
        id="c1",
        name="Circle",
        type=ZoneShape.circle,
        geometry={"type": "Point", "coordinates": [2.35, 48.85]},
        radius=1000,
    )

    shape = backend.to_shape(zone)

    # a 64 sided polygon inscribed in a 1 km circle
    assert backend.area_km2(shape) == pytest.approx(3.1365, rel=5e-3)


def test_circle_zone_uses_default_radius(backend: ShapelyGeometryBackend) -> None:
    zone = Zone(
        id="c2",
        name="Circle",
        type=ZoneShape.circle,
        geometry={"type": "Point", "coordinates": [0.0, 0.0]},
    )

    assert backend.area_km2(backend.to_shape(zone)) == pytest.approx(3.1365, rel=5e-3)


def test_degree_square_area_at_equator(backend: ShapelyGeometryBackend) -> None:
    shape = backend.to_shape(_rectangle("sq", 0.0, 0.0, 1.0, 1.0))

    assert backend.area_km2(shape) == pytest.approx(12308, rel=1e-2)


def test_area_ignores_ring_orientation(backend: ShapelyGeometryBackend) -> None:
    clockwise = Zone(
        id="cw",
        name="Clockwise",
        geometry={
            "type": "Polygon",
            "coordinates": [[[0, 0], [0, 0.1], [0.1, 0.1], [0.1, 0], [0, 0]]],
        },
    )
    counter = _rectangle("ccw", 0.0, 0.0, 0.1, 0.1)

    assert backend.area_km2(backend.to_shape(clockwise)) == pytest.approx(
        backend.area_km2(backend.to_shape(counter))
    )


def test_multipolygon_zone_is_accepted(backend: ShapelyGeometryBackend) -> None:
    zone = Zone(
        id="mp",
        name="Islands",
        geometry={
            "type": "MultiPolygon",
            "coordinates": [
                [[[0, 0], [0.01, 0], [0.01, 0.01], [0, 0.01], [0, 0]]],
                [[[1, 1], [1.01, 1], [1.01, 1.01], [1, 1.01], [1, 1]]],
            ],
        },
    )
    single = backend.to_shape(_rectangle("one", 0.0, 0.0, 0.01, 0.01))

    area = backend.area_km2(backend.to_shape(zone))

    assert area == pytest.approx(2 * backend.area_km2(single), rel=1e-2)


@pytest.mark.parametrize(
    "geometry",
    [
        {"type": "LineString", "coordinates": [[0, 0], [1, 1]]},
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]},
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 1], [1, 0], [0, 1], [0, 0]]]},
        {"type": "Polygon"},
        {},
    ],
)
def test_unsupported_or_malformed_geometry_is_rejected(
    backend: ShapelyGeometryBackend, geometry: dict
) -> None:
    zone = Zone(id="bad", name="Bad", geometry=geometry)

    with pytest.raises(UnsupportedGeometryError):
        backend.to_shape(zone)


def test_point_requires_circle_zone(backend: ShapelyGeometryBackend) -> None:
    zone = Zone(
        id="p",
        name="Point",
        type=ZoneShape.polygon,
        geometry={"type": "Point", "coordinates": [0.0, 0.0]},
    )

    with pytest.raises(UnsupportedGeometryError):
        backend.to_shape(zone)


def test_intersection_of_touching_zones_is_empty(backend: ShapelyGeometryBackend) -> None:
    left = backend.to_shape(_rectangle("l", 0.0, 0.0, 0.01, 0.01))
    right = backend.to_shape(_rectangle("r", 0.01, 0.0, 0.02, 0.01))

    assert backend.intersect([left, right]) is None


def test_to_geojson_returns_plain_lists(backend: ShapelyGeometryBackend) -> None:
    shape = backend.to_shape(_rectangle("sq", 0.0, 0.0, 0.01, 0.01))

    geojson = backend.to_geojson(shape)

    assert geojson["type"] == "Polygon"
    assert isinstance(geojson["coordinates"], list)
    assert all(isinstance(point, list) for point in geojson["coordinates"][0])


@pytest.mark.parametrize(
    "zone",
    [
        Zone(
            id="pole",
            name="Beyond the pole",
            type=ZoneShape.circle,
            geometry={"type": "Point", "coordinates": [0.0, 95.0]},
        ),
        _rectangle("polar", 0.0, 91.0, 0.01, 92.0),
        _rectangle("wrap", 179.0, 0.0, 181.0, 1.0),
    ],
    ids=["point", "polygon-latitude", "polygon-longitude"],
)
def test_coordinates_outside_lng_lat_range_are_rejected(
    backend: ShapelyGeometryBackend, zone: Zone
) -> None:
    with pytest.raises(UnsupportedGeometryError):
        backend.to_shape(zone)
