"""
Spatial Query Engine
====================
Pure predicates and orderings over Points and Polygons.

Distance metric per reference system:

    planar SRIDs (settings.planar_srids, default 0 and 3857)
        Euclidean distance in coordinate units.
    every other SRID (4326 in particular)
        Great-circle distance in metres on a sphere of radius
        settings.earth_radius_m (haversine).

Polygons take part in distance calculations through their centroid.
Point-in-polygon treats the boundary as *outside*: a point lying exactly on
an edge or vertex is not contained.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from geoquery.config import get_settings
from geoquery.spatial.errors import InvalidRadius, InvalidSegmentCount, SRIDMismatch
from geoquery.spatial.model import (
    Coordinate,
    Envelope,
    Geometry,
    Point,
    Polygon,
    centroid,
    envelope_of,
    make_polygon,
    validate_polygon,
)

logger = logging.getLogger(__name__)
settings = get_settings()

MIN_BUFFER_SEGMENTS = 32


def _same_srid(a: Geometry | Envelope, b: Geometry | Envelope) -> int:
    if a.srid != b.srid:
        raise SRIDMismatch(f"operands have different SRIDs ({a.srid} vs {b.srid})")
    return a.srid


def is_planar(srid: int) -> bool:
    return srid in settings.planar_srid_set


# ── Containment ───────────────────────────────────────────────────

def contains_envelope(box: Envelope, point: Point) -> bool:
    """Bounding-box test, inclusive on both minimum and maximum bounds."""
    _same_srid(box, point)
    return box.contains_point(point.lon, point.lat)


def contains(container: Polygon, point: Point) -> bool:
    """
    Strict point-in-polygon (ST_Contains): boundary points are NOT contained.

    The ring is validated before any computation, and the envelope is used
    as a cheap pre-filter.
    """
    _same_srid(container, point)
    validate_polygon(container)
    if not envelope_of(container).contains_point(point.lon, point.lat):
        return False
    return container.to_shapely().contains(point.to_shapely())


# ── Distance ──────────────────────────────────────────────────────

def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in metres between two lon/lat positions."""
    lon1, lat1 = math.radians(a.lon), math.radians(a.lat)
    lon2, lat2 = math.radians(b.lon), math.radians(b.lat)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * settings.earth_radius_m * math.asin(min(1.0, math.sqrt(h)))


def distance(a: Geometry, b: Geometry) -> float:
    """
    Distance between two geometries (centroid to centroid for polygons).

    Metres on the sphere for geographic SRIDs; coordinate units for planar
    SRIDs.
    """
    srid = _same_srid(a, b)
    for g in (a, b):
        if isinstance(g, Polygon):
            validate_polygon(g)
    pa = centroid(a).coordinate
    pb = centroid(b).coordinate
    if is_planar(srid):
        return math.hypot(pb.lon - pa.lon, pb.lat - pa.lat)
    return haversine_m(pa, pb)


def within_distance(a: Geometry, b: Geometry, limit: float) -> bool:
    """ST_DWithin: inclusive distance threshold."""
    return distance(a, b) <= limit


def order_by_distance(origin: Point, candidates: Iterable[Point]) -> list[Point]:
    """
    Sort ``candidates`` ascending by distance from ``origin``.

    ``sorted`` is stable, so equidistant candidates keep their input order.
    """
    keyed = [(distance(origin, c), c) for c in candidates]
    return [c for _, c in sorted(keyed, key=lambda pair: pair[0])]


# ── Buffer ────────────────────────────────────────────────────────

def _destination(center: Coordinate, bearing: float, angular: float) -> tuple[float, float]:
    """Point reached from ``center`` along ``bearing`` (radians) on the sphere."""
    lat1 = math.radians(center.lat)
    lon1 = math.radians(center.lon)

    sin_lat2 = (
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
    )
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
    lon2 = lon1 + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * sin_lat2,
    )

    lon = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    return lon, math.degrees(lat2)


def buffer(
    center: Point,
    radius_m: float,
    segments: int | None = None,
) -> Polygon:
    """
    Approximate a circle of ``radius_m`` around ``center`` as a regular
    polygon whose vertices all lie exactly ``radius_m`` from the centre.

    Parameters
    ----------
    center : Point
    radius_m : float
        Metres on the sphere, coordinate units for planar SRIDs.
    segments : int, optional
        Vertex count, at least 32.  Defaults to ``settings.buffer_segments``.
    """
    n = settings.buffer_segments if segments is None else segments
    if isinstance(n, bool) or not isinstance(n, int) or n < MIN_BUFFER_SEGMENTS:
        raise InvalidSegmentCount(
            f"buffer needs an integer of at least {MIN_BUFFER_SEGMENTS} segments, got {n!r}"
        )

    if (
        isinstance(radius_m, bool)
        or not isinstance(radius_m, (int, float))
        or not math.isfinite(radius_m)
        or radius_m <= 0
    ):
        raise InvalidRadius(f"radius must be a positive finite number, got {radius_m!r}")

    planar = is_planar(center.srid)
    if not planar and radius_m >= math.pi * settings.earth_radius_m:
        raise InvalidRadius(
            f"radius {radius_m} m reaches the antipode of the centre"
        )

    vertices: list[tuple[float, float]] = []
    for i in range(n):
        theta = 2 * math.pi * i / n
        if planar:
            vertices.append((
                center.lon + radius_m * math.cos(theta),
                center.lat + radius_m * math.sin(theta),
            ))
        else:
            vertices.append(
                _destination(center.coordinate, theta, radius_m / settings.earth_radius_m)
            )
    vertices.append(vertices[0])

    logger.debug(
        "buffer(%s, %s) -> %d vertices (%s)",
        center.coordinate.as_tuple(), radius_m, n, "planar" if planar else "spherical",
    )
    return make_polygon(vertices, center.srid)
