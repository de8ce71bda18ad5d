"""
Geometry Model
==============
Immutable in-memory representation of the two supported geometry types:

1. **Point**   — a single (lon, lat) position.
2. **Polygon** — one closed ring of positions (no interior rings).

Every geometry carries an SRID.  SRID 4326 (WGS84 longitude/latitude) is
the default and the only reference system whose coordinate ranges are
checked: lon ∈ [-180, 180], lat ∈ [-90, 90].

Construction validates closure and degeneracy.  Self-intersection is a
separate, explicit pre-check (``validate_polygon``) because it is the only
check that is not linear in the number of vertices.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Iterable, Sequence, Union

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import box
from shapely.validation import explain_validity

from geoquery.spatial.errors import (
    DegenerateRing,
    InvalidCoordinate,
    MalformedGeometry,
    UnclosedRing,
)

WGS84_SRID = 4326
DEFAULT_SRID = WGS84_SRID
# SRIDs are written as uint32 in EWKB and PostGIS caps them well below that.
MAX_SRID = 999_999


# ── Coordinate ───────────────────────────────────────────────────
@dataclass(frozen=True, slots=True)
class Coordinate:
    """A (longitude, latitude) pair, or (x, y) in a planar system."""

    lon: float
    lat: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.lon, self.lat)


def _check_srid(srid: int) -> int:
    if isinstance(srid, bool) or not isinstance(srid, int):
        raise InvalidCoordinate(f"SRID must be an integer, got {srid!r}")
    if not 0 <= srid <= MAX_SRID:
        raise InvalidCoordinate(f"SRID {srid} outside [0, {MAX_SRID}]")
    return srid


def make_coordinate(lon: float, lat: float, srid: int = DEFAULT_SRID) -> Coordinate:
    """Build a validated Coordinate for the given reference system."""
    try:
        x = float(lon)
        y = float(lat)
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinate(
            f"coordinate values must be numbers, got ({lon!r}, {lat!r})"
        ) from exc

    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidCoordinate(f"coordinate ({x}, {y}) is not finite")

    if srid == WGS84_SRID:
        if not -180.0 <= x <= 180.0:
            raise InvalidCoordinate(f"longitude {x} outside [-180, 180]")
        if not -90.0 <= y <= 90.0:
            raise InvalidCoordinate(f"latitude {y} outside [-90, 90]")

    return Coordinate(x, y)


def _coerce(value: Coordinate | Sequence[float], srid: int) -> Coordinate:
    if isinstance(value, Coordinate):
        return make_coordinate(value.lon, value.lat, srid)
    try:
        lon, lat = value
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinate(
            f"expected a (lon, lat) pair, got {value!r}"
        ) from exc
    return make_coordinate(lon, lat, srid)


# ── Geometries ───────────────────────────────────────────────────
@dataclass(frozen=True, slots=True)
class Point:
    """A single position tagged with its SRID."""

    geometry_type: ClassVar[str] = "Point"

    coordinate: Coordinate
    srid: int = DEFAULT_SRID

    @property
    def lon(self) -> float:
        """ST_X."""
        return self.coordinate.lon

    @property
    def lat(self) -> float:
        """ST_Y."""
        return self.coordinate.lat

    def to_shapely(self) -> ShapelyPoint:
        return ShapelyPoint(self.lon, self.lat)


@dataclass(frozen=True, slots=True)
class Polygon:
    """
    A polygon bounded by a single closed ring.

    ``ring`` holds every position including the closing one, so
    ``ring[0] == ring[-1]`` always.
    """

    geometry_type: ClassVar[str] = "Polygon"

    ring: tuple[Coordinate, ...]
    srid: int = DEFAULT_SRID

    @property
    def vertices(self) -> tuple[Coordinate, ...]:
        """The ring without its closing position."""
        return self.ring[:-1]

    @property
    def num_points(self) -> int:
        return len(self.ring)

    def to_shapely(self) -> ShapelyPolygon:
        return ShapelyPolygon([c.as_tuple() for c in self.ring])


Geometry = Union[Point, Polygon]


def make_point(lon: float, lat: float, srid: int = DEFAULT_SRID) -> Point:
    """ST_MakePoint + ST_SetSRID."""
    srid = _check_srid(srid)
    return Point(make_coordinate(lon, lat, srid), srid)


def make_polygon(
    coordinates: Iterable[Coordinate | Sequence[float]],
    srid: int = DEFAULT_SRID,
) -> Polygon:
    """
    Build a Polygon from an ordered, explicitly closed ring.

    Raises
    ------
    UnclosedRing
        First and last positions differ.
    DegenerateRing
        Fewer than three distinct vertices (or no positions at all).
    InvalidCoordinate
        Any position is out of range for ``srid``.
    """
    srid = _check_srid(srid)
    ring = tuple(_coerce(c, srid) for c in coordinates)

    if not ring:
        raise DegenerateRing("polygon ring is empty")
    if ring[0] != ring[-1]:
        raise UnclosedRing(
            f"ring is not closed: first {ring[0].as_tuple()} "
            f"!= last {ring[-1].as_tuple()}"
        )

    distinct = len(set(ring))
    if distinct < 3 or len(ring) < 4:
        raise DegenerateRing(
            f"ring needs at least 3 distinct vertices, got {distinct}"
        )

    return Polygon(ring, srid)


def validate_polygon(polygon: Polygon) -> Polygon:
    """
    Explicit well-formedness pre-check for predicates.

    Rejects self-intersecting and zero-area rings using the GEOS validity
    rules.  Returns the polygon unchanged so calls can be chained.
    """
    shape = polygon.to_shapely()
    if not shape.is_valid:
        raise MalformedGeometry(f"invalid polygon ring: {explain_validity(shape)}")
    return polygon


# ── Envelope (bounding box) ──────────────────────────────────────
@dataclass(frozen=True, slots=True)
class Envelope:
    """An axis-aligned rectangle between two corners in one SRID."""

    min_corner: Coordinate
    max_corner: Coordinate
    srid: int = DEFAULT_SRID

    @property
    def min_lon(self) -> float:
        return self.min_corner.lon

    @property
    def min_lat(self) -> float:
        return self.min_corner.lat

    @property
    def max_lon(self) -> float:
        return self.max_corner.lon

    @property
    def max_lat(self) -> float:
        return self.max_corner.lat

    @property
    def width(self) -> float:
        return self.max_lon - self.min_lon

    @property
    def height(self) -> float:
        return self.max_lat - self.min_lat

    def contains_point(self, lon: float, lat: float) -> bool:
        """Inclusive on both the minimum and maximum bounds."""
        return (
            self.min_lon <= lon <= self.max_lon
            and self.min_lat <= lat <= self.max_lat
        )

    def intersects(self, other: Envelope) -> bool:
        """The ``&&`` bounding-box overlap operator; touching counts."""
        return (
            self.min_lon <= other.max_lon
            and other.min_lon <= self.max_lon
            and self.min_lat <= other.max_lat
            and other.min_lat <= self.max_lat
        )

    def to_shapely(self) -> ShapelyPolygon:
        """Return a Shapely box for use with spatial queries."""
        return box(self.min_lon, self.min_lat, self.max_lon, self.max_lat)

    def to_wkt(self) -> str:
        return self.to_shapely().wkt


def make_envelope(
    min_lon: float,
    min_lat: float,
    max_lon: float,
    max_lat: float,
    srid: int = DEFAULT_SRID,
) -> Envelope:
    """ST_MakeEnvelope."""
    srid = _check_srid(srid)
    lower = make_coordinate(min_lon, min_lat, srid)
    upper = make_coordinate(max_lon, max_lat, srid)
    if lower.lon > upper.lon or lower.lat > upper.lat:
        raise InvalidCoordinate(
            f"envelope minimum {lower.as_tuple()} exceeds maximum {upper.as_tuple()}"
        )
    return Envelope(lower, upper, srid)


def envelope_of(geometry: Geometry) -> Envelope:
    """Minimal axis-aligned box around ``geometry`` (ST_Envelope)."""
    if isinstance(geometry, Point):
        return Envelope(geometry.coordinate, geometry.coordinate, geometry.srid)

    lons = [c.lon for c in geometry.ring]
    lats = [c.lat for c in geometry.ring]
    return Envelope(
        Coordinate(min(lons), min(lats)),
        Coordinate(max(lons), max(lats)),
        geometry.srid,
    )


def centroid(geometry: Geometry) -> Point:
    """ST_Centroid: a point is its own centroid, a polygon its area centroid."""
    if isinstance(geometry, Point):
        return geometry
    c = geometry.to_shapely().centroid
    return Point(Coordinate(c.x, c.y), geometry.srid)
