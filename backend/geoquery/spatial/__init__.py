"""Spatial subpackage — geometry model, codecs and the query engine."""

from geoquery.spatial.engine import (
    buffer,
    contains,
    contains_envelope,
    distance,
    order_by_distance,
    within_distance,
)
from geoquery.spatial.errors import (
    DegenerateRing,
    GeometryError,
    InvalidCoordinate,
    InvalidRadius,
    InvalidSegmentCount,
    MalformedGeometry,
    ParseError,
    SRIDMismatch,
    TruncatedInput,
    UnclosedRing,
    UnsupportedGeometryType,
)
from geoquery.spatial.geojson import parse_geojson, to_geojson
from geoquery.spatial.model import (
    Coordinate,
    Envelope,
    Geometry,
    Point,
    Polygon,
    centroid,
    envelope_of,
    make_envelope,
    make_point,
    make_polygon,
    validate_polygon,
)
from geoquery.spatial.wkb import parse_binary, parse_hex, to_binary, to_hex
from geoquery.spatial.wkt import parse_text, to_text

__all__ = [
    "Coordinate",
    "DegenerateRing",
    "Envelope",
    "Geometry",
    "GeometryError",
    "InvalidCoordinate",
    "InvalidRadius",
    "InvalidSegmentCount",
    "MalformedGeometry",
    "ParseError",
    "Point",
    "Polygon",
    "SRIDMismatch",
    "TruncatedInput",
    "UnclosedRing",
    "UnsupportedGeometryType",
    "buffer",
    "centroid",
    "contains",
    "contains_envelope",
    "distance",
    "envelope_of",
    "make_envelope",
    "make_point",
    "make_polygon",
    "order_by_distance",
    "parse_binary",
    "parse_geojson",
    "parse_hex",
    "parse_text",
    "to_binary",
    "to_geojson",
    "to_hex",
    "to_text",
    "validate_polygon",
    "within_distance",
]
