"""
Well-Known Text codec
=====================
Reads and writes the two supported WKT forms plus the PostGIS extended
``SRID=<id>;`` prefix (EWKT)::

    POINT(<lon> <lat>)
    POLYGON((<lon1> <lat1>, <lon2> <lat2>, ..., <lon1> <lat1>))
    SRID=3857;POINT(1 2)

The grammar itself is read by GEOS through ``shapely.from_wkt``; this
module strips the SRID prefix, classifies the tag and dimensionality, and
hands the positions to the model constructors.  Tags are case-insensitive
and whitespace is free.
"""

from __future__ import annotations

import re

import shapely
from shapely.errors import GEOSException

from geoquery.spatial.errors import ParseError, UnsupportedGeometryType
from geoquery.spatial.model import (
    DEFAULT_SRID,
    Coordinate,
    Geometry,
    Point,
    Polygon,
    make_point,
    make_polygon,
)

_SRID_PREFIX = re.compile(r"\s*SRID\s*=\s*([^;]*);", re.IGNORECASE)
_HEADER = re.compile(r"\s*([A-Za-z_]+)\s*([A-Za-z_]*)")
_STRAY = re.compile(r"[^\d\s.,()+\-eE]")
_NUMERIC_RUN = re.compile(r"[-+.\d][-+.\deE]*")
_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_DIMENSION_WORDS = {"Z", "M", "ZM"}


def _parse_srid(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ParseError(f"invalid SRID {raw.strip()!r}") from exc


def _check_positions(body: str, offset: int) -> None:
    """
    Each numeric literal must stand alone (``1-2`` and ``.5.5`` are errors)
    and nothing may follow the outermost closing parenthesis.
    """
    stray = _STRAY.search(body)
    if stray:
        raise ParseError(
            f"unexpected character {stray.group()!r} at offset {offset + stray.start()}"
        )
    for run in _NUMERIC_RUN.finditer(body):
        if not _NUMBER.fullmatch(run.group()):
            raise ParseError(
                f"malformed number {run.group()!r} at offset {offset + run.start()}"
            )
    depth = 0
    for i, ch in enumerate(body):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0 and body[i + 1:].strip():
                raise ParseError(f"unexpected trailing input at offset {offset + i + 1}")


def _from_wkt(wkt: str):
    try:
        return shapely.from_wkt(wkt)
    except GEOSException as exc:
        raise ParseError(f"malformed WKT: {exc}") from exc


def parse_text(text: str) -> Geometry:
    """
    Parse WKT or EWKT into a Point or Polygon.

    Raises
    ------
    ParseError
        Malformed syntax.
    UnsupportedGeometryType
        Any tag other than POINT/POLYGON, EMPTY, Z/M dimensions, or a
        polygon with interior rings.
    """
    if not isinstance(text, str):
        raise ParseError(f"WKT input must be a string, got {type(text).__name__}")

    srid = DEFAULT_SRID
    body = text
    prefix = _SRID_PREFIX.match(text)
    if prefix:
        srid = _parse_srid(prefix.group(1))
        body = text[prefix.end():]

    header = _HEADER.match(body)
    if header is None:
        raise ParseError("expected a geometry tag")
    tag, word = header.group(1).upper(), header.group(2).upper()
    if tag not in ("POINT", "POLYGON"):
        raise UnsupportedGeometryType(f"unsupported geometry type {tag}")
    if word in _DIMENSION_WORDS:
        raise UnsupportedGeometryType(f"{tag} {word} geometries are not supported")
    if word == "EMPTY":
        raise UnsupportedGeometryType(f"{tag} EMPTY is not supported")
    if word:
        raise ParseError(f"unexpected word {header.group(2)!r} after {tag}")

    positions = body[header.end():]
    _check_positions(positions, len(text) - len(positions))

    if tag == "POINT":
        shape = _from_wkt("POINT" + positions)
        if shape.has_z:
            raise UnsupportedGeometryType("3-dimensional coordinates are not supported")
        return make_point(shape.x, shape.y, srid)

    # Rings are read as open linestrings so closure and vertex count are
    # reported by make_polygon rather than by GEOS.
    rings = _from_wkt("MULTILINESTRING" + positions)
    if rings.has_z:
        raise UnsupportedGeometryType("3-dimensional coordinates are not supported")
    if len(rings.geoms) > 1:
        raise UnsupportedGeometryType("polygons with interior rings are not supported")
    return make_polygon(list(rings.geoms[0].coords), srid)


# ── Writing ──────────────────────────────────────────────────────

def format_number(value: float) -> str:
    """Shortest text that parses back to exactly ``value``."""
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def _position(c: Coordinate) -> str:
    return f"{format_number(c.lon)} {format_number(c.lat)}"


def to_text(geometry: Geometry, extended: bool = True) -> str:
    """
    Render ``geometry`` as WKT.

    With ``extended`` (the default) a ``SRID=<id>;`` prefix is written for
    any SRID other than 4326, so ``parse_text(to_text(g)) == g``.
    """
    if isinstance(geometry, Point):
        wkt = f"POINT({_position(geometry.coordinate)})"
    elif isinstance(geometry, Polygon):
        wkt = "POLYGON((" + ",".join(_position(c) for c in geometry.ring) + "))"
    else:
        raise UnsupportedGeometryType(
            f"cannot encode {type(geometry).__name__} as WKT"
        )

    if extended and geometry.srid != DEFAULT_SRID:
        return f"SRID={geometry.srid};{wkt}"
    return wkt
