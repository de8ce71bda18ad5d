"""
Well-Known Binary codec
=======================
Layout (all integers uint32, all coordinates IEEE-754 float64)::

    byte    order       0 = big-endian (XDR), 1 = little-endian (NDR)
    uint32  type        1 = Point, 3 = Polygon, optionally OR'ed with
                        0x20000000 (SRID follows, PostGIS EWKB)
    uint32  srid        only when the SRID flag is set
    -- Point --
    double  x, y
    -- Polygon --
    uint32  ring count  (must be 1)
    uint32  point count
    double  x, y        × point count

Z (0x80000000) and M (0x40000000) flags as well as the ISO 1000/2000/3000
type ranges describe 3D/4D data and are rejected.
"""

from __future__ import annotations

import binascii
import math
import struct

from geoquery.spatial.errors import (
    ParseError,
    TruncatedInput,
    UnsupportedGeometryType,
)
from geoquery.spatial.model import (
    DEFAULT_SRID,
    Geometry,
    Point,
    Polygon,
    make_point,
    make_polygon,
)

WKB_POINT = 1
WKB_POLYGON = 3

EWKB_Z_FLAG = 0x80000000
EWKB_M_FLAG = 0x40000000
EWKB_SRID_FLAG = 0x20000000

_BYTE_ORDERS = {0: ">", 1: "<"}
_ORDER_FLAGS = {"big": 0, "little": 1}


class _Reader:
    """Sequential struct reader that reports under-reads as TruncatedInput."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0
        self.endian = "<"

    def read(self, fmt: str, what: str) -> tuple:
        fmt = self.endian + fmt
        size = struct.calcsize(fmt)
        end = self.offset + size
        if end > len(self.data):
            raise TruncatedInput(
                f"need {size} bytes for {what} at offset {self.offset}, "
                f"only {len(self.data) - self.offset} left"
            )
        values = struct.unpack_from(fmt, self.data, self.offset)
        self.offset = end
        return values

    def require(self, size: int, what: str) -> None:
        if self.offset + size > len(self.data):
            raise TruncatedInput(
                f"{what} declares {size} bytes at offset {self.offset}, "
                f"only {len(self.data) - self.offset} present"
            )


def parse_binary(data: bytes) -> Geometry:
    """
    Decode WKB or EWKB into a Point or Polygon.

    Raises
    ------
    TruncatedInput
        Fewer bytes than the declared structure requires.
    UnsupportedGeometryType
        Type code other than Point/Polygon, Z/M dimensions, interior rings,
        or an empty (NaN, NaN) point.
    ParseError
        Unknown byte-order flag or trailing bytes.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise ParseError(f"WKB input must be bytes, got {type(data).__name__}")
    reader = _Reader(bytes(data))

    (order,) = reader.read("B", "byte-order flag")
    if order not in _BYTE_ORDERS:
        raise ParseError(f"invalid byte-order flag {order}")
    reader.endian = _BYTE_ORDERS[order]

    (type_code,) = reader.read("I", "geometry type")
    if type_code & (EWKB_Z_FLAG | EWKB_M_FLAG):
        raise UnsupportedGeometryType("Z/M geometries are not supported")

    srid = DEFAULT_SRID
    if type_code & EWKB_SRID_FLAG:
        (srid,) = reader.read("I", "SRID")

    base_type = type_code & 0x0FFFFFFF
    if base_type == WKB_POINT:
        lon, lat = reader.read("2d", "point coordinates")
        # PostGIS writes POINT EMPTY as NaN, NaN.
        if math.isnan(lon) and math.isnan(lat):
            raise UnsupportedGeometryType("POINT EMPTY is not supported")
        geometry: Geometry = make_point(lon, lat, srid)
    elif base_type == WKB_POLYGON:
        (ring_count,) = reader.read("I", "ring count")
        if ring_count != 1:
            if ring_count == 0:
                raise UnsupportedGeometryType("empty polygons are not supported")
            raise UnsupportedGeometryType("polygons with interior rings are not supported")
        (point_count,) = reader.read("I", "point count")
        reader.require(point_count * 16, f"ring of {point_count} points")
        flat = reader.read(f"{2 * point_count}d", "ring coordinates")
        ring = list(zip(flat[0::2], flat[1::2]))
        geometry = make_polygon(ring, srid)
    else:
        raise UnsupportedGeometryType(f"unsupported WKB geometry type {base_type}")

    if reader.offset != len(reader.data):
        raise ParseError(
            f"{len(reader.data) - reader.offset} trailing bytes after geometry"
        )
    return geometry


def to_binary(
    geometry: Geometry,
    byte_order: str = "little",
    include_srid: bool = True,
) -> bytes:
    """
    Encode ``geometry`` as EWKB (``include_srid=True``) or plain WKB.

    Plain WKB drops the SRID, so it only round-trips for SRID 4326.
    """
    if byte_order not in _ORDER_FLAGS:
        raise ValueError(f"byte_order must be 'little' or 'big', got {byte_order!r}")
    endian = _BYTE_ORDERS[_ORDER_FLAGS[byte_order]]

    if isinstance(geometry, Point):
        type_code = WKB_POINT
    elif isinstance(geometry, Polygon):
        type_code = WKB_POLYGON
    else:
        raise UnsupportedGeometryType(
            f"cannot encode {type(geometry).__name__} as WKB"
        )

    parts = [struct.pack("B", _ORDER_FLAGS[byte_order])]
    if include_srid:
        parts.append(struct.pack(endian + "II", type_code | EWKB_SRID_FLAG, geometry.srid))
    else:
        parts.append(struct.pack(endian + "I", type_code))

    if isinstance(geometry, Point):
        parts.append(struct.pack(endian + "2d", geometry.lon, geometry.lat))
    else:
        flat = [v for c in geometry.ring for v in (c.lon, c.lat)]
        parts.append(struct.pack(endian + "II", 1, len(geometry.ring)))
        parts.append(struct.pack(f"{endian}{len(flat)}d", *flat))

    return b"".join(parts)


def to_hex(geometry: Geometry, byte_order: str = "little") -> str:
    """Upper-case hex EWKB, the way PostGIS prints geometry columns."""
    return to_binary(geometry, byte_order=byte_order).hex().upper()


def parse_hex(text: str) -> Geometry:
    try:
        data = binascii.unhexlify(text.strip())
    except (binascii.Error, AttributeError) as exc:
        raise ParseError(f"invalid hex WKB: {exc}") from exc
    return parse_binary(data)
