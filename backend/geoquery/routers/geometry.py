"""
Geometry Codec Endpoints
========================
Convert between WKT, hex WKB and GeoJSON (ST_GeomFromText /
ST_GeomFromWKB / ST_GeomFromGeoJSON followed by ST_AsEWKT, ST_AsHEXEWKB,
ST_AsGeoJSON and ST_Envelope).
"""

from __future__ import annotations

from typing import TypeVar

from fastapi import APIRouter

from geoquery.schemas.geometry import (
    EnvelopeOut,
    GeoJSONRequest,
    GeometryOut,
    WKBRequest,
    WKTRequest,
)
from geoquery.spatial.errors import UnsupportedGeometryType
from geoquery.spatial.geojson import parse_geojson, to_model
from geoquery.spatial.model import Geometry, envelope_of
from geoquery.spatial.wkb import parse_hex, to_hex
from geoquery.spatial.wkt import parse_text, to_text

router = APIRouter(prefix="/geometry", tags=["Geometry"])

G = TypeVar("G")


def geometry_out(geometry: Geometry) -> GeometryOut:
    return GeometryOut(
        geometry_type=geometry.geometry_type,
        srid=geometry.srid,
        wkt=to_text(geometry),
        ewkb_hex=to_hex(geometry),
        geojson=to_model(geometry),
        envelope=EnvelopeOut.from_envelope(envelope_of(geometry)),
    )


def parse_as(text: str, expected: type[G]) -> G:
    """Parse EWKT and insist on a specific geometry type."""
    geometry = parse_text(text)
    if not isinstance(geometry, expected):
        raise UnsupportedGeometryType(
            f"expected a {expected.__name__}, got {geometry.geometry_type}"
        )
    return geometry


@router.post("/parse", response_model=GeometryOut)
async def parse_wkt(req: WKTRequest):
    """Parse (E)WKT and return every representation of the geometry."""
    return geometry_out(parse_text(req.wkt))


@router.post("/from-wkb", response_model=GeometryOut)
async def parse_wkb(req: WKBRequest):
    return geometry_out(parse_hex(req.hex))


@router.post("/from-geojson", response_model=GeometryOut)
async def parse_geojson_object(req: GeoJSONRequest):
    return geometry_out(parse_geojson(req.geojson))
