"""
Pydantic schemas for API request/response serialization.

Geometries travel as EWKT strings on input; responses carry every
representation the codecs produce.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from geoquery.spatial.geojson import GeoJSONGeometry
from geoquery.spatial.model import DEFAULT_SRID, Envelope


# ═══════════════════════════════════════════════════════════════════
# Geometry representations
# ═══════════════════════════════════════════════════════════════════
class EnvelopeOut(BaseModel):
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float
    srid: int

    @classmethod
    def from_envelope(cls, envelope: Envelope) -> EnvelopeOut:
        return cls(
            min_lon=envelope.min_lon,
            min_lat=envelope.min_lat,
            max_lon=envelope.max_lon,
            max_lat=envelope.max_lat,
            srid=envelope.srid,
        )


class GeometryOut(BaseModel):
    """A geometry rendered in every supported encoding."""

    geometry_type: Literal["Point", "Polygon"]
    srid: int
    wkt: str = Field(description="EWKT (SRID prefix when not 4326)")
    ewkb_hex: str = Field(description="Upper-case hex EWKB, little-endian")
    geojson: GeoJSONGeometry
    envelope: EnvelopeOut


# ═══════════════════════════════════════════════════════════════════
# Codec requests
# ═══════════════════════════════════════════════════════════════════
class WKTRequest(BaseModel):
    wkt: str = Field(description="WKT or EWKT, e.g. 'SRID=4326;POINT(1 2)'")


class WKBRequest(BaseModel):
    hex: str = Field(description="Hex-encoded WKB or EWKB")


class GeoJSONRequest(BaseModel):
    geojson: dict[str, Any]


# ═══════════════════════════════════════════════════════════════════
# Query requests / responses
# ═══════════════════════════════════════════════════════════════════
class ContainsRequest(BaseModel):
    polygon: str
    point: str


class EnvelopeContainsRequest(BaseModel):
    """ST_MakeEnvelope(min_lon, min_lat, max_lon, max_lat, srid) ~ point."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float
    srid: int = DEFAULT_SRID
    point: str


class ContainsResponse(BaseModel):
    contains: bool


class DistanceRequest(BaseModel):
    a: str
    b: str


class DistanceResponse(BaseModel):
    distance: float
    metric: Literal["spherical", "planar"]
    unit: Literal["m", "units"]


class NearestRequest(BaseModel):
    origin: str
    candidates: list[str]
    limit: int | None = Field(default=None, description="Return at most N points")

    @field_validator("limit")
    @classmethod
    def limit_positive(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("limit must be >= 1")
        return v


class RankedPoint(BaseModel):
    wkt: str
    distance: float


class NearestResponse(BaseModel):
    origin: str
    results: list[RankedPoint]


class WithinRequest(BaseModel):
    """Geofencing: which candidate points fall inside the polygon."""

    polygon: str
    candidates: list[str]


class DWithinRequest(BaseModel):
    origin: str
    candidates: list[str]
    distance: float = Field(ge=0, description="Metres, or units for planar SRIDs")


class PointListResponse(BaseModel):
    count: int
    points: list[str]


class BufferRequest(BaseModel):
    center: str
    radius_m: float
    segments: int | None = Field(default=None, ge=32, description="Vertex count (>= 32)")
