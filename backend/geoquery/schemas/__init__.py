"""Schemas subpackage — Pydantic request/response models."""

from geoquery.schemas.geometry import (
    BufferRequest,
    ContainsRequest,
    ContainsResponse,
    DistanceRequest,
    DistanceResponse,
    DWithinRequest,
    EnvelopeContainsRequest,
    EnvelopeOut,
    GeoJSONRequest,
    GeometryOut,
    NearestRequest,
    NearestResponse,
    PointListResponse,
    RankedPoint,
    WithinRequest,
    WKBRequest,
    WKTRequest,
)

__all__ = [
    "BufferRequest",
    "ContainsRequest",
    "ContainsResponse",
    "DistanceRequest",
    "DistanceResponse",
    "DWithinRequest",
    "EnvelopeContainsRequest",
    "EnvelopeOut",
    "GeoJSONRequest",
    "GeometryOut",
    "NearestRequest",
    "NearestResponse",
    "PointListResponse",
    "RankedPoint",
    "WithinRequest",
    "WKBRequest",
    "WKTRequest",
]
