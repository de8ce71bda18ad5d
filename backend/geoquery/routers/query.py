"""
Spatial Query Endpoints
=======================
Containment, bounding-box, distance, nearest-neighbour and buffer queries
evaluated by the in-memory engine.
"""

from __future__ import annotations

from fastapi import APIRouter

from geoquery.routers.geometry import geometry_out, parse_as
from geoquery.schemas.geometry import (
    BufferRequest,
    ContainsRequest,
    ContainsResponse,
    DistanceRequest,
    DistanceResponse,
    DWithinRequest,
    EnvelopeContainsRequest,
    GeometryOut,
    NearestRequest,
    NearestResponse,
    PointListResponse,
    RankedPoint,
    WithinRequest,
)
from geoquery.services.spatial import SpatialQueryService
from geoquery.spatial.engine import buffer, contains, contains_envelope, distance, is_planar
from geoquery.spatial.model import Point, Polygon, make_envelope
from geoquery.spatial.wkt import parse_text, to_text

router = APIRouter(prefix="/query", tags=["Query"])


# ── Containment ───────────────────────────────────────────────────
@router.post("/contains", response_model=ContainsResponse)
async def polygon_contains(req: ContainsRequest):
    """ST_Contains(polygon, point); boundary points are not contained."""
    polygon = parse_as(req.polygon, Polygon)
    point = parse_as(req.point, Point)
    return ContainsResponse(contains=contains(polygon, point))


@router.post("/envelope-contains", response_model=ContainsResponse)
async def envelope_contains(req: EnvelopeContainsRequest):
    box = make_envelope(req.min_lon, req.min_lat, req.max_lon, req.max_lat, req.srid)
    point = parse_as(req.point, Point)
    return ContainsResponse(contains=contains_envelope(box, point))


@router.post("/within", response_model=PointListResponse)
async def points_within(req: WithinRequest):
    """Geofencing: candidate points strictly inside the polygon."""
    polygon = parse_as(req.polygon, Polygon)
    svc = SpatialQueryService(parse_as(c, Point) for c in req.candidates)
    hits = svc.points_in_polygon(polygon)
    return PointListResponse(count=len(hits), points=[to_text(p) for p in hits])


# ── Distance ──────────────────────────────────────────────────────
@router.post("/distance", response_model=DistanceResponse)
async def geometry_distance(req: DistanceRequest):
    a = parse_text(req.a)
    b = parse_text(req.b)
    d = distance(a, b)
    planar = is_planar(a.srid)
    return DistanceResponse(
        distance=d,
        metric="planar" if planar else "spherical",
        unit="units" if planar else "m",
    )


@router.post("/nearest", response_model=NearestResponse)
async def nearest_points(req: NearestRequest):
    """KNN ordering of the candidates around the origin."""
    origin = parse_as(req.origin, Point)
    svc = SpatialQueryService(parse_as(c, Point) for c in req.candidates)
    ranked = svc.nearest(origin, limit=req.limit)
    return NearestResponse(
        origin=to_text(origin),
        results=[RankedPoint(wkt=to_text(p), distance=d) for p, d in ranked],
    )


@router.post("/dwithin", response_model=PointListResponse)
async def points_dwithin(req: DWithinRequest):
    origin = parse_text(req.origin)
    svc = SpatialQueryService(parse_as(c, Point) for c in req.candidates)
    hits = svc.within_distance(origin, req.distance)
    return PointListResponse(count=len(hits), points=[to_text(p) for p in hits])


# ── Buffer ────────────────────────────────────────────────────────
@router.post("/buffer", response_model=GeometryOut)
async def buffer_point(req: BufferRequest):
    center = parse_as(req.center, Point)
    return geometry_out(buffer(center, req.radius_m, segments=req.segments))
