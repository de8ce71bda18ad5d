"""
GeoJSON projection (RFC 7946 geometry objects).

Output keeps the polygon's closing vertex, matching RFC 7946 which requires
linear rings to be closed.  Input is WGS84 by definition, so parsed
geometries always carry SRID 4326.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from geoquery.spatial.errors import ParseError, UnsupportedGeometryType
from geoquery.spatial.model import (
    WGS84_SRID,
    Geometry,
    Point,
    Polygon,
    make_point,
    make_polygon,
)

Position = tuple[float, float]


class GeoJSONPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: Position


class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[Position]] = Field(
        description="Linear rings [[[lon, lat], ...]]; only the exterior ring is supported",
    )


GeoJSONGeometry = Annotated[
    Union[GeoJSONPoint, GeoJSONPolygon], Field(discriminator="type")
]
_adapter: TypeAdapter[GeoJSONPoint | GeoJSONPolygon] = TypeAdapter(GeoJSONGeometry)


def to_model(geometry: Geometry) -> GeoJSONPoint | GeoJSONPolygon:
    if isinstance(geometry, Point):
        return GeoJSONPoint(coordinates=geometry.coordinate.as_tuple())
    if isinstance(geometry, Polygon):
        return GeoJSONPolygon(coordinates=[[c.as_tuple() for c in geometry.ring]])
    raise UnsupportedGeometryType(
        f"cannot encode {type(geometry).__name__} as GeoJSON"
    )


def to_geojson(geometry: Geometry) -> dict[str, Any]:
    """``{"type": ..., "coordinates": ...}`` with JSON-native lists."""
    return to_model(geometry).model_dump(mode="json")


def parse_geojson(obj: dict[str, Any] | str) -> Geometry:
    """ST_GeomFromGeoJSON for Point and single-ring Polygon objects."""
    if isinstance(obj, str):
        try:
            obj = json.loads(obj)
        except json.JSONDecodeError as exc:
            raise ParseError(f"invalid GeoJSON text: {exc}") from exc

    if not isinstance(obj, dict):
        raise ParseError("GeoJSON geometry must be a JSON object")
    kind = obj.get("type")
    if not isinstance(kind, str):
        raise ParseError("GeoJSON geometry has no 'type' member")
    if kind not in ("Point", "Polygon"):
        raise UnsupportedGeometryType(f"unsupported GeoJSON type {kind}")

    try:
        model = _adapter.validate_python(obj)
    except ValidationError as exc:
        raise ParseError(f"malformed GeoJSON {kind}: {exc.errors()[0]['msg']}") from exc

    if isinstance(model, GeoJSONPoint):
        lon, lat = model.coordinates
        return make_point(lon, lat, WGS84_SRID)

    if not model.coordinates:
        raise UnsupportedGeometryType("empty polygons are not supported")
    if len(model.coordinates) > 1:
        raise UnsupportedGeometryType("polygons with interior rings are not supported")
    return make_polygon(model.coordinates[0], WGS84_SRID)
