"""
Tests for geoquery.routers.query — containment, distance, KNN and buffer endpoints.
"""
from __future__ import annotations

import math
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from geoquery.main import geometry_error_handler
from geoquery.routers.query import router
from geoquery.spatial.errors import GeometryError
from geoquery.spatial.model import make_point
from tests.conftest import SQUARE_WKT


def _create_test_app() -> FastAPI:
    app = FastAPI()
    app.add_exception_handler(GeometryError, geometry_error_handler)
    app.include_router(router, prefix="/api")
    return app


@pytest.fixture()
def client():
    transport = ASGITransport(app=_create_test_app())
    return AsyncClient(transport=transport, base_url="http://testserver")


# ═══════════════════════════════════════════════════════════════════
# POST /query/contains, /query/envelope-contains
# ═══════════════════════════════════════════════════════════════════
class TestContains:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("point,expected", [
        ("POINT(5 5)", True),
        ("POINT(15 15)", False),
        ("POINT(0 5)", False),
    ])
    async def test_square(self, client, point, expected):
        resp = await client.post("/api/query/contains", json={
            "polygon": SQUARE_WKT, "point": point,
        })
        assert resp.status_code == 200
        assert resp.json() == {"contains": expected}

    @pytest.mark.asyncio
    async def test_malformed_polygon(self, client):
        resp = await client.post("/api/query/contains", json={
            "polygon": "POLYGON((0 0,10 10,10 0,0 10,0 0))", "point": "POINT(5 2)",
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == "MalformedGeometry"

    @pytest.mark.asyncio
    async def test_wrong_operand_type(self, client):
        resp = await client.post("/api/query/contains", json={
            "polygon": "POINT(1 1)", "point": "POINT(5 5)",
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == "UnsupportedGeometryType"

    @pytest.mark.asyncio
    async def test_srid_mismatch(self, client):
        resp = await client.post("/api/query/contains", json={
            "polygon": SQUARE_WKT, "point": "SRID=0;POINT(5 5)",
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == "SRIDMismatch"


class TestEnvelopeContains:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("point,expected", [
        ("POINT(0 0)", True),
        ("POINT(10 10)", True),
        ("POINT(10.0001 5)", False),
    ])
    async def test_inclusive(self, client, point, expected):
        resp = await client.post("/api/query/envelope-contains", json={
            "min_lon": 0, "min_lat": 0, "max_lon": 10, "max_lat": 10, "point": point,
        })
        assert resp.status_code == 200
        assert resp.json()["contains"] is expected

    @pytest.mark.asyncio
    async def test_inverted_envelope(self, client):
        resp = await client.post("/api/query/envelope-contains", json={
            "min_lon": 10, "min_lat": 0, "max_lon": 0, "max_lat": 10, "point": "POINT(1 1)",
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == "InvalidCoordinate"


class TestWithin:
    @pytest.mark.asyncio
    async def test_geofence(self, client):
        resp = await client.post("/api/query/within", json={
            "polygon": SQUARE_WKT,
            "candidates": ["POINT(5 5)", "POINT(15 15)", "POINT(0 5)", "POINT(1 1)"],
        })
        assert resp.status_code == 200
        assert resp.json() == {"count": 2, "points": ["POINT(5 5)", "POINT(1 1)"]}

    @pytest.mark.asyncio
    @patch("geoquery.routers.query.SpatialQueryService")
    async def test_delegates_to_service(self, mock_svc_cls, client):
        mock_svc = MagicMock()
        mock_svc.points_in_polygon.return_value = [make_point(2, 3)]
        mock_svc_cls.return_value = mock_svc

        resp = await client.post("/api/query/within", json={
            "polygon": SQUARE_WKT, "candidates": ["POINT(2 3)"],
        })
        assert resp.status_code == 200
        assert resp.json()["points"] == ["POINT(2 3)"]
        mock_svc.points_in_polygon.assert_called_once()


# ═══════════════════════════════════════════════════════════════════
# POST /query/distance, /query/nearest, /query/dwithin
# ═══════════════════════════════════════════════════════════════════
class TestDistance:
    @pytest.mark.asyncio
    async def test_spherical(self, client):
        resp = await client.post("/api/query/distance", json={
            "a": "POINT(0 0)", "b": "POINT(1 0)",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["metric"] == "spherical"
        assert data["unit"] == "m"
        assert math.isclose(data["distance"], math.radians(1) * 6_371_008.8, rel_tol=1e-9)

    @pytest.mark.asyncio
    async def test_planar(self, client):
        resp = await client.post("/api/query/distance", json={
            "a": "SRID=0;POINT(0 0)", "b": "SRID=0;POINT(3 4)",
        })
        assert resp.json() == {"distance": 5.0, "metric": "planar", "unit": "units"}


class TestNearest:
    @pytest.mark.asyncio
    async def test_ordering(self, client):
        resp = await client.post("/api/query/nearest", json={
            "origin": "POINT(0 0)",
            "candidates": ["POINT(10 0)", "POINT(1 0)", "POINT(5 0)"],
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["origin"] == "POINT(0 0)"
        assert [r["wkt"] for r in data["results"]] == ["POINT(1 0)", "POINT(5 0)", "POINT(10 0)"]

    @pytest.mark.asyncio
    async def test_limit(self, client):
        resp = await client.post("/api/query/nearest", json={
            "origin": "POINT(0 0)",
            "candidates": ["POINT(10 0)", "POINT(1 0)", "POINT(5 0)"],
            "limit": 1,
        })
        assert [r["wkt"] for r in resp.json()["results"]] == ["POINT(1 0)"]

    @pytest.mark.asyncio
    async def test_invalid_limit(self, client):
        resp = await client.post("/api/query/nearest", json={
            "origin": "POINT(0 0)", "candidates": [], "limit": 0,
        })
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_bad_candidate(self, client):
        resp = await client.post("/api/query/nearest", json={
            "origin": "POINT(0 0)", "candidates": ["POINT(1 0)", "POINT(oops)"],
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == "ParseError"


class TestDWithin:
    @pytest.mark.asyncio
    async def test_planar(self, client):
        resp = await client.post("/api/query/dwithin", json={
            "origin": "SRID=0;POINT(0 0)",
            "candidates": ["SRID=0;POINT(3 4)", "SRID=0;POINT(6 8)"],
            "distance": 5,
        })
        assert resp.status_code == 200
        assert resp.json() == {"count": 1, "points": ["SRID=0;POINT(3 4)"]}


# ═══════════════════════════════════════════════════════════════════
# POST /query/buffer
# ═══════════════════════════════════════════════════════════════════
class TestBuffer:
    @pytest.mark.asyncio
    async def test_buffer(self, client):
        resp = await client.post("/api/query/buffer", json={
            "center": "POINT(0 0)", "radius_m": 1000,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["geometry_type"] == "Polygon"
        ring = data["geojson"]["coordinates"][0]
        assert len(ring) == 33
        assert ring[0] == ring[-1]

    @pytest.mark.asyncio
    async def test_invalid_radius(self, client):
        resp = await client.post("/api/query/buffer", json={
            "center": "POINT(0 0)", "radius_m": 0,
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == "InvalidRadius"

    @pytest.mark.asyncio
    async def test_segments_below_minimum(self, client):
        resp = await client.post("/api/query/buffer", json={
            "center": "POINT(0 0)", "radius_m": 10, "segments": 4,
        })
        assert resp.status_code == 422
