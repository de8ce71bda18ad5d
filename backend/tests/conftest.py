"""
Shared fixtures for the geoquery test suite.

This conftest provides:
- Reusable sample geometries (a 10×10 square, a bow-tie, an L-shape)
- Point factories for SRID 4326 and the planar SRID 0
"""
from __future__ import annotations

import pytest

from geoquery.spatial.model import Point, Polygon, make_point, make_polygon

# ---------------------------------------------------------------------------
# Sample rings
# ---------------------------------------------------------------------------
SQUARE_RING = [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]
SQUARE_WKT = "POLYGON((0 0,10 0,10 10,0 10,0 0))"
BOWTIE_RING = [(0, 0), (10, 10), (10, 0), (0, 10), (0, 0)]
L_SHAPE_RING = [(0, 0), (10, 0), (10, 2), (2, 2), (2, 10), (0, 10), (0, 0)]


def pt(lon: float, lat: float, srid: int = 4326) -> Point:
    """Shorthand point factory for tests."""
    return make_point(lon, lat, srid)


@pytest.fixture()
def square() -> Polygon:
    return make_polygon(SQUARE_RING)


@pytest.fixture()
def bowtie() -> Polygon:
    return make_polygon(BOWTIE_RING)


@pytest.fixture()
def l_shape() -> Polygon:
    return make_polygon(L_SHAPE_RING)


@pytest.fixture()
def planar_square() -> Polygon:
    return make_polygon(SQUARE_RING, srid=0)
