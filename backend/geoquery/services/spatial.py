"""
Spatial Query Service
=====================
Evaluates the engine's predicates over a collection of candidate points,
the in-memory counterpart of a spatially indexed table:

    points_in_polygon   ST_Contains(polygon, geom)     (geofencing)
    points_in_envelope  ST_MakeEnvelope(...) && geom
    nearest             ORDER BY geom <-> origin
    within_distance     ST_DWithin(geom, origin, d)

Every containment query runs the envelope test first and only pays for the
full polygon test on the survivors.
"""

from __future__ import annotations

import logging
from typing import Iterable

from shapely.prepared import prep

from geoquery.config import get_settings
from geoquery.spatial.engine import distance
from geoquery.spatial.errors import SRIDMismatch
from geoquery.spatial.model import (
    Envelope,
    Geometry,
    Point,
    Polygon,
    envelope_of,
    validate_polygon,
)

logger = logging.getLogger(__name__)
settings = get_settings()


class SpatialQueryService:
    """
    Executes spatial queries against an immutable set of points.

    All points must share one SRID; every query operand must use it too.
    """

    def __init__(
        self,
        points: Iterable[Point],
        max_results: int | None = None,
    ) -> None:
        self.points: tuple[Point, ...] = tuple(points)
        self.max_results = settings.max_results if max_results is None else max_results

        srids = {p.srid for p in self.points}
        if len(srids) > 1:
            raise SRIDMismatch(f"candidate points mix SRIDs {sorted(srids)}")
        self.srid = srids.pop() if srids else None

    def __len__(self) -> int:
        return len(self.points)

    def _check(self, operand: Geometry | Envelope) -> None:
        if self.srid is not None and operand.srid != self.srid:
            raise SRIDMismatch(
                f"query SRID {operand.srid} does not match candidates ({self.srid})"
            )

    # ── Bounding-box selection ────────────────────────────────

    def points_in_envelope(self, envelope: Envelope) -> list[Point]:
        """All points inside ``envelope`` (inclusive bounds), input order."""
        self._check(envelope)
        hits = [p for p in self.points if envelope.contains_point(p.lon, p.lat)]
        logger.debug("points_in_envelope: %d/%d", len(hits), len(self.points))
        return hits[: self.max_results]

    # ── Geofencing ────────────────────────────────────────────

    def points_in_polygon(self, polygon: Polygon) -> list[Point]:
        """
        All points strictly inside ``polygon``; boundary points excluded.

        The polygon is validated once and prepared once for the batch.
        """
        self._check(polygon)
        validate_polygon(polygon)

        box = envelope_of(polygon)
        candidates = [p for p in self.points if box.contains_point(p.lon, p.lat)]
        shape = prep(polygon.to_shapely())
        hits = [p for p in candidates if shape.contains(p.to_shapely())]

        logger.debug(
            "points_in_polygon: %d/%d passed envelope, %d contained",
            len(candidates), len(self.points), len(hits),
        )
        return hits[: self.max_results]

    # ── Distance queries ──────────────────────────────────────

    def nearest(
        self,
        origin: Point,
        limit: int | None = None,
    ) -> list[tuple[Point, float]]:
        """
        KNN ordering: ``(point, distance)`` pairs ascending by distance.

        Equidistant points keep their input order.
        """
        self._check(origin)
        ranked = sorted(
            ((p, distance(origin, p)) for p in self.points),
            key=lambda pair: pair[1],
        )
        cap = self.max_results if limit is None else min(limit, self.max_results)
        return ranked[:cap]

    def within_distance(self, origin: Geometry, radius: float) -> list[Point]:
        """Points whose distance to ``origin`` is at most ``radius``."""
        self._check(origin)
        hits = [p for p in self.points if distance(origin, p) <= radius]
        logger.debug("within_distance(%s): %d/%d", radius, len(hits), len(self.points))
        return hits[: self.max_results]
