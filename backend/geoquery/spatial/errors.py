"""
Geometry error hierarchy.

Every failure the model, codecs and engine can report is a subclass of
``GeometryError``.  The ``kind`` attribute is the stable identifier the HTTP
layer returns to clients.
"""

from __future__ import annotations


class GeometryError(ValueError):
    """Base class for all recoverable geometry failures."""

    kind: str = "GeometryError"


class InvalidCoordinate(GeometryError):
    """Longitude/latitude out of range, or not a finite number."""

    kind = "InvalidCoordinate"


class UnclosedRing(GeometryError):
    """Polygon ring whose first and last positions differ."""

    kind = "UnclosedRing"


class DegenerateRing(GeometryError):
    """Polygon ring with fewer than three distinct vertices."""

    kind = "DegenerateRing"


class MalformedGeometry(GeometryError):
    """Structurally valid ring that is not simple (self-intersects)."""

    kind = "MalformedGeometry"


class ParseError(GeometryError):
    """Textual, binary or GeoJSON input that violates the grammar."""

    kind = "ParseError"


class UnsupportedGeometryType(GeometryError):
    """Geometry type or dimensionality outside Point/Polygon in 2D."""

    kind = "UnsupportedGeometryType"


class TruncatedInput(GeometryError):
    """Binary input shorter than its declared structure."""

    kind = "TruncatedInput"


class InvalidRadius(GeometryError):
    """Buffer radius that is not a positive, finite, representable distance."""

    kind = "InvalidRadius"


class InvalidSegmentCount(GeometryError):
    """Buffer vertex count that is not an integer of at least 32."""

    kind = "InvalidSegmentCount"


class SRIDMismatch(GeometryError):
    """Operands of a binary operation carry different reference systems."""

    kind = "SRIDMismatch"
