"""Services subpackage — collection-level spatial queries."""

from geoquery.services.spatial import SpatialQueryService

__all__ = [
    "SpatialQueryService",
]
