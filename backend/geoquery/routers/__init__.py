"""Routers subpackage — HTTP layer for all API endpoints."""

from geoquery.routers import geometry, query

__all__ = ["geometry", "query"]
