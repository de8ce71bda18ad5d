"""
geoquery — FastAPI Application
==============================
HTTP surface over the geometry codecs and the in-memory spatial query
engine.  Run with ``uvicorn geoquery.main:app``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from geoquery.config import get_settings
from geoquery.routers import geometry, query
from geoquery.spatial.errors import GeometryError

logger = logging.getLogger(__name__)
settings = get_settings()


# ── Error mapping ─────────────────────────────────────────────────
async def geometry_error_handler(request: Request, exc: GeometryError) -> JSONResponse:
    """Every GeometryError is a client error: 422 with its kind."""
    logger.warning("%s %s rejected: %s: %s", request.method, request.url.path, exc.kind, exc)
    return JSONResponse(
        status_code=422,
        content={"error": exc.kind, "detail": str(exc)},
    )


# ── Lifespan (startup / shutdown) ─────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "%s starting up (planar SRIDs=%s, sphere radius=%s m)",
        settings.app_name,
        sorted(settings.planar_srid_set),
        settings.earth_radius_m,
    )
    yield
    logger.info("%s shut down.", settings.app_name)


# ── App factory ───────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Geospatial query core: WKT/WKB/GeoJSON codecs, containment, "
            "bounding-box, distance, nearest-neighbour and buffer queries."
        ),
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GeometryError, geometry_error_handler)

    app.include_router(geometry.router, prefix="/api")
    app.include_router(query.router, prefix="/api")

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": settings.app_name}

    return app


# ── Module-level app instance (for `uvicorn geoquery.main:app`) ──
app = create_app()  # pragma: no cover
