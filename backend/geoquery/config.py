"""
geoquery — Configuration via pydantic-settings.

Environment variables override defaults.  The sphere radius and the set of
planar SRIDs decide which distance metric the query engine applies.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env_path: ClassVar[str] = str(Path(__file__).resolve().parents[2] / ".env")
    model_config = SettingsConfigDict(
        env_file=env_path,
        env_file_encoding="utf-8",
        env_prefix="GEOQUERY_",
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────
    app_name: str = "geoquery"
    debug: bool = False
    log_level: str = "INFO"

    # ── Spatial engine ─────────────────────────────────────────────
    # Mean Earth radius (IUGG), the sphere PostGIS uses for
    # geography calculations with use_spheroid=false.
    earth_radius_m: float = 6_371_008.8
    # Vertex count used to approximate a circle in buffer().
    buffer_segments: int = Field(default=32, ge=32)
    # SRIDs measured with planar Euclidean distance.  Everything else is
    # treated as longitude/latitude on the sphere.
    planar_srids: str = "0,3857"
    # Safety cap for collection queries.
    max_results: int = 50_000

    @property
    def planar_srid_set(self) -> frozenset[int]:
        """Parse the comma-separated planar SRIDs into a set of ints."""
        return frozenset(
            int(s.strip()) for s in self.planar_srids.split(",") if s.strip()
        )

    # ── CORS ───────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
