"""
Tests for geoquery.config — Settings, properties, and factory.
"""
from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError


class TestSettings:
    """Tests for the Settings pydantic-settings model."""

    def _make_settings(self, **overrides):
        """Create a fresh Settings instance with optional overrides via env vars.

        ``_env_file=None`` keeps a developer's .env out of the assertions
        about built-in defaults.
        """
        env = {f"GEOQUERY_{k.upper()}": str(v) for k, v in overrides.items()}
        clean_env = {k: v for k, v in os.environ.items() if not k.startswith("GEOQUERY_")}
        clean_env.update(env)
        with patch.dict(os.environ, clean_env, clear=True):
            from geoquery.config import Settings
            return Settings(_env_file=None)

    # ── Defaults ──────────────────────────────────────────────

    def test_default_app_name(self):
        assert self._make_settings().app_name == "geoquery"

    def test_default_debug(self):
        assert self._make_settings().debug is False

    def test_default_log_level(self):
        assert self._make_settings().log_level == "INFO"

    def test_default_earth_radius(self):
        assert self._make_settings().earth_radius_m == 6_371_008.8

    def test_default_buffer_segments(self):
        assert self._make_settings().buffer_segments == 32

    def test_default_max_results(self):
        assert self._make_settings().max_results == 50_000

    def test_default_cors_origins(self):
        assert "localhost:5173" in self._make_settings().cors_origins

    # ── Properties ────────────────────────────────────────────

    def test_planar_srid_set(self):
        assert self._make_settings().planar_srid_set == frozenset({0, 3857})

    def test_planar_srid_set_tolerates_blanks(self):
        s = self._make_settings()
        s.planar_srids = " 0, ,2193 ,"
        assert s.planar_srid_set == frozenset({0, 2193})

    def test_cors_origins_list(self):
        origins = self._make_settings().cors_origins_list
        assert origins == ["http://localhost:5173", "http://localhost:3000"]

    def test_cors_origins_list_empty_entries(self):
        s = self._make_settings()
        s.cors_origins = "http://a.com, , http://b.com, "
        assert s.cors_origins_list == ["http://a.com", "http://b.com"]

    # ── Env overrides ─────────────────────────────────────────

    def test_override_debug(self):
        assert self._make_settings(debug="true").debug is True

    def test_override_earth_radius(self):
        assert self._make_settings(earth_radius_m="6378137").earth_radius_m == 6_378_137.0

    def test_override_planar_srids(self):
        s = self._make_settings(planar_srids="0,2193")
        assert s.planar_srid_set == frozenset({0, 2193})

    def test_buffer_segments_minimum(self):
        with pytest.raises(ValidationError):
            self._make_settings(buffer_segments="16")

    def test_unrelated_env_ignored(self):
        with patch.dict(os.environ, {"POSTGRES_PASSWORD": "x"}):
            s = self._make_settings()
        assert s.app_name == "geoquery"


class TestGetSettings:
    """Tests for the get_settings cached factory."""

    def test_returns_settings_instance(self):
        from geoquery.config import Settings, get_settings
        get_settings.cache_clear()
        assert isinstance(get_settings(), Settings)

    def test_caching(self):
        from geoquery.config import get_settings
        get_settings.cache_clear()
        assert get_settings() is get_settings()

    def test_cache_clear_returns_fresh(self):
        from geoquery.config import get_settings
        get_settings.cache_clear()
        s1 = get_settings()
        get_settings.cache_clear()
        s2 = get_settings()
        assert s1 is not s2
