"""Tests for doctriage.config: Settings defaults and environment overrides."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from doctriage.config import Settings, get_settings


class TestSettings:

    def test_get_settings_returns_instance(self):
        assert isinstance(get_settings(), Settings)

    def test_get_settings_returns_singleton(self):
        assert get_settings() is get_settings()

    def test_layout_defaults(self):
        s = Settings()
        assert s.layout_iterations == 30
        assert s.layout_repulsion == 300.0
        assert s.layout_attraction == 0.05
        assert s.layout_seed_margin == 50.0
        assert s.layout_bounds_margin == 30.0
        assert s.layout_seed is None
        assert s.layout_stable is True

    def test_interaction_defaults(self):
        s = Settings()
        assert s.click_tolerance == 12.0
        assert s.hover_tolerance == 10.0
        assert (s.viewport_width, s.viewport_height) == (800, 600)

    def test_store_path(self, tmp_path):
        s = Settings()
        assert s.data_dir == tmp_path / "data"
        assert s.store_path == tmp_path / "data" / "doctriage_store.json"

    def test_data_dir_converted_to_path(self):
        assert Settings(data_dir="some/dir").data_dir == Path("some/dir")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LAYOUT_ITERATIONS", "12")
        monkeypatch.setenv("CLICK_TOLERANCE", "15")
        s = Settings()
        assert s.layout_iterations == 12
        assert s.click_tolerance == 15.0

    def test_negative_iterations_rejected(self):
        with pytest.raises(ValidationError):
            Settings(layout_iterations=-1)

    def test_relationship_probability_bounds(self):
        with pytest.raises(ValidationError):
            Settings(analysis_relationship_probability=1.5)

    def test_ensure_directories(self, tmp_path):
        s = Settings(data_dir=tmp_path / "nested" / "data")
        s.ensure_directories()
        assert s.data_dir.is_dir()
