"""Tests for configuration settings."""

from pathlib import Path

from gotrain.config import Settings
from gotrain.models.goals import DistanceUnit, WeightUnit


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GOTRAIN_DATA_DIR", str(tmp_path))
        settings = Settings(_env_file=None)

        assert settings.strava_redirect_uri == "http://localhost:8080"
        assert settings.llm_model == "gpt-4o"
        assert settings.hevy_page_size == 5
        assert settings.db_path == Path(tmp_path) / "gotrain.db"
        assert not settings.is_configured
        assert not settings.has_hevy

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("GOTRAIN_STRAVA_CLIENT_ID", "123")
        monkeypatch.setenv("GOTRAIN_STRAVA_CLIENT_SECRET", "secret")
        monkeypatch.setenv("GOTRAIN_OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("GOTRAIN_HEVY_API_KEY", "hevy")

        settings = Settings(_env_file=None)

        assert settings.is_configured
        assert settings.has_hevy

    def test_units(self, monkeypatch):
        monkeypatch.setenv("GOTRAIN_DISTANCE_UNIT", "miles")
        monkeypatch.setenv("GOTRAIN_WEIGHT_UNIT", "lbs")

        units = Settings(_env_file=None).units

        assert units.distance == DistanceUnit.MILES
        assert units.weight == WeightUnit.LBS
        assert units.distance_label == "mi"
