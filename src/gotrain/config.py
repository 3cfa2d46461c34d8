"""Configuration settings for GoTrain."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.goals import DistanceUnit, UnitPreferences, WeightUnit


# __file__ = src/gotrain/config.py
# .parent.parent.parent = repository root
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GOTRAIN_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Strava OAuth application
    strava_client_id: str = ""
    strava_client_secret: str = ""
    strava_redirect_uri: str = "http://localhost:8080"

    # OpenAI
    openai_api_key: str = ""
    llm_model: str = "gpt-4o"
    llm_temperature: float = 0.7
    # Failed model calls are re-triggered by the user unless this is raised
    llm_max_retries: int = 0

    # Hevy (optional strength history)
    hevy_api_key: str = ""
    hevy_page_size: int = 5

    # Units
    distance_unit: DistanceUnit = DistanceUnit.KILOMETERS
    weight_unit: WeightUnit = WeightUnit.KG

    # Local state
    data_dir: Path = Path.home() / ".gotrain"
    db_path: Path | None = None

    def model_post_init(self, __context) -> None:
        """Set default database path after initialization."""
        if self.db_path is None:
            self.db_path = self.data_dir / "gotrain.db"

    @property
    def is_configured(self) -> bool:
        """Strava app credentials and an OpenAI key are all present."""
        return bool(
            self.strava_client_id
            and self.strava_client_secret
            and self.openai_api_key
        )

    @property
    def has_hevy(self) -> bool:
        return bool(self.hevy_api_key)

    @property
    def units(self) -> UnitPreferences:
        return UnitPreferences(distance=self.distance_unit, weight=self.weight_unit)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
