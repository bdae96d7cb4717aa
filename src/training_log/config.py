"""Configuration settings for the Training Log analytics service."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


# __file__ = src/training_log/config.py
# .parent.parent.parent = project root
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRAINING_LOG_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:3000"]

    # Training log document used by the CLI
    data_file: Path | None = None

    def model_post_init(self, __context) -> None:
        """Set the default data file location after initialization."""
        if self.data_file is None:
            self.data_file = PROJECT_ROOT / "training_log.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
