"""Process-wide settings pulled from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CLIMATEGRID_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Generation
    cache_size: int = Field(
        default=0, ge=0, description="Per-dimension biome lookup cache entries (0 disables)"
    )
    default_seed: int = Field(default=0, description="World seed used when none is given")


settings = Settings()
