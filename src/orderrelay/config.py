"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars (and an optional
.env file). Variable names match the deployment environment directly:
PORT, CORS_ORIGINS, ENVIRONMENT (or NODE_ENV), LOG_LEVEL.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All relay configuration."""

    # Server
    host: str = "0.0.0.0"
    port: int = 4000

    # Informational only, reported at startup
    environment: str = Field(
        "development",
        validation_alias=AliasChoices("environment", "node_env"),
    )

    # Comma-separated allow-list
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse allowed origins from the comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Singleton, import this everywhere
settings = Settings()
