"""Application configuration."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    environment: str = "development"  # development, staging, production

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # JSON lines for log aggregation; human format otherwise

    # HTTP surface
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = ["http://localhost:1420"]

    # RSA generation
    rsa_public_exponent: int = 65537

    model_config = SettingsConfigDict(
        env_prefix="KEYFORGE_",
        env_file=".env",
        case_sensitive=False,
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("rsa_public_exponent")
    @classmethod
    def _check_exponent(cls, value: int) -> int:
        # cryptography only generates keys with e=3 or e=65537
        if value not in (3, 65537):
            raise ValueError("rsa_public_exponent must be 3 or 65537")
        return value

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def json_logs(self) -> bool:
        """JSON log lines when asked for, and always in production."""
        return self.log_json or self.is_production


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
