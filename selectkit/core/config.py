"""
Configuration Management

Centralized configuration using Pydantic Settings.

Every field can be set from the environment with the SELECTKIT_ prefix,
e.g. SELECTKIT_DATABASE=/data/app.db, or from a .env file.
"""

from typing import Any, Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings."""

    model_config = SettingsConfigDict(
        env_prefix="SELECTKIT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Engine
    default_engine: str = Field(default="sqlite")
    database: str = Field(default=":memory:")
    read_only: bool = Field(default=False)
    timeout: float = Field(default=30.0, ge=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_sql: bool = Field(default=False)

    def engine_config(self) -> Dict[str, Any]:
        """Connection config dict for the default engine."""
        return {
            "database": self.database,
            "read_only": self.read_only,
            "timeout": self.timeout,
        }


# Global settings instance
settings = Settings()
