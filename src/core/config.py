"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Service settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="UI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Server
    host: str = Field(default="127.0.0.1", description="HTTP bind address")
    port: int = Field(default=8050, gt=0, lt=65536, description="HTTP port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Sessions
    session_cache_size: int = Field(default=256, gt=0, description="Max live sessions")
    session_ttl: int = Field(default=1800, gt=0, description="Session TTL (seconds)")

    # Prompt shell
    selection_delay: float = Field(
        default=0.3, ge=0.0, le=5.0, description="Pause before showing a selected app"
    )

    # Schema limits
    max_schema_size: int = Field(default=512 * 1024, gt=0, description="Max schema JSON size")
    max_schema_depth: int = Field(default=40, gt=0, description="Max schema nesting depth")

    # Monitoring
    enable_metrics: bool = Field(default=True, description="Expose /metrics")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
