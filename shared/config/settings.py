"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LayoutSettings(BaseSettings):
    """Hierarchy layout spacing.

    The same values are used for the initial layout and every re-layout so
    charts stay visually stable.
    """

    model_config = SettingsConfigDict(env_prefix="LAYOUT_")

    vertical_spacing: int = Field(default=300, gt=0)
    horizontal_spacing: int = Field(default=400, gt=0)
    grid_size: int = Field(default=20, gt=0)


class CanvasSettings(BaseSettings):
    """Raster canvas configuration."""

    model_config = SettingsConfigDict(env_prefix="CANVAS_")

    width: int = Field(default=1200, gt=0)
    height: int = Field(default=800, gt=0)
    background: str = "#ffffff"
    node_width: int = 240
    node_height: int = 100
    min_zoom: float = 0.1
    max_zoom: float = 2.0
    fit_padding: float = 0.1


class ExportSettings(BaseSettings):
    """Chart export configuration."""

    model_config = SettingsConfigDict(env_prefix="EXPORT_")

    raster_scale: float = Field(default=2.0, gt=0)
    json_filename: str = "organizational-chart.json"
    png_filename: str = "organizational-chart.png"
    json_indent: int = 2


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class ServicePorts(BaseSettings):
    """Service port configuration."""

    org_chart: int = Field(default=8006, alias="ORG_CHART_PORT")


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO

    # Project paths
    project_root: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)

    # Service ports
    ports: ServicePorts = Field(default_factory=ServicePorts)

    # Chart engine
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    canvas: CanvasSettings = Field(default_factory=CanvasSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)

    # Security
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
