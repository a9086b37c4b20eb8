"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Annotated, Optional, List, Union
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
import json
from pathlib import Path

from webcapture.models.schemas import CaptureDefaults


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Web Capture API", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(
        default=3000,
        gt=0,
        lt=65536,
        validation_alias=AliasChoices("PORT", "WEBCAPTURE_PORT"),
        description="Server port",
    )

    # Storage Configuration
    output_dir: Path = Field(
        default=Path("./screenshots"), description="Directory screenshots are written to"
    )
    log_dir: Path = Field(default=Path("./logs"), description="Log files directory")
    image_extension: str = Field(default="webp", description="Extension for generated files")

    # Capture Defaults
    default_width: int = Field(default=1920, gt=0, description="Default viewport width")
    default_height: int = Field(default=1080, gt=0, description="Default viewport height")
    default_scale: float = Field(default=1.0, gt=0, description="Default device scale factor")
    default_quality: int = Field(default=80, ge=0, le=100, description="Default WebP quality")
    default_full_page: bool = Field(default=False, description="Capture full page by default")

    # Browser Configuration
    playwright_headless: bool = Field(default=True, description="Run browser in headless mode")
    navigation_timeout_ms: int = Field(
        default=5000, gt=0, description="Page navigation timeout in milliseconds"
    )
    max_concurrent_captures: int = Field(
        default=5, gt=0, description="Maximum captures holding a browser context at once"
    )

    # Security Configuration
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default=["*"], description="CORS allowed origins"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("image_extension")
    @classmethod
    def strip_extension_dot(cls, v: str) -> str:
        """Store the extension without a leading dot."""
        v = v.strip().lstrip(".")
        if not v:
            raise ValueError("Image extension cannot be empty")
        return v

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse allowed origins from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string: ["*"] or ["origin1", "origin2"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "*" or "origin1,origin2"
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("output_dir", "log_dir")
    @classmethod
    def create_directories(cls, v: Path) -> Path:
        """Ensure directories exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    def capture_defaults(self) -> CaptureDefaults:
        """Build the immutable defaults record handed to the validator."""
        return CaptureDefaults(
            width=self.default_width,
            height=self.default_height,
            scale=self.default_scale,
            quality=self.default_quality,
            full_page=self.default_full_page,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="WEBCAPTURE_",
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# Global settings instance - will be initialized when needed
settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
