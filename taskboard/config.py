"""Configuration settings using Pydantic BaseSettings."""

from pathlib import Path
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Listen address")
    port: int = Field(default=3000, description="Listen port")
    origin: Optional[str] = Field(default=None, description="Allowed cross-origin value; derived from port when unset")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Storage Configuration
    data_file: Path = Field(default=Path("data/db.json"), description="JSON document holding the task collection")
    static_dir: Path = Field(default=PACKAGE_DIR / "static", description="Directory with the browser UI")

    # Request Limits
    max_body_bytes: int = Field(default=100 * 1024, description="Largest accepted request body")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Log file path")

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @model_validator(mode="after")
    def _derive_origin(self) -> "Settings":
        if not self.origin:
            self.origin = f"http://localhost:{self.port}"
        return self
