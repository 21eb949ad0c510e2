"""Configuration for the image filter service using pydantic-settings."""

import tempfile
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Image filter settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    service_name: str = "image-filter"
    service_version: str = "1.0.0"
    port: int = 8082

    # Transform
    filter_size: int = 256  # output is filter_size x filter_size
    filter_quality: int = 60  # JPEG quality
    filter_tmp_dir: Path = Path(tempfile.gettempdir()) / "udagram-filter"

    # Outbound fetch timeout in seconds
    image_fetch_timeout: float = 30.0


settings = Settings()
