"""Configuration for the users service."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Users service settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database (unset = in-memory store)
    database_url: str | None = None

    # Security
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    bcrypt_rounds: int = 10

    # Service
    service_name: str = "udagram-users"
    service_version: str = "1.0.0"
    port: int = 8080


settings = Settings()
