"""Configuration management for the Cardinal analyst MCP bridge"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.credentials import CredentialMode


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Analytics backend
    analyst_base: str = "http://127.0.0.1:8080"

    # Credential resolution
    analyst_credential_mode: CredentialMode = CredentialMode.ENVIRONMENT
    google_credentials_json: str | None = None
    google_application_credentials: str | None = None

    # Server settings
    server_name: str = "cardinal-bq-analyst"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @property
    def has_credentials_source(self) -> bool:
        """Check if either credential environment source is configured"""
        return bool(self.google_credentials_json or self.google_application_credentials)


# Global settings instance
settings = Settings()


def get_config() -> Settings:
    """Get the global configuration instance."""
    return settings
