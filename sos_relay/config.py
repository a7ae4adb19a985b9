"""Pydantic Settings loaded from environment."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = "sqlite:///./sos_relay.db"
    # Pending reports younger than this stay out of listings. 0 disables the filter.
    visibility_delay_seconds: int = 0
    reacknowledge_overwrites: bool = False

    storage_backend: str = "local"  # local | http
    upload_dir: str = "/tmp/sos-relay-uploads"
    media_base_url: str = ""
    object_storage_upload_url: str = ""
    object_storage_upload_preset: str = ""
    object_storage_api_key: str = ""
    object_storage_timeout: float = 30.0

    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
