"""Application configuration using Pydantic Settings."""

import logging
import warnings

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    app_name: str = "Notes Commander"
    debug: bool = True
    log_level: str = "INFO"

    # Storage
    database_url: str = "sqlite:///./app_data/notes.db"
    media_directory: str = "app_data/media"
    default_category_label: str = "Inbox"

    # Whisper (OpenAI-compatible transcription container)
    whisper_base_url: str = "http://localhost:8000"
    whisper_model: str = "base"
    whisper_language: str | None = None
    whisper_timeout_seconds: float = 300.0  # model load + transcription

    # Recognition worker
    recognition_worker_enabled: bool = True
    recognition_poll_interval: float = 3.0

    # Client-side sync
    backend_base_url: str = "http://localhost:5000"
    client_database_url: str = "sqlite:///./app_data/voice_notes.db"
    sync_enabled: bool = False
    sync_poll_interval: float = 5.0
    upload_retry_delay: float = 5.0

    # CORS
    cors_origins: list[str] = ["*"]

    def __init__(self, **kwargs):
        """Initialize settings and validate production configuration."""
        super().__init__(**kwargs)
        self._validate_production_settings()

    def _validate_production_settings(self) -> None:
        """Warn about insecure production settings."""
        if not self.debug and "*" in self.cors_origins:
            warnings.warn(
                "CORS is configured to allow all origins (*). Restrict this in production!",
                UserWarning,
                stacklevel=2,
            )
            logger.warning(
                "CORS is configured to allow all origins (*). Restrict this in production!"
            )


settings = Settings()
