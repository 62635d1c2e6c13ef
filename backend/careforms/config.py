"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (defaults to SQLite for local dev, use PostgreSQL in production)
    database_url: str = "sqlite:///./careforms.db"

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Debug mode
    debug: bool = True
    log_level: str = "INFO"

    # Voice capture
    speech_language: str = "en-US"
    speech_chunk_interval_ms: int = 1000
    speech_max_auto_restarts: int = 5
    narrative_label_keywords: str = "note,description,observation,comment,detail,reason,explain"

    # Upload target used by the cloud-fallback capture path
    transcription_endpoint: str = "http://localhost:8000/api/transcribe"
    transcription_timeout_seconds: float = 90.0

    # AssemblyAI (empty key means the transcription service is not configured)
    assemblyai_api_key: str = ""
    assemblyai_base_url: str = "https://api.assemblyai.com/v2"
    assemblyai_poll_interval_seconds: float = 1.0
    assemblyai_max_poll_attempts: int = 60

    # Metadata keys the persistence layer embeds in response data
    reserved_response_keys: str = "_approval"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def narrative_keywords_list(self) -> List[str]:
        """Label fragments that route a text field through voice capture."""
        return [kw.strip().lower() for kw in self.narrative_label_keywords.split(",") if kw.strip()]

    @property
    def reserved_response_keys_list(self) -> List[str]:
        return [key.strip() for key in self.reserved_response_keys.split(",") if key.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
