"""Configuration management using pydantic-settings."""
from functools import lru_cache
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gemini access: an API key, or Vertex AI with a GCP project
    gemini_api_key: str = ""
    use_vertexai: bool = False
    gcp_project_id: str = ""
    vertex_ai_location: str = "global"

    # Text-only flows use text_model; flows with an inlined reference image
    # switch to the image-capable vision_model.
    text_model: str = "gemini-2.5-flash"
    vision_model: str = "gemini-2.5-flash-image-preview"

    # Persistence
    storage_backend: Literal["file", "firestore"] = "file"
    data_dir: str = "data"
    firestore_collection: str = "story_forge"

    # Application settings
    app_name: str = "story-forge"

    # Server settings
    backend_host: str = "localhost"
    backend_port: int = 8000
    frontend_port: int = 3000

    @model_validator(mode="after")
    def _check_credentials(self) -> "Settings":
        if self.use_vertexai:
            if not self.gcp_project_id:
                raise ValueError("GCP_PROJECT_ID is required when USE_VERTEXAI is set")
        elif not self.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required unless USE_VERTEXAI is set")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
