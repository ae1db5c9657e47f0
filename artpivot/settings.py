"""Application settings for ArtPivot.

Values come from the environment (or a ``.env`` file in the working
directory). Variable names are case-insensitive, e.g. ``DATABASE_PATH`` or
``CLOUDINARY_CLOUD_NAME``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LLM_BASE_URL = "https://api.openai.com/v1"
DEFAULT_LLM_MODEL = "gpt-4o-mini"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Storage
    database_path: Path = Path("data/artpivot.db")
    upload_dir: Path = Path("data/uploads")

    # Cloudinary (image hosting); all three must be set for uploads to work
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_folder: str = "artpivot"

    # LLM fallback defaults, used when the client does not send its own
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    llm_model: str = DEFAULT_LLM_MODEL
    llm_timeout_seconds: float = 60.0

    # Keys of this length or longer pass the /ai/test plausibility check
    min_api_key_length: int = 21

    cors_origins: list[str] = ["*"]

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
