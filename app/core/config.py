"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL (profiles, analyses, users)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "placify_user"
    postgres_password: str = "password"
    postgres_db: str = "placify_db"

    # Full SQLAlchemy URL, overrides the postgres_* fields when set
    database_url: Optional[str] = None

    # MongoDB (intake drafts, raw documents)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placify_docs"

    # Generative AI (OpenAI-compatible endpoint, Gemini by default)
    ai_api_key: str = ""
    ai_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    ai_model: str = "gemini-1.5-flash"
    ai_max_tokens: int = 4000
    ai_temperature: float = 0.2

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Uploads
    max_upload_size_mb: int = 5

    # App
    log_level: str = "INFO"
    debug: bool = False

    @property
    def sqlalchemy_url(self) -> str:
        """Construct the relational database URL"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
