"""Application settings and configuration helpers."""
from functools import lru_cache
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class Settings(BaseModel):
    """Runtime configuration loaded from environment variables."""

    database_url: str = Field(
        default="sqlite+aiosqlite:///./dayzone.db", alias="DATABASE_URL"
    )
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    access_token_expires_minutes: int = Field(
        default=60 * 24, alias="ACCESS_TOKEN_EXPIRES_MINUTES"
    )
    upload_dir: str = Field(default="./uploads", alias="UPLOAD_DIR")
    admin_password: str = Field(default="admin", alias="ADMIN_PASSWORD")
    seed_sample_data: bool = Field(default=True, alias="SEED_SAMPLE_DATA")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance built from the environment."""

    values = {
        name: os.environ[field.alias]
        for name, field in Settings.model_fields.items()
        if field.alias in os.environ
    }
    return Settings(**values)
