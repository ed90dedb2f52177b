"""Application configuration for the photo service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pydantic settings sourced from environment variables."""

    upload_dir: Path = Field(default=Path("./public/uploads"))
    users_file: Path = Field(default=Path("./users.json"))
    jpeg_quality: int = Field(
        default=70,
        ge=1,
        le=100,
        description="JPEG quality used when re-encoding uploaded .jpg/.jpeg files.",
    )
    png_compress_level: int = Field(
        default=9,
        ge=0,
        le=9,
        description="zlib effort used when re-encoding uploaded .png files.",
    )
    compressed_suffix: str = Field(
        default="_compressed",
        description="Suffix of the sibling file written before swapping re-encoded bytes into place.",
    )
    placeholder_token: str = Field(
        default="test-token",
        description="Constant token returned by a successful login. Carries no session meaning.",
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of origins allowed by the CORS middleware.",
    )
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
    )

    @field_validator("compressed_suffix")
    @classmethod
    def _validate_suffix(cls, value: str) -> str:
        if not value or "/" in value:
            raise ValueError("COMPRESSED_SUFFIX must be a non-empty filename suffix")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""
    settings = Settings()
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    return settings
