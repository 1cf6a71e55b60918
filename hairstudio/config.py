from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", protected_namespaces=()
    )

    # General
    environment: str = Field("development", description="Deployment environment name.")
    log_level: str = Field("INFO", description="Root logger level.")

    # Gemini
    gemini_api_key: Optional[str] = Field(default=None, description="Server-side Gemini API key.")
    next_public_gemini_api_key: Optional[str] = Field(
        default=None,
        description="Browser-exposed key; only reported by the env check, never used.",
    )
    gemini_model: str = "gemini-2.5-flash-image"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout: float = Field(120.0, gt=0, description="Outbound request timeout in seconds.")
    gemini_temperature: float = 0.7
    gemini_top_k: int = 32
    gemini_top_p: float = 1.0
    gemini_max_output_tokens: int = 2048
    tryon_temperature: float = 0.4

    # Image processing
    model_image_max_dim: int = Field(1536, ge=1, description="Bounding box for the primary photo (pixels).")
    model_image_quality: float = Field(0.6, ge=0, le=1, description="JPEG quality for the primary photo (0-1).")
    reference_image_max_dim: int = Field(800, ge=1, description="Bounding box for reference images (pixels).")
    reference_image_quality: float = Field(0.6, ge=0, le=1, description="JPEG quality for reference images (0-1).")
    crop_quality: float = Field(0.95, ge=0, le=1, description="JPEG quality for cropped intermediates (0-1).")
    default_aspect_ratio: str = "3:4"
    max_upload_bytes: int = Field(10 * 1024 * 1024, ge=1, description="Largest accepted upload.")


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
