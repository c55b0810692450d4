from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the ingest service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Google Cloud
    google_project_id: str = Field(..., alias="GOOGLE_PROJECT_ID")
    google_service_account_key: str | None = Field(default=None, alias="GOOGLE_SERVICE_ACCOUNT_KEY")

    # GCS Storage
    asset_gcs_bucket: str = Field(..., alias="ASSET_GCS_BUCKET")
    signed_url_ttl_seconds: int = Field(default=60 * 60, alias="ASSET_SIGNED_URL_TTL_SECONDS")

    # Firebase
    firebase_service_account_key: str | None = Field(default=None, alias="FIREBASE_SERVICE_ACCOUNT_KEY")
    videos_collection: str = Field(default="videos", alias="VIDEOS_COLLECTION")

    # Auth (HS256 bearer tokens issued by the account service)
    jwt_secret: str = Field(..., alias="JWT_SECRET")

    # Local scratch area for uploads in flight
    staging_dir: Path = Field(default=Path("/tmp/ingest-staging"), alias="STAGING_DIR")

    # Upload limits
    max_video_bytes: int = Field(default=1 << 30, alias="MAX_VIDEO_BYTES")
    max_thumbnail_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_THUMBNAIL_BYTES")

    # External tools
    ffprobe_path: str = Field(default="ffprobe", alias="FFPROBE_PATH")
    ffmpeg_path: str = Field(default="ffmpeg", alias="FFMPEG_PATH")
    tool_timeout_seconds: float = Field(default=300, alias="TOOL_TIMEOUT_SECONDS", gt=0)

    # FastAPI
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8091, alias="APP_PORT")
    debug: bool = Field(default=False, alias="DEBUG")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
