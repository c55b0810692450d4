"""Shared test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from ingest_service.config import Settings, get_settings
from ingest_service.pipeline.types import VideoRecord
from ingest_service.pipeline.upload import UploadPipeline
from tests.helpers import (
    JWT_SECRET,
    OWNER_ID,
    VIDEO_ID,
    FakeObjectStorage,
    FakeRecordStore,
    FakeToolRunner,
    make_settings,
)


@pytest.fixture
def staging_dir(tmp_path) -> Path:
    return tmp_path / "staging"


@pytest.fixture
def settings(staging_dir) -> Settings:
    return make_settings(staging_dir)


@pytest.fixture
def video_record() -> VideoRecord:
    return VideoRecord(
        id=VIDEO_ID,
        user_id=OWNER_ID,
        title="Boots demo",
        description="Unboxing",
        created_at="2024-01-15T10:30:00Z",
        updated_at="2024-01-15T10:30:00Z",
    )


@pytest.fixture
def record_store(video_record) -> FakeRecordStore:
    return FakeRecordStore([video_record])


@pytest.fixture
def object_storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def tool_runner() -> FakeToolRunner:
    return FakeToolRunner()


@pytest.fixture
def pipeline(record_store, object_storage, tool_runner, settings) -> UploadPipeline:
    return UploadPipeline(
        store=record_store,
        storage=object_storage,
        runner=tool_runner,
        settings=settings,
    )


@pytest.fixture
def env(monkeypatch, staging_dir):
    """Point get_settings() at test values."""
    monkeypatch.setenv("GOOGLE_PROJECT_ID", "test-project")
    monkeypatch.setenv("ASSET_GCS_BUCKET", "test-bucket")
    monkeypatch.setenv("JWT_SECRET", JWT_SECRET)
    monkeypatch.setenv("STAGING_DIR", str(staging_dir))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
