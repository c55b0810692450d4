"""Shared test helpers: fakes for the pipeline's collaborators."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Sequence
from urllib.parse import urlparse

import jwt

from ingest_service.config import Settings
from ingest_service.pipeline.types import VideoRecord
from ingest_service.processing.runner import ToolResult
from ingest_service.storage.gcs import StoredObject

JWT_SECRET = "test-secret-for-ingest-service-tokens"
OWNER_ID = "user-123"
OTHER_USER_ID = "user-456"
VIDEO_ID = "video-abc"


class FakeRecordStore:
    """In-memory RecordStore."""

    def __init__(self, records: list[VideoRecord] | None = None):
        self.records = {r.id: r for r in records or []}
        self.fail_updates = False
        self.updates: list[tuple[str, dict]] = []

    def get_video(self, video_id: str) -> VideoRecord | None:
        record = self.records.get(video_id)
        if record is None:
            return None
        return VideoRecord.from_dict(record.to_dict())

    def update_video(self, video_id: str, updates: dict) -> VideoRecord:
        if self.fail_updates:
            raise RuntimeError("database is locked")
        self.updates.append((video_id, dict(updates)))
        data = self.records[video_id].to_dict()
        data.update(updates, updatedAt="2024-02-01T00:00:00Z")
        self.records[video_id] = VideoRecord.from_dict(data)
        return VideoRecord.from_dict(data)


class FakeObjectStorage:
    """In-memory ObjectStorage; signed URLs resolve back through ``fetch``."""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail_uploads = False
        self.presign_calls = 0

    def upload_file(self, path, key: str, content_type: str) -> StoredObject:
        if self.fail_uploads:
            raise RuntimeError("503 Service Unavailable")
        self.objects[key] = (Path(path).read_bytes(), content_type)
        return StoredObject(bucket="test-bucket", key=key)

    def presign(self, key: str, ttl_seconds: int | None = None) -> str:
        self.presign_calls += 1
        return f"https://storage.test/{key}?expires={ttl_seconds}&sig=abc"

    def fetch(self, url: str) -> bytes:
        key = urlparse(url).path.lstrip("/")
        return self.objects[key][0]


class FakeToolRunner:
    """Scripted ffprobe/ffmpeg.

    ffmpeg "remuxes" by writing ``REMUX_MARKER`` followed by the input bytes,
    so the stored object can be told apart from the original upload.
    """

    REMUX_MARKER = b"moov-first:"

    def __init__(self, width: int = 1920, height: int = 1080):
        self.width = width
        self.height = height
        self.probe_result: ToolResult | None = None
        self.remux_returncode = 0
        self.remux_writes_output = True
        self.remux_delay = 0.0
        self.calls: list[list[str]] = []

    def run(self, argv: Sequence[str], timeout: float) -> ToolResult:
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        tool = Path(argv[0]).name

        if tool == "ffprobe":
            if self.probe_result is not None:
                return self.probe_result
            payload = {"streams": [{"width": self.width, "height": self.height}]}
            return ToolResult(returncode=0, stdout=json.dumps(payload))

        if tool == "ffmpeg":
            source = Path(argv[argv.index("-i") + 1])
            output = Path(argv[-1])
            time.sleep(self.remux_delay)
            if self.remux_writes_output:
                output.write_bytes(self.REMUX_MARKER + source.read_bytes())
            if self.remux_returncode != 0:
                return ToolResult(returncode=self.remux_returncode, stderr="moov atom not found")
            return ToolResult(returncode=0)

        raise AssertionError(f"unexpected tool {argv[0]}")

    @property
    def tools_called(self) -> list[str]:
        return [Path(c[0]).name for c in self.calls]


def make_settings(staging_dir: Path, **overrides) -> Settings:
    values = {
        "GOOGLE_PROJECT_ID": "test-project",
        "ASSET_GCS_BUCKET": "test-bucket",
        "JWT_SECRET": JWT_SECRET,
        "STAGING_DIR": str(staging_dir),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def staged_files(staging_dir: Path) -> list[Path]:
    if not staging_dir.exists():
        return []
    return sorted(staging_dir.iterdir())


def make_token(sub: str | None = OWNER_ID, secret: str = JWT_SECRET, expires_in: int = 3600, **claims) -> str:
    payload = {"exp": int(time.time()) + expires_in, **claims}
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id: str = OWNER_ID) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub=user_id)}"}
