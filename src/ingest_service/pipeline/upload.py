"""Upload pipeline: validate, stage, probe, remux, store, record, clean up."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, BinaryIO, Callable, TypeVar

from ..config import Settings, get_settings
from ..errors import (
    ClientDisconnected,
    Forbidden,
    IngestError,
    InvalidRequest,
    NotFound,
    PayloadTooLarge,
    StorageError,
    UnsupportedMediaType,
)
from ..processing.faststart import faststart_output_path, remux_for_faststart
from ..processing.probe import probe_geometry
from ..processing.runner import SubprocessToolRunner, ToolRunner
from ..storage.gcs import ObjectStorage
from ..storage.keys import THUMBNAIL_EXTENSIONS, derive_thumbnail_key, derive_video_key
from ..storage.staging import discard, staging_path, write_upload
from .types import RecordStore, VideoRecord

logger = logging.getLogger(__name__)

VIDEO_CONTENT_TYPE = "video/mp4"
THUMBNAIL_CONTENT_TYPES = frozenset(THUMBNAIL_EXTENSIONS)

DisconnectCheck = Callable[[], Awaitable[bool]]

T = TypeVar("T")


class UploadPipeline:
    """Runs video and thumbnail uploads against the configured collaborators.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        store: RecordStore,
        storage: ObjectStorage,
        runner: ToolRunner | None = None,
        settings: Settings | None = None,
    ):
        self.store = store
        self.storage = storage
        self.runner = runner or SubprocessToolRunner()
        self.settings = settings or get_settings()

    async def load_video(self, video_id: str) -> VideoRecord:
        """Load a video without any ownership check."""
        if not video_id:
            raise InvalidRequest("Invalid video ID")

        try:
            record = await asyncio.to_thread(self.store.get_video, video_id)
        except IngestError:
            raise
        except Exception as e:
            raise StorageError(diagnostic=f"Record lookup for {video_id} failed: {e}") from e

        if record is None:
            raise NotFound("Couldn't find video")
        return record

    async def get_video(self, owner_id: str, video_id: str) -> VideoRecord:
        """Load a video and check that ``owner_id`` owns it."""
        record = await self.load_video(video_id)
        if record.user_id != owner_id:
            raise Forbidden("You do not own this video")
        return record

    async def handle_video_upload(
        self,
        owner_id: str,
        video_id: str,
        source: BinaryIO,
        declared_type: str | None,
        declared_size: int | None,
        is_disconnected: DisconnectCheck | None = None,
    ) -> VideoRecord:
        """
        Process an uploaded video and attach it to ``video_id``.

        Ownership, size and type are checked before anything touches disk.
        Every file staged during the run is removed before this returns,
        whether it succeeds, raises or is cancelled.
        """
        await self.get_video(owner_id, video_id)

        if declared_size is not None and declared_size > self.settings.max_video_bytes:
            raise PayloadTooLarge("The file is too big to upload")
        if declared_type != VIDEO_CONTENT_TYPE:
            raise UnsupportedMediaType("The video must be of type video/mp4")

        # Both paths are fixed up front so cleanup covers whatever the workers leave behind
        staged = staging_path(self.settings.staging_dir)
        remuxed = faststart_output_path(staged)
        try:
            await _run_blocking(write_upload, source, staged)
            await self._check_connected(is_disconnected)

            classification = await _run_blocking(
                probe_geometry,
                staged,
                self.runner,
                self.settings.tool_timeout_seconds,
                self.settings.ffprobe_path,
            )
            await self._check_connected(is_disconnected)

            await _run_blocking(
                remux_for_faststart,
                staged,
                self.runner,
                self.settings.tool_timeout_seconds,
                self.settings.ffmpeg_path,
            )
            await self._check_connected(is_disconnected)

            key = derive_video_key(classification)
            await self._upload(remuxed, key, VIDEO_CONTENT_TYPE)
            record = await self._save(video_id, {"videoKey": key})
        except IngestError as e:
            logger.warning(f"Video upload for {video_id} failed ({e.kind}): {e.diagnostic or e.message}")
            raise
        finally:
            _discard_all(staged, remuxed)

        logger.info(f"Video {video_id} stored at {record.video_key} for user {owner_id}")
        return record

    async def handle_thumbnail_upload(
        self,
        owner_id: str,
        video_id: str,
        source: BinaryIO,
        declared_type: str | None,
        declared_size: int | None,
        is_disconnected: DisconnectCheck | None = None,
    ) -> VideoRecord:
        """Store a thumbnail image for ``video_id``. No probing or remuxing."""
        await self.get_video(owner_id, video_id)

        if declared_size is not None and declared_size > self.settings.max_thumbnail_bytes:
            raise PayloadTooLarge("The thumbnail is too big to upload")
        if declared_type not in THUMBNAIL_CONTENT_TYPES:
            raise UnsupportedMediaType("The thumbnail must be a JPEG or PNG image")

        staged = staging_path(self.settings.staging_dir)
        try:
            await _run_blocking(write_upload, source, staged)
            await self._check_connected(is_disconnected)

            key = derive_thumbnail_key(declared_type)
            await self._upload(staged, key, declared_type)
            record = await self._save(video_id, {"thumbnailKey": key})
        except IngestError as e:
            logger.warning(f"Thumbnail upload for {video_id} failed ({e.kind}): {e.diagnostic or e.message}")
            raise
        finally:
            _discard_all(staged)

        logger.info(f"Thumbnail for {video_id} stored at {record.thumbnail_key}")
        return record

    async def present(self, record: VideoRecord) -> dict[str, Any]:
        """Record as returned to clients, with fresh signed URLs in place of keys."""
        data = record.to_dict()
        data["videoUrl"] = await self.signed_url(record.video_key)
        data["thumbnailUrl"] = await self.signed_url(record.thumbnail_key)
        return data

    async def signed_url(self, key: str | None) -> str | None:
        if not key:
            return None
        try:
            return await asyncio.to_thread(self.storage.presign, key, self.settings.signed_url_ttl_seconds)
        except IngestError:
            raise
        except Exception as e:
            raise StorageError(diagnostic=f"Failed to sign URL for {key}: {e}") from e

    async def _upload(self, path: Path, key: str, content_type: str) -> None:
        try:
            await _run_blocking(self.storage.upload_file, path, key, content_type)
        except IngestError:
            raise
        except Exception as e:
            raise StorageError(diagnostic=f"Upload of {key} failed: {e}") from e

    async def _save(self, video_id: str, updates: dict[str, Any]) -> VideoRecord:
        # Only reached once the object upload has returned; a failure here orphans the object.
        try:
            return await asyncio.to_thread(self.store.update_video, video_id, updates)
        except IngestError:
            raise
        except Exception as e:
            raise StorageError(diagnostic=f"Record update for {video_id} failed: {e}") from e

    @staticmethod
    async def _check_connected(is_disconnected: DisconnectCheck | None) -> None:
        if is_disconnected is not None and await is_disconnected():
            raise ClientDisconnected()


async def _run_blocking(func: Callable[..., T], *args: Any) -> T:
    """
    Run ``func`` in a worker thread.

    A thread cannot be interrupted, so on cancellation this waits for the
    worker to finish before re-raising. Any file it writes then exists by
    the time the caller's cleanup runs.
    """
    future = asyncio.ensure_future(asyncio.to_thread(func, *args))
    try:
        return await asyncio.shield(future)
    except asyncio.CancelledError:
        await asyncio.wait({future})
        if not future.cancelled():
            future.exception()
        raise


def _discard_all(*paths: Path | None) -> None:
    for path in paths:
        discard(path)
