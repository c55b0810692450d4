"""Video and thumbnail upload routes."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from starlette.datastructures import UploadFile

from ...auth import require_user
from ...config import get_settings
from ...errors import InvalidRequest, NotFound, PayloadTooLarge
from ...pipeline.upload import UploadPipeline
from ...storage.firestore import FirestoreVideoStore
from ...storage.gcs import GCSObjectStorage

logger = logging.getLogger(__name__)

router = APIRouter()

# Room for multipart boundaries and headers around the file part
FORM_OVERHEAD_BYTES = 64 * 1024


class VideoResponse(BaseModel):
    """Response model for a video record."""

    id: str
    userId: str
    title: str = ""
    description: str = ""
    videoKey: str | None = None
    thumbnailKey: str | None = None
    videoUrl: str | None = None
    thumbnailUrl: str | None = None
    createdAt: str = ""
    updatedAt: str = ""


@lru_cache
def get_pipeline() -> UploadPipeline:
    settings = get_settings()
    return UploadPipeline(
        store=FirestoreVideoStore(settings),
        storage=GCSObjectStorage(settings),
        settings=settings,
    )


def _check_content_length(request: Request, limit: int) -> None:
    """Reject bodies that announce more than ``limit`` before reading them."""
    raw = request.headers.get("content-length")
    if raw is None:
        return
    try:
        length = int(raw)
    except ValueError:
        raise InvalidRequest("Invalid Content-Length header")
    if length > limit + FORM_OVERHEAD_BYTES:
        raise PayloadTooLarge("The file is too big to upload")


@router.post("/videos/{video_id}", response_model=VideoResponse)
async def upload_video(
    video_id: str,
    request: Request,
    user_id: str = Depends(require_user),
    pipeline: UploadPipeline = Depends(get_pipeline),
):
    """
    Upload the video file for an existing video record.

    - Checks ownership before the body is read
    - Probes geometry and remuxes for faststart
    - Stores the result under a landscape/portrait/other key
    """
    await pipeline.get_video(user_id, video_id)
    _check_content_length(request, pipeline.settings.max_video_bytes)

    logger.info(f"Uploading video for {video_id} by user {user_id}")

    async with request.form(max_files=1) as form:
        video = form.get("video")
        if not isinstance(video, UploadFile):
            raise InvalidRequest("Video file missing")

        record = await pipeline.handle_video_upload(
            owner_id=user_id,
            video_id=video_id,
            source=video.file,
            declared_type=video.content_type,
            declared_size=video.size,
            is_disconnected=request.is_disconnected,
        )

    return VideoResponse(**await pipeline.present(record))


@router.post("/thumbnail_upload/{video_id}", response_model=VideoResponse)
async def upload_thumbnail(
    video_id: str,
    request: Request,
    user_id: str = Depends(require_user),
    pipeline: UploadPipeline = Depends(get_pipeline),
):
    """Upload a JPEG or PNG thumbnail for an existing video record."""
    await pipeline.get_video(user_id, video_id)
    _check_content_length(request, pipeline.settings.max_thumbnail_bytes)

    logger.info(f"Uploading thumbnail for {video_id} by user {user_id}")

    async with request.form(max_files=1) as form:
        thumbnail = form.get("thumbnail")
        if not isinstance(thumbnail, UploadFile):
            raise InvalidRequest("Thumbnail is missing")

        record = await pipeline.handle_thumbnail_upload(
            owner_id=user_id,
            video_id=video_id,
            source=thumbnail.file,
            declared_type=thumbnail.content_type,
            declared_size=thumbnail.size,
            is_disconnected=request.is_disconnected,
        )

    return VideoResponse(**await pipeline.present(record))


@router.get("/videos/{video_id}", response_model=VideoResponse)
async def get_video(
    video_id: str,
    user_id: str = Depends(require_user),
    pipeline: UploadPipeline = Depends(get_pipeline),
):
    """Get a video record with freshly signed URLs."""
    record = await pipeline.get_video(user_id, video_id)
    return VideoResponse(**await pipeline.present(record))


@router.get("/thumbnails/{video_id}")
async def get_thumbnail(
    video_id: str,
    pipeline: UploadPipeline = Depends(get_pipeline),
):
    """Redirect to a signed URL for the video's thumbnail."""
    record = await pipeline.load_video(video_id)
    url = await pipeline.signed_url(record.thumbnail_key)
    if url is None:
        raise NotFound("Thumbnail not found")
    return RedirectResponse(url, status_code=307)
