"""Random names for staged files and stored objects.

Keys are never checked against existing objects, so they must be unguessable
and collision-free: all randomness comes from ``secrets``.
"""

from __future__ import annotations

import secrets

from ..processing.probe import GeometryClass

KEY_ENTROPY_BYTES = 32

THUMBNAIL_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
}


def _token() -> str:
    return secrets.token_urlsafe(KEY_ENTROPY_BYTES)


def derive_video_key(classification: GeometryClass) -> str:
    """Object key for a processed video, e.g. ``landscape/<token>.mp4``."""
    return f"{GeometryClass(classification).value}/{_token()}.mp4"


def derive_thumbnail_key(content_type: str) -> str:
    """Object key for a thumbnail image, e.g. ``thumbnails/<token>.png``."""
    ext = THUMBNAIL_EXTENSIONS.get(content_type)
    if ext is None:
        raise ValueError(f"No extension known for {content_type}")
    return f"thumbnails/{_token()}.{ext}"


def staging_name() -> str:
    """File name for a staged upload."""
    return _token()
