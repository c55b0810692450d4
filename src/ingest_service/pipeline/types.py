"""Data types shared by the upload pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass
class VideoRecord:
    """Video metadata as held by the record store.

    ``video_key`` and ``thumbnail_key`` are bare object keys; URLs are
    derived from them on every read and never stored.
    """

    id: str
    user_id: str
    title: str = ""
    description: str = ""
    video_key: str | None = None
    thumbnail_key: str | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VideoRecord:
        """Create from dictionary."""
        return cls(
            id=data["id"],
            user_id=data.get("userId", data.get("user_id", "")),
            title=data.get("title", ""),
            description=data.get("description", ""),
            video_key=data.get("videoKey", data.get("video_key")),
            thumbnail_key=data.get("thumbnailKey", data.get("thumbnail_key")),
            created_at=data.get("createdAt", data.get("created_at", "")),
            updated_at=data.get("updatedAt", data.get("updated_at", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (camelCase for Firestore compatibility)."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "videoKey": self.video_key,
            "thumbnailKey": self.thumbnail_key,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class RecordStore(Protocol):
    """Per-row access to video records."""

    def get_video(self, video_id: str) -> VideoRecord | None:
        ...

    def update_video(self, video_id: str, updates: dict[str, Any]) -> VideoRecord:
        """Set only the given document fields (camelCase) and return the stored record."""
        ...
