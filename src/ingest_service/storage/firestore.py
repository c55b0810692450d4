"""Firestore operations for video records."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore

from ..config import Settings, get_settings
from ..errors import StorageError
from ..pipeline.types import VideoRecord
from .credentials import resolve_service_account_key

logger = logging.getLogger(__name__)

_app: firebase_admin.App | None = None


def _get_credentials(settings: Settings):
    """Get Firebase credentials from service account key."""
    key = resolve_service_account_key(
        settings.firebase_service_account_key, settings.google_service_account_key
    )
    if key is None:
        return None
    return credentials.Certificate(str(key) if isinstance(key, Path) else key)


def _initialize_firebase(settings: Settings) -> firebase_admin.App:
    """Initialize Firebase Admin SDK."""
    global _app
    if _app is not None:
        return _app

    if firebase_admin._apps:
        _app = firebase_admin.get_app()
        return _app

    cred = _get_credentials(settings)
    if cred:
        _app = firebase_admin.initialize_app(cred)
    else:
        _app = firebase_admin.initialize_app()

    return _app


def get_firestore_client(settings: Settings | None = None):
    """Get a Firestore client."""
    settings = settings or get_settings()
    _initialize_firebase(settings)
    return firestore.client()


# Video document structure:
# videos/{videoId}
# {
#   userId: string
#   title: string
#   description: string
#   videoKey: string (optional, object key in the asset bucket)
#   thumbnailKey: string (optional)
#   createdAt: string (ISO)
#   updatedAt: string (ISO)
# }


class FirestoreVideoStore:
    """RecordStore backed by a Firestore collection."""

    def __init__(self, settings: Settings | None = None, client=None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_firestore_client(self.settings)
        return self._client

    def _doc(self, video_id: str):
        return self.client.collection(self.settings.videos_collection).document(video_id)

    @staticmethod
    def _to_record(doc) -> VideoRecord | None:
        if not doc.exists:
            return None
        data = doc.to_dict()
        data["id"] = doc.id
        return VideoRecord.from_dict(data)

    def get_video(self, video_id: str) -> VideoRecord | None:
        """Get a video by ID."""
        try:
            doc = self._doc(video_id).get()
        except Exception as e:
            raise StorageError(diagnostic=f"Firestore read of {video_id} failed: {e}") from e

        return self._to_record(doc)

    def update_video(self, video_id: str, updates: dict[str, Any]) -> VideoRecord:
        """
        Set only the given fields on a video document.

        Fields not named in ``updates`` keep whatever the document holds,
        so concurrent video and thumbnail uploads never clear each other's key.
        The document is read back and returned.
        """
        updates = {**updates, "updatedAt": datetime.utcnow().isoformat() + "Z"}
        doc_ref = self._doc(video_id)
        try:
            doc_ref.update(updates)
            record = self._to_record(doc_ref.get())
        except Exception as e:
            raise StorageError(diagnostic=f"Firestore update of {video_id} failed: {e}") from e

        if record is None:
            raise StorageError(diagnostic=f"Video {video_id} vanished during update")

        logger.info(f"Updated video {video_id}: {', '.join(sorted(updates))}")
        return record
