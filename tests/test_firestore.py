"""Tests for the Firestore video store."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from ingest_service.errors import StorageError
from ingest_service.pipeline.types import VideoRecord
from ingest_service.storage.firestore import FirestoreVideoStore


@pytest.fixture
def firestore_client():
    return MagicMock()


@pytest.fixture
def doc_ref(firestore_client):
    return firestore_client.collection.return_value.document.return_value


def test_get_video(settings, firestore_client, doc_ref):
    snapshot = MagicMock()
    snapshot.exists = True
    snapshot.id = "video-abc"
    snapshot.to_dict.return_value = {
        "userId": "user-123",
        "title": "Boots demo",
        "videoKey": "landscape/abc.mp4",
        "createdAt": "2024-01-15T10:30:00Z",
    }
    doc_ref.get.return_value = snapshot
    store = FirestoreVideoStore(settings, client=firestore_client)

    record = store.get_video("video-abc")

    firestore_client.collection.assert_called_with("videos")
    firestore_client.collection.return_value.document.assert_called_with("video-abc")
    assert record == VideoRecord(
        id="video-abc",
        user_id="user-123",
        title="Boots demo",
        video_key="landscape/abc.mp4",
        created_at="2024-01-15T10:30:00Z",
    )


def test_get_missing_video(settings, firestore_client, doc_ref):
    doc_ref.get.return_value = MagicMock(exists=False)
    store = FirestoreVideoStore(settings, client=firestore_client)

    assert store.get_video("nope") is None


def test_update_video_sets_only_given_fields(settings, firestore_client, doc_ref):
    snapshot = MagicMock()
    snapshot.exists = True
    snapshot.id = "video-abc"
    snapshot.to_dict.return_value = {
        "userId": "user-123",
        "videoKey": "portrait/xyz.mp4",
        "thumbnailKey": "thumbnails/kept.png",
    }
    doc_ref.get.return_value = snapshot
    store = FirestoreVideoStore(settings, client=firestore_client)

    updated = store.update_video("video-abc", {"videoKey": "portrait/xyz.mp4"})

    updates = doc_ref.update.call_args[0][0]
    assert set(updates) == {"videoKey", "updatedAt"}
    assert updates["videoKey"] == "portrait/xyz.mp4"
    assert updates["updatedAt"].endswith("Z")
    assert updated.video_key == "portrait/xyz.mp4"
    assert updated.thumbnail_key == "thumbnails/kept.png"


def test_update_failure_is_storage_error(settings, firestore_client, doc_ref):
    doc_ref.update.side_effect = RuntimeError("DEADLINE_EXCEEDED")
    store = FirestoreVideoStore(settings, client=firestore_client)

    with pytest.raises(StorageError) as exc_info:
        store.update_video("video-abc", {"videoKey": "landscape/abc.mp4"})

    assert "DEADLINE_EXCEEDED" in exc_info.value.diagnostic
