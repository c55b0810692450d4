from .gcs import GCSObjectStorage, ObjectStorage, StoredObject
from .firestore import FirestoreVideoStore, get_firestore_client
from .keys import derive_thumbnail_key, derive_video_key
from .staging import discard, staging_path, write_upload

__all__ = [
    "GCSObjectStorage",
    "ObjectStorage",
    "StoredObject",
    "FirestoreVideoStore",
    "get_firestore_client",
    "derive_thumbnail_key",
    "derive_video_key",
    "discard",
    "staging_path",
    "write_upload",
]
