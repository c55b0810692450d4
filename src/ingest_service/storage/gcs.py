"""Google Cloud Storage operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Protocol

from google.cloud import storage
from google.oauth2 import service_account

from ..config import Settings, get_settings
from ..errors import StorageError
from .credentials import resolve_service_account_key

logger = logging.getLogger(__name__)


@dataclass
class StoredObject:
    """Where an uploaded object ended up."""

    bucket: str
    key: str

    @property
    def gcs_uri(self) -> str:
        return f"gs://{self.bucket}/{self.key}"


class ObjectStorage(Protocol):
    """Remote object storage used by the upload pipeline."""

    def upload_file(self, path: str | Path, key: str, content_type: str) -> StoredObject:
        ...

    def presign(self, key: str, ttl_seconds: int | None = None) -> str:
        ...


def _get_credentials(settings: Settings):
    """Get GCP credentials from service account key."""
    key = resolve_service_account_key(
        settings.google_service_account_key, settings.firebase_service_account_key
    )
    if key is None:
        return None
    if isinstance(key, Path):
        return service_account.Credentials.from_service_account_file(str(key))
    return service_account.Credentials.from_service_account_info(key)


def _get_storage_client(settings: Settings) -> storage.Client:
    credentials = _get_credentials(settings)
    return storage.Client(project=settings.google_project_id, credentials=credentials)


class GCSObjectStorage:
    """ObjectStorage backed by a single GCS bucket."""

    def __init__(self, settings: Settings | None = None, client: storage.Client | None = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> storage.Client:
        if self._client is None:
            self._client = _get_storage_client(self.settings)
        return self._client

    @property
    def bucket_name(self) -> str:
        return self.settings.asset_gcs_bucket

    def upload_file(self, path: str | Path, key: str, content_type: str) -> StoredObject:
        """
        Upload a local file under ``key``.

        The blob is streamed from disk; the file is never read into memory.

        Raises:
            StorageError: If the upload is not acknowledged.
        """
        blob = self.client.bucket(self.bucket_name).blob(key)
        try:
            blob.upload_from_filename(str(path), content_type=content_type)
        except Exception as e:
            raise StorageError(diagnostic=f"GCS upload of {key} failed: {e}") from e

        stored = StoredObject(bucket=self.bucket_name, key=key)
        logger.info(f"Uploaded to {stored.gcs_uri}")
        return stored

    def presign(self, key: str, ttl_seconds: int | None = None) -> str:
        """
        Create a V4 signed GET URL for ``key``.

        Signing is local to the credentials; nothing in the bucket changes.
        """
        ttl_seconds = ttl_seconds or self.settings.signed_url_ttl_seconds
        blob = self.client.bucket(self.bucket_name).blob(key)
        try:
            return blob.generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=ttl_seconds),
                method="GET",
            )
        except Exception as e:
            raise StorageError(diagnostic=f"Failed to sign URL for {key}: {e}") from e
