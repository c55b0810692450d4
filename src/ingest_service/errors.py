"""Error taxonomy for the ingest service.

Every error the HTTP layer can return is an ``IngestError``. ``kind`` and
``message`` are what the client sees; ``diagnostic`` holds tool stderr or
provider output and is only ever logged.
"""

from __future__ import annotations


class IngestError(Exception):
    """Base class for client-visible failures."""

    kind = "InternalError"
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None, diagnostic: str | None = None):
        self.message = message or self.default_message
        self.diagnostic = diagnostic
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind, "message": self.message}


class InvalidRequest(IngestError):
    kind = "InvalidRequest"
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(IngestError):
    kind = "Unauthorized"
    status_code = 401
    default_message = "Couldn't validate credentials"


class Forbidden(IngestError):
    kind = "Forbidden"
    status_code = 403
    default_message = "You do not own this video"


class NotFound(IngestError):
    kind = "NotFound"
    status_code = 404
    default_message = "Couldn't find video"


class PayloadTooLarge(IngestError):
    kind = "PayloadTooLarge"
    status_code = 400
    default_message = "File is too large"


class UnsupportedMediaType(IngestError):
    kind = "UnsupportedMediaType"
    status_code = 400
    default_message = "Unsupported media type"


class ClientDisconnected(IngestError):
    kind = "ClientDisconnected"
    status_code = 499
    default_message = "Client disconnected"


class ProcessingError(IngestError):
    """An external tool exited non-zero, timed out or produced bad output."""

    kind = "ProcessingError"
    status_code = 500
    default_message = "Failed to process video"


class StagingError(IngestError):
    """Local filesystem failure while staging an upload."""

    kind = "IOError"
    status_code = 500
    default_message = "Failed to store upload"


class StorageError(IngestError):
    """Object storage or record store failure."""

    kind = "StorageError"
    status_code = 502
    default_message = "Failed to store asset"
